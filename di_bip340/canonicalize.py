"""
Document canonicalization for the two BIP-340 cryptosuites.

- **JCS** (RFC 8785): deterministic key ordering, fixed number
  formatting, no insignificant whitespace.  Cheap and synchronous.
- **RDFC-1.0**: RDF dataset canonicalization of the JSON-LD document,
  emitted as sorted N-Quads.  Keys the JSON-LD context leaves undefined
  are rejected rather than dropped, so every value is covered by the
  hash.  Blank-node relabeling can take several passes over the graph,
  so the async entry point runs it on a worker thread instead of the
  caller's event loop.

References
----------
- RFC 8785          JSON Canonicalization Scheme
- W3C RDFC-1.0      RDF Dataset Canonicalization
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Set

import rfc8785
from pyld import jsonld
from pyld.jsonld import JsonLdError

from .errors import Bip340Error, ErrorKind

logger = logging.getLogger(__name__)

DocumentLoader = Callable[..., Any]

# PyLD's name for the algorithm standardized as RDFC-1.0.
_PYLD_RDFC_ALGORITHM = "URDNA2015"
_NQUADS = "application/n-quads"


class Algorithm(Enum):
    """Canonicalization algorithm selected by the cryptosuite name."""

    JCS = "JCS"
    RDFC = "RDFC-1.0"


def canonicalize_jcs(obj: Mapping[str, Any]) -> str:
    try:
        return rfc8785.dumps(dict(obj)).decode("utf-8")
    except rfc8785.CanonicalizationError as exc:
        raise Bip340Error(
            ErrorKind.CANONICALIZATION_ERROR, f"JCS canonicalization failed: {exc}",
        ) from exc


def _data_terms(node: Any, found: Set[str]) -> Set[str]:
    """Collect every non-keyword key carrying a value, skipping contexts."""
    if isinstance(node, Mapping):
        for key, value in node.items():
            if key == "@context" or value is None:
                continue
            if not key.startswith("@"):
                found.add(key)
            _data_terms(value, found)
    elif isinstance(node, list):
        for item in node:
            _data_terms(item, found)
    return found


def _check_terms(obj: Mapping[str, Any], options: Dict[str, Any]) -> None:
    """
    Reject documents whose keys the JSON-LD context does not define.

    Expansion silently drops undefined terms, so their values would never
    reach the N-Quads and could be changed without touching the hash.
    Compacting the document against its own context and comparing key
    sets exposes what expansion threw away.
    """
    context = obj.get("@context")
    compacted = jsonld.compact(
        dict(obj), {"@context": context} if context is not None else {}, options,
    )
    dropped = _data_terms(obj, set()) - _data_terms(compacted, set())
    if dropped:
        raise Bip340Error(
            ErrorKind.CANONICALIZATION_ERROR,
            "terms not defined by the JSON-LD context: " + ", ".join(sorted(dropped)),
        )


def canonicalize_rdfc(
    obj: Mapping[str, Any],
    document_loader: Optional[DocumentLoader] = None,
) -> str:
    loader_options: Dict[str, Any] = {}
    if document_loader is not None:
        loader_options["documentLoader"] = document_loader
    options = {"algorithm": _PYLD_RDFC_ALGORITHM, "format": _NQUADS, **loader_options}
    try:
        _check_terms(obj, loader_options)
        return jsonld.normalize(dict(obj), options)
    except JsonLdError as exc:
        raise Bip340Error(
            ErrorKind.CANONICALIZATION_ERROR, f"RDFC-1.0 canonicalization failed: {exc}",
        ) from exc


def canonicalize(
    obj: Mapping[str, Any],
    algorithm: Algorithm,
    document_loader: Optional[DocumentLoader] = None,
) -> str:
    if algorithm is Algorithm.RDFC:
        return canonicalize_rdfc(obj, document_loader)
    return canonicalize_jcs(obj)


async def canonicalize_async(
    obj: Mapping[str, Any],
    algorithm: Algorithm,
    document_loader: Optional[DocumentLoader] = None,
) -> str:
    """Like :func:`canonicalize`, with RDFC moved off the event loop."""
    if algorithm is Algorithm.RDFC:
        logger.debug("running RDFC-1.0 canonicalization in worker thread")
        return await asyncio.to_thread(canonicalize_rdfc, obj, document_loader)
    return canonicalize_jcs(obj)
