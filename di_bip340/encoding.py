"""
Multibase base58btc codec.

Only the ``z`` (base58btc, Bitcoin alphabet) multibase is used: for
``publicKeyMultibase`` values and for ``proofValue`` signatures.
"""

from __future__ import annotations

import base58

from .errors import Bip340Error, ErrorKind

BASE58BTC_PREFIX = "z"


def encode_multibase(data: bytes) -> str:
    """``'z' + base58btc(data)``."""
    return BASE58BTC_PREFIX + base58.b58encode(bytes(data)).decode("ascii")


def decode_multibase(value: str) -> bytes:
    """
    Inverse of :func:`encode_multibase`.

    Raises ``INVALID_MULTIBASE`` on a missing ``z`` prefix or characters
    outside the base58btc alphabet.
    """
    if not isinstance(value, str) or not value.startswith(BASE58BTC_PREFIX):
        raise Bip340Error(
            ErrorKind.INVALID_MULTIBASE,
            "multibase value must be a base58btc string starting with 'z'",
        )
    try:
        return base58.b58decode(value[len(BASE58BTC_PREFIX):])
    except ValueError as exc:
        raise Bip340Error(
            ErrorKind.INVALID_MULTIBASE, f"invalid base58btc encoding: {exc}",
        ) from exc
