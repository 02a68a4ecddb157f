"""
BIP-340 Data Integrity cryptosuites.

Two suites share one pipeline and differ only in canonicalization:

    bip-340-jcs-2025    JSON Canonicalization Scheme
    bip-340-rdfc-2025   RDF Dataset Canonicalization (RDFC-1.0)

**Create:**

    canonicalConfig   = canonicalize(options + @context)
    canonicalDocument = canonicalize(document)
    hash              = SHA-256(canonicalConfig ‖ canonicalDocument)
    proofValue        = 'z' + base58btc(schnorr_sign(hash))

**Verify:** strip ``proof`` from the document and ``proofValue`` from the
proof, recompute the same hash and check the signature with the bound
Multikey.  The proof's ``verificationMethod`` must name that Multikey in
both directions, otherwise the operation fails before any signing or
verification happens.

Every step exists in a synchronous and an ``async`` form; only
canonicalization suspends, signing and verification never do.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .canonicalize import (
    Algorithm,
    DocumentLoader,
    canonicalize,
    canonicalize_async,
)
from .curve import SIGNATURE_BYTES
from .encoding import decode_multibase, encode_multibase
from .errors import Bip340Error, ErrorKind
from .hash import generate_hash
from .multikey import Multikey

logger = logging.getLogger(__name__)

# ── suite identifiers ───────────────────────────────────────────────────
PROOF_TYPE = "DataIntegrityProof"
BIP340_JCS_2025 = "bip-340-jcs-2025"
BIP340_RDFC_2025 = "bip-340-rdfc-2025"
CRYPTOSUITES = (BIP340_JCS_2025, BIP340_RDFC_2025)

# XML Schema dateTimeStamp, as used for ``created`` / ``expires``.
_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)


@dataclass
class CryptosuiteResult:
    """Outcome of :meth:`Cryptosuite.verify_proof`."""

    verified: bool
    verified_document: Optional[Dict[str, Any]] = None


class Cryptosuite:
    """
    Canonicalize → hash → sign / verify, bound to one :class:`Multikey`.

    Parameters
    ----------
    cryptosuite : str
        ``"bip-340-jcs-2025"`` or ``"bip-340-rdfc-2025"``.
    multikey : Multikey
        Signer (has a private key) or verifier.
    document_loader : callable, optional
        PyLD document loader used to resolve remote ``@context`` URLs
        during RDFC canonicalization.
    """

    type = PROOF_TYPE

    def __init__(
        self,
        cryptosuite: str,
        multikey: Multikey,
        document_loader: Optional[DocumentLoader] = None,
    ) -> None:
        if cryptosuite not in CRYPTOSUITES:
            raise Bip340Error(
                ErrorKind.UNSUPPORTED_CRYPTOSUITE,
                f"unknown cryptosuite {cryptosuite!r}; "
                f"expected one of {', '.join(CRYPTOSUITES)}",
            )
        self.cryptosuite = cryptosuite
        self.multikey = multikey
        self.algorithm = Algorithm.RDFC if "rdfc" in cryptosuite else Algorithm.JCS
        self._document_loader = document_loader

    # ── canonicalization ───────────────────────────────────────────────

    def canonicalize(self, obj: Mapping[str, Any]) -> str:
        return canonicalize(obj, self.algorithm, self._document_loader)

    async def canonicalize_async(self, obj: Mapping[str, Any]) -> str:
        return await canonicalize_async(obj, self.algorithm, self._document_loader)

    # ── proof configuration / document transform ───────────────────────

    def proof_configuration(self, options: Mapping[str, Any]) -> str:
        """Canonical form of the proof options (``proofValue`` excluded)."""
        return self.canonicalize(self._proof_config(options))

    async def proof_configuration_async(self, options: Mapping[str, Any]) -> str:
        return await self.canonicalize_async(self._proof_config(options))

    def transform_document(
        self,
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> str:
        """Canonical form of *document* after checking *options* target this suite."""
        self._check_suite(options)
        return self.canonicalize(document)

    async def transform_document_async(
        self,
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> str:
        self._check_suite(options)
        return await self.canonicalize_async(document)

    @staticmethod
    def generate_hash(canonical_config: str, canonical_document: str) -> bytes:
        return generate_hash(canonical_config, canonical_document)

    # ── serialization / verification ───────────────────────────────────

    def proof_serialization(
        self,
        hash_bytes: bytes,
        options: Mapping[str, Any],
    ) -> bytes:
        """Sign *hash_bytes* once ``verificationMethod`` is confirmed."""
        self._check_verification_method(options)
        return self.multikey.sign(hash_bytes)

    def proof_verification(
        self,
        hash_bytes: bytes,
        proof_bytes: bytes,
        options: Mapping[str, Any],
    ) -> bool:
        self._check_verification_method(options)
        return self.multikey.verify(proof_bytes, hash_bytes)

    # ── create ─────────────────────────────────────────────────────────

    def create_proof(
        self,
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Build a complete proof for *document*; the caller attaches it."""
        proof = self._initial_proof(document, options)
        canonical_config = self.proof_configuration(proof)
        canonical_document = self.transform_document(document, options)
        return self._finish_proof(proof, options, canonical_config, canonical_document)

    async def create_proof_async(
        self,
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> Dict[str, Any]:
        proof = self._initial_proof(document, options)
        canonical_config = await self.proof_configuration_async(proof)
        canonical_document = await self.transform_document_async(document, options)
        return self._finish_proof(proof, options, canonical_config, canonical_document)

    # ── verify ─────────────────────────────────────────────────────────

    def verify_proof(self, secured_document: Mapping[str, Any]) -> CryptosuiteResult:
        """
        Verify the ``proof`` embedded in *secured_document*.

        Returns ``verified=False`` (never raises) when the signature does
        not match or ``proofValue`` cannot be decoded to a signature.
        """
        document, options, proof_bytes = self._split(secured_document)
        canonical_document = self.transform_document(document, options)
        canonical_config = self.proof_configuration(options)
        return self._finish_verification(
            secured_document, options, proof_bytes,
            canonical_config, canonical_document,
        )

    async def verify_proof_async(
        self,
        secured_document: Mapping[str, Any],
    ) -> CryptosuiteResult:
        document, options, proof_bytes = self._split(secured_document)
        canonical_document = await self.transform_document_async(document, options)
        canonical_config = await self.proof_configuration_async(options)
        return self._finish_verification(
            secured_document, options, proof_bytes,
            canonical_config, canonical_document,
        )

    # ── internals ──────────────────────────────────────────────────────

    def _check_suite(self, options: Mapping[str, Any]) -> None:
        proof_type = options.get("type")
        if proof_type != self.type:
            raise Bip340Error(
                ErrorKind.TYPE_MISMATCH,
                f"proof type {proof_type!r} does not match {self.type!r}",
            )
        suite = options.get("cryptosuite")
        if suite != self.cryptosuite:
            raise Bip340Error(
                ErrorKind.CRYPTOSUITE_MISMATCH,
                f"cryptosuite {suite!r} does not match {self.cryptosuite!r}",
            )

    def _proof_config(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        self._check_suite(options)
        for name in ("created", "expires"):
            value = options.get(name)
            if value is not None and not (
                isinstance(value, str) and _DATETIME_RE.match(value)
            ):
                raise Bip340Error(
                    ErrorKind.INVALID_DATETIME,
                    f'"{name}" is not a valid XML Schema dateTime: {value!r}',
                )
        return {k: v for k, v in options.items() if k != "proofValue"}

    def _check_verification_method(self, options: Mapping[str, Any]) -> None:
        vm = options.get("verificationMethod")
        full_id = self.multikey.full_id()
        if vm != full_id:
            raise Bip340Error(
                ErrorKind.VERIFICATION_METHOD_MISMATCH,
                f"verificationMethod {vm!r} does not match multikey {full_id!r}",
            )

    @staticmethod
    def _initial_proof(
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> Dict[str, Any]:
        proof = {k: v for k, v in options.items() if k != "proofValue"}
        if "@context" in document:
            proof["@context"] = document["@context"]
        return proof

    def _finish_proof(
        self,
        proof: Dict[str, Any],
        options: Mapping[str, Any],
        canonical_config: str,
        canonical_document: str,
    ) -> Dict[str, Any]:
        hash_bytes = self.generate_hash(canonical_config, canonical_document)
        proof_bytes = self.proof_serialization(hash_bytes, options)
        proof["proofValue"] = encode_multibase(proof_bytes)
        logger.debug(
            "created %s proof for %s", self.cryptosuite, proof.get("verificationMethod"),
        )
        return proof

    @staticmethod
    def _split(secured_document: Mapping[str, Any]):
        proof = secured_document.get("proof")
        if not isinstance(proof, Mapping):
            raise Bip340Error(
                ErrorKind.PROOF_VERIFICATION_ERROR, "document has no proof object",
            )
        document = {k: v for k, v in secured_document.items() if k != "proof"}
        options = {k: v for k, v in proof.items() if k != "proofValue"}
        try:
            proof_bytes: Optional[bytes] = decode_multibase(proof.get("proofValue"))
        except Bip340Error as exc:
            logger.warning("undecodable proofValue: %s", exc.message)
            proof_bytes = None
        return document, options, proof_bytes

    def _finish_verification(
        self,
        secured_document: Mapping[str, Any],
        options: Mapping[str, Any],
        proof_bytes: Optional[bytes],
        canonical_config: str,
        canonical_document: str,
    ) -> CryptosuiteResult:
        hash_bytes = self.generate_hash(canonical_config, canonical_document)
        if proof_bytes is None or len(proof_bytes) != SIGNATURE_BYTES:
            # binding is still enforced for a malformed signature
            self._check_verification_method(options)
            verified = False
        else:
            verified = self.proof_verification(hash_bytes, proof_bytes, options)
        if not verified:
            logger.warning(
                "%s proof failed verification for %s",
                self.cryptosuite, options.get("verificationMethod"),
            )
            return CryptosuiteResult(verified=False)
        return CryptosuiteResult(verified=True, verified_document=dict(secured_document))
