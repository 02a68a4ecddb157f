"""
W3C Data Integrity proofs over a BIP-340 cryptosuite.

Provides a single ``DataIntegrityProof`` class that wraps a
:class:`Cryptosuite` and adds the document-level checks around it:
required proof fields, proof purpose, domain and challenge binding.

Usage
-----
::

    from di_bip340 import Cryptosuite, DataIntegrityProof, Multikey

    signer = Multikey.from_private_key("#initialKey", controller, secret)
    di = DataIntegrityProof(Cryptosuite("bip-340-jcs-2025", signer))

    secured = di.add_proof(document, {
        "type": "DataIntegrityProof",
        "cryptosuite": "bip-340-jcs-2025",
        "verificationMethod": signer.full_id(),
        "proofPurpose": "assertionMethod",
    })

    result = di.verify_proof(
        media_type="application/json",
        document_bytes=json.dumps(secured).encode(),
        expected_proof_purpose="assertionMethod",
    )
    assert result.verified
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .cryptosuite import Cryptosuite, CryptosuiteResult
from .errors import Bip340Error, ErrorKind

logger = logging.getLogger(__name__)

REQUIRED_PROOF_FIELDS = ("type", "verificationMethod", "proofPurpose")


@dataclass
class VerificationResult:
    """Outcome of :meth:`DataIntegrityProof.verify_proof`."""

    verified: bool
    verified_document: Optional[Dict[str, Any]] = None
    media_type: Optional[str] = None


class DataIntegrityProof:
    """
    Add and verify proofs on JSON(-LD) documents.

    Holds no state between calls; each operation either returns a
    complete result or raises without attaching anything.
    """

    def __init__(self, cryptosuite: Cryptosuite) -> None:
        self.cryptosuite = cryptosuite

    # ── add ────────────────────────────────────────────────────────────

    def add_proof(
        self,
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Return a copy of *document* with a new ``proof`` attached.

        Raises
        ------
        Bip340Error
            ``PROOF_GENERATION_ERROR`` when the proof lacks a required
            field or its ``domain`` / ``challenge`` disagrees with
            *options*, plus any error raised by the cryptosuite.
        """
        proof = self.cryptosuite.create_proof(document, options)
        return self._attach(document, options, proof)

    async def add_proof_async(
        self,
        document: Mapping[str, Any],
        options: Mapping[str, Any],
    ) -> Dict[str, Any]:
        proof = await self.cryptosuite.create_proof_async(document, options)
        return self._attach(document, options, proof)

    # ── verify ─────────────────────────────────────────────────────────

    def verify_proof(
        self,
        document_bytes: bytes,
        media_type: Optional[str] = None,
        expected_proof_purpose: Optional[str] = None,
        challenge: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> VerificationResult:
        """
        Parse a secured document and verify its proof.

        Raises
        ------
        Bip340Error
            ``PARSING_ERROR`` if *document_bytes* is not a UTF-8 JSON
            object with an object ``proof``; ``PROOF_VERIFICATION_ERROR``
            for a missing required field or a purpose / domain mismatch;
            ``INVALID_CHALLENGE_ERROR`` for a challenge mismatch.
        """
        secured = self._parse(
            document_bytes, expected_proof_purpose, challenge, domain,
        )
        result = self.cryptosuite.verify_proof(secured)
        return self._result(result, media_type)

    async def verify_proof_async(
        self,
        document_bytes: bytes,
        media_type: Optional[str] = None,
        expected_proof_purpose: Optional[str] = None,
        challenge: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> VerificationResult:
        secured = self._parse(
            document_bytes, expected_proof_purpose, challenge, domain,
        )
        result = await self.cryptosuite.verify_proof_async(secured)
        return self._result(result, media_type)

    # ── internals ──────────────────────────────────────────────────────

    @staticmethod
    def _attach(
        document: Mapping[str, Any],
        options: Mapping[str, Any],
        proof: Dict[str, Any],
    ) -> Dict[str, Any]:
        missing = [f for f in REQUIRED_PROOF_FIELDS if not proof.get(f)]
        if missing:
            raise Bip340Error(
                ErrorKind.PROOF_GENERATION_ERROR,
                f"proof is missing {', '.join(missing)}",
            )
        domain = options.get("domain")
        if domain and domain != proof.get("domain"):
            raise Bip340Error(
                ErrorKind.PROOF_GENERATION_ERROR,
                f"proof domain {proof.get('domain')!r} does not match {domain!r}",
            )
        challenge = options.get("challenge")
        if challenge and challenge != proof.get("challenge"):
            raise Bip340Error(
                ErrorKind.PROOF_GENERATION_ERROR,
                "proof challenge does not match the requested challenge",
            )
        secured = dict(document)
        secured["proof"] = proof
        return secured

    @staticmethod
    def _parse(
        document_bytes: bytes,
        expected_proof_purpose: Optional[str],
        challenge: Optional[str],
        domain: Optional[str],
    ) -> Dict[str, Any]:
        try:
            secured = json.loads(bytes(document_bytes).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise Bip340Error(
                ErrorKind.PARSING_ERROR, f"document is not UTF-8 JSON: {exc}",
            ) from exc
        if not isinstance(secured, dict) or not isinstance(secured.get("proof"), dict):
            raise Bip340Error(
                ErrorKind.PARSING_ERROR,
                "secured document must be an object with an object proof",
            )

        proof = secured["proof"]
        missing = [f for f in REQUIRED_PROOF_FIELDS if not proof.get(f)]
        if missing:
            raise Bip340Error(
                ErrorKind.PROOF_VERIFICATION_ERROR,
                f"proof is missing {', '.join(missing)}",
            )
        if expected_proof_purpose and expected_proof_purpose != proof["proofPurpose"]:
            raise Bip340Error(
                ErrorKind.PROOF_VERIFICATION_ERROR,
                f"proof purpose {proof['proofPurpose']!r} does not match "
                f"expected {expected_proof_purpose!r}",
            )
        if domain and domain != proof.get("domain"):
            raise Bip340Error(
                ErrorKind.PROOF_VERIFICATION_ERROR,
                f"proof domain {proof.get('domain')!r} does not match {domain!r}",
            )
        if challenge and challenge != proof.get("challenge"):
            raise Bip340Error(
                ErrorKind.INVALID_CHALLENGE_ERROR,
                "proof challenge does not match the expected challenge",
            )
        return secured

    @staticmethod
    def _result(
        result: CryptosuiteResult,
        media_type: Optional[str],
    ) -> VerificationResult:
        logger.debug("data integrity proof verified=%s", result.verified)
        return VerificationResult(
            verified=result.verified,
            verified_document=result.verified_document,
            media_type=media_type,
        )
