"""Shared fixtures for the di_bip340 test suite."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from di_bip340 import (
    BIP340_JCS_2025,
    BIP340_RDFC_2025,
    Cryptosuite,
    KeyPair,
    Multikey,
    PrivateKey,
)

# ============================================================================
# Key material
# ============================================================================

PRIVATE_KEY_BYTES = bytes([
    115, 253, 220, 18, 252, 147, 66, 187,
    41, 174, 155, 94, 212, 118, 50, 59,
    220, 105, 58, 17, 110, 54, 81, 36,
    85, 174, 232, 48, 254, 138, 37, 162,
])
# derived by libsecp256k1; x = 9ad5f6a8...
PUBLIC_KEY_MULTIBASE = "z66PwJnYvwJLhGrVc8vcuUkKs99sKCzYRM2HQ2gDCGTAStHk"
CONTROLLER = "did:btc1:k1qvddh3hl7n5czluwhz9ry35tunkhtldhgr66zp907ewg4l7p6u786tz863a"
KEY_ID = "#initialKey"
FULL_ID = f"{CONTROLLER}{KEY_ID}"

RDFC_CONTEXT = {"@vocab": "https://example.org/vocab#"}


@pytest.fixture()
def private_key() -> PrivateKey:
    return PrivateKey(PRIVATE_KEY_BYTES)


@pytest.fixture()
def key_pair(private_key: PrivateKey) -> KeyPair:
    return KeyPair(private_key=private_key)


@pytest.fixture()
def signer(key_pair: KeyPair) -> Multikey:
    return Multikey(KEY_ID, CONTROLLER, key_pair)


@pytest.fixture()
def verifier(signer: Multikey) -> Multikey:
    return Multikey.from_verification_method(signer.to_verification_method())


# ============================================================================
# Cryptosuites and documents
# ============================================================================


@pytest.fixture()
def jcs_suite(signer: Multikey) -> Cryptosuite:
    return Cryptosuite(BIP340_JCS_2025, signer)


@pytest.fixture()
def rdfc_suite(signer: Multikey) -> Cryptosuite:
    return Cryptosuite(BIP340_RDFC_2025, signer)


@pytest.fixture()
def document() -> Dict[str, Any]:
    return {
        "@context": ["https://www.w3.org/ns/credentials/v2"],
        "id": "urn:uuid:6f9c2c2e-0a55-4a3f-9e3b-3c3a1f0d9b11",
        "type": ["VerifiableCredential"],
        "issuer": CONTROLLER,
        "credentialSubject": {"id": "did:example:alice", "score": 42},
    }


@pytest.fixture()
def jcs_options() -> Dict[str, Any]:
    return {
        "type": "DataIntegrityProof",
        "cryptosuite": BIP340_JCS_2025,
        "verificationMethod": FULL_ID,
        "proofPurpose": "assertionMethod",
        "created": "2025-01-01T00:00:00Z",
    }


@pytest.fixture()
def rdfc_document() -> Dict[str, Any]:
    return {
        "@context": RDFC_CONTEXT,
        "name": "hello, did:btc1",
        "amount": "21000000",
    }


@pytest.fixture()
def rdfc_options() -> Dict[str, Any]:
    return {
        "type": "DataIntegrityProof",
        "cryptosuite": BIP340_RDFC_2025,
        "verificationMethod": FULL_ID,
        "proofPurpose": "assertionMethod",
    }
