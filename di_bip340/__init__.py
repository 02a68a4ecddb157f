"""
di_bip340: BIP-340 Schnorr/secp256k1 Data Integrity cryptosuite.

Binds an x-only, even-parity secp256k1 key to a DID-style identifier
and signs / verifies JSON(-LD) documents with W3C Data Integrity
proofs:

- **Keys** enforcing BIP-340's even-y convention, with Multikey
  (``z66P…``) encoding
- **Cryptosuites** ``bip-340-jcs-2025`` (RFC 8785) and
  ``bip-340-rdfc-2025`` (RDFC-1.0)
- **DataIntegrityProof** for purpose, domain and challenge binding

Quick start
-----------
::

    from di_bip340 import Cryptosuite, DataIntegrityProof, Multikey

    signer = Multikey.from_private_key(
        "#initialKey", "did:btc1:k1q...", private_key_bytes,
    )
    di = DataIntegrityProof(Cryptosuite("bip-340-jcs-2025", signer))
    secured = di.add_proof(document, {
        "type": "DataIntegrityProof",
        "cryptosuite": "bip-340-jcs-2025",
        "verificationMethod": signer.full_id(),
        "proofPurpose": "assertionMethod",
    })

    verifier = Multikey.from_verification_method(
        signer.to_verification_method(),
    )
    assert Cryptosuite("bip-340-jcs-2025", verifier).verify_proof(secured).verified
"""

__version__ = "0.1.0"

# ── errors ──────────────────────────────────────────────────────────────
from .errors import Bip340Error, ErrorKind

# ── curve primitives ────────────────────────────────────────────────────
from .curve import ORDER, FIELD_PRIME, mod_pow, sqrt_mod, lift_x

# ── keys ────────────────────────────────────────────────────────────────
from .private_key import PrivateKey
from .public_key import (
    PublicKey,
    BIP340_MULTIKEY_PREFIX,
    encode_public_key,
    decode_public_key,
)
from .key_pair import KeyPair
from .multikey import Multikey

# ── cryptosuite & proofs ────────────────────────────────────────────────
from .canonicalize import Algorithm
from .hash import generate_hash
from .cryptosuite import (
    Cryptosuite,
    CryptosuiteResult,
    PROOF_TYPE,
    BIP340_JCS_2025,
    BIP340_RDFC_2025,
)
from .proof import DataIntegrityProof, VerificationResult

__all__ = [
    # version
    "__version__",
    # errors
    "Bip340Error", "ErrorKind",
    # curve
    "ORDER", "FIELD_PRIME", "mod_pow", "sqrt_mod", "lift_x",
    # keys
    "PrivateKey", "PublicKey", "BIP340_MULTIKEY_PREFIX",
    "encode_public_key", "decode_public_key", "KeyPair", "Multikey",
    # cryptosuite
    "Algorithm", "generate_hash", "Cryptosuite", "CryptosuiteResult",
    "PROOF_TYPE", "BIP340_JCS_2025", "BIP340_RDFC_2025",
    # proofs
    "DataIntegrityProof", "VerificationResult",
]
