"""
Identity-bound BIP-340 signer / verifier.

A :class:`Multikey` ties a :class:`KeyPair` to a verification-method
``id`` and the ``controller`` identifier that owns it, and converts to
and from the DID verification-method form::

    {"id": "#initialKey", "type": "Multikey",
     "controller": "did:btc1:...", "publicKeyMultibase": "z66P..."}

Signing is non-deterministic: every call draws fresh 32-byte auxiliary
randomness (BIP-340 §Default Signing), so two signatures over the same
digest differ while both verify.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, Mapping

from .curve import SIGNATURE_BYTES, schnorr_sign, schnorr_verify
from .errors import Bip340Error, ErrorKind
from .key_pair import KeyPair
from .private_key import PrivateKey
from .public_key import PublicKey

logger = logging.getLogger(__name__)

MULTIKEY_TYPE = "Multikey"
DIGEST_BYTES = 32
AUX_RAND_BYTES = 32


class Multikey:
    """Verification method bound to a secp256k1 key pair."""

    type = MULTIKEY_TYPE

    def __init__(self, id: str, controller: str, key_pair: KeyPair) -> None:
        if not isinstance(key_pair, KeyPair):
            raise Bip340Error(ErrorKind.MISSING_KEY, "a KeyPair is required")
        self.id = id
        self.controller = controller
        self._key_pair = key_pair

    # factories --------------------------------------------------------------
    @classmethod
    def from_private_key(cls, id: str, controller: str, private_key) -> Multikey:
        return cls(id, controller, KeyPair.from_private_key(private_key))

    @classmethod
    def from_public_key(cls, id: str, controller: str, public_key) -> Multikey:
        return cls(id, controller, KeyPair.from_public_key(public_key))

    @classmethod
    def from_verification_method(cls, vm: Mapping[str, Any]) -> Multikey:
        """
        Materialize a verify-only Multikey from a verification method.

        Raises
        ------
        Bip340Error
            ``MISSING_FIELD`` when ``id``, ``controller`` or
            ``publicKeyMultibase`` is absent, ``INVALID_TYPE`` when
            ``type`` is not ``"Multikey"``, and the decode errors of
            :func:`decode_public_key` for a bad multibase value.
        """
        for name in ("id", "controller", "publicKeyMultibase"):
            if not vm.get(name):
                raise Bip340Error(
                    ErrorKind.MISSING_FIELD,
                    f'verification method is missing "{name}"',
                )
        if vm.get("type") != MULTIKEY_TYPE:
            raise Bip340Error(
                ErrorKind.INVALID_TYPE,
                f'verification method "type" must be "{MULTIKEY_TYPE}", '
                f"got {vm.get('type')!r}",
            )
        public_key = PublicKey.from_multibase(vm["publicKeyMultibase"])
        return cls(vm["id"], vm["controller"], KeyPair(public_key=public_key))

    # accessors --------------------------------------------------------------
    @property
    def key_pair(self) -> KeyPair:
        return self._key_pair

    @property
    def public_key(self) -> PublicKey:
        return self._key_pair.public_key

    @property
    def private_key(self) -> PrivateKey:
        return self._key_pair.private_key

    @property
    def is_signer(self) -> bool:
        return self._key_pair.has_private_key

    def full_id(self) -> str:
        """``controller + id`` for a ``#fragment`` id, else ``id`` as is."""
        if self.id.startswith("#"):
            return f"{self.controller}{self.id}"
        return self.id

    # signing ----------------------------------------------------------------
    def sign(self, message: bytes) -> bytes:
        """
        64-byte BIP-340 signature over a 32-byte message digest.

        BIP-340 itself allows messages of any length; this method accepts
        only 32 bytes because libsecp256k1's ``sign_schnorr`` does.  The
        cryptosuite always passes a SHA-256 digest, so proofs are
        unaffected.  Hash longer messages before signing them.

        Raises ``MISSING_PRIVATE_KEY`` for a verify-only Multikey and
        ``INVALID_SIGNATURE`` for a digest of the wrong length.
        """
        if not self.is_signer:
            raise Bip340Error(
                ErrorKind.MISSING_PRIVATE_KEY, "cannot sign: no private key",
            )
        _check_digest(message)
        aux = secrets.token_bytes(AUX_RAND_BYTES)
        return schnorr_sign(self.private_key.to_bytes(), bytes(message), aux)

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Check a BIP-340 signature against this key.

        Same 32-byte message restriction as :meth:`sign`.  A mismatching signature returns ``False``; only a signature or
        digest of the wrong length raises.
        """
        if len(signature) != SIGNATURE_BYTES:
            raise Bip340Error(
                ErrorKind.INVALID_SIGNATURE,
                f"signature must be {SIGNATURE_BYTES} bytes, got {len(signature)}",
            )
        _check_digest(message)
        verified = schnorr_verify(
            self.public_key.x, bytes(signature), bytes(message),
        )
        if not verified:
            logger.debug("schnorr signature rejected for %s", self.full_id())
        return verified

    # verification method ----------------------------------------------------
    def to_verification_method(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "type": MULTIKEY_TYPE,
            "controller": self.controller,
            "publicKeyMultibase": self.public_key.encode(),
        }

    def __repr__(self) -> str:
        role = "signer" if self.is_signer else "verifier"
        return f"Multikey({self.full_id()}, {role})"


def _check_digest(message: bytes) -> None:
    if len(message) != DIGEST_BYTES:
        raise Bip340Error(
            ErrorKind.INVALID_SIGNATURE,
            f"message must be a {DIGEST_BYTES}-byte digest, got {len(message)}",
        )
