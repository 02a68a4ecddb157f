"""
Pairing of an optional :class:`PrivateKey` with a required :class:`PublicKey`.

A key pair is built from exactly one of three shapes: a private key
alone (the public key is derived), a public key alone (verify-only), or
both, in which case they must agree.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .errors import Bip340Error, ErrorKind
from .private_key import PrivateKey
from .public_key import PublicKey


class KeyPair:
    """Holds zero-or-one private key and exactly one public key."""

    __slots__ = ("_private_key", "_public_key")

    def __init__(
        self,
        *,
        private_key: Optional[PrivateKey] = None,
        public_key: Optional[PublicKey] = None,
    ) -> None:
        if private_key is None and public_key is None:
            raise Bip340Error(
                ErrorKind.MISSING_KEY,
                "key pair needs a private key, a public key, or both",
            )
        if private_key is not None:
            derived = private_key.compute_public_key()
            if public_key is not None and not public_key.equals(derived):
                raise Bip340Error(
                    ErrorKind.KEY_MISMATCH,
                    "public key does not match the private key's derived key",
                )
            public_key = derived
        self._private_key: Optional[PrivateKey] = private_key
        self._public_key: PublicKey = public_key  # type: ignore[assignment]

    # factories --------------------------------------------------------------
    @classmethod
    def from_private_key(cls, private_key) -> KeyPair:
        """From a :class:`PrivateKey`, 32 raw bytes, or an int secret."""
        if not isinstance(private_key, PrivateKey):
            private_key = PrivateKey(private_key)
        return cls(private_key=private_key)

    @classmethod
    def from_public_key(cls, public_key) -> KeyPair:
        """From a :class:`PublicKey` or its 32/33-byte encoding."""
        if not isinstance(public_key, PublicKey):
            public_key = PublicKey(public_key)
        return cls(public_key=public_key)

    @classmethod
    def generate(cls) -> KeyPair:
        return cls(private_key=PrivateKey.generate())

    # accessors --------------------------------------------------------------
    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def private_key(self) -> PrivateKey:
        if self._private_key is None:
            raise Bip340Error(
                ErrorKind.MISSING_PRIVATE_KEY, "private key not available",
            )
        return self._private_key

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "publicKey": self._public_key.to_dict(),
            "privateKey": (
                self._private_key.to_dict() if self._private_key else None
            ),
        }

    def __repr__(self) -> str:
        kind = "signer" if self.has_private_key else "verifier"
        return f"KeyPair({self._public_key.multibase}, {kind})"
