"""
secp256k1 private key with BIP-340 parity normalization.

BIP-340 fixes the public key to the even-y point with a given x.  A
scalar *d* whose point  d·G  has odd y is therefore replaced by
n - d  when the key is constructed: both scalars share the same x-only
public key, but only  n - d  yields the even-y point that verifiers
lift from that x.  The replacement happens once, inside ``__init__``,
so a constructed :class:`PrivateKey` never changes afterwards.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, Union

from .curve import EVEN_PREFIX, ORDER, SCALAR_BYTES, point_from_scalar
from .errors import Bip340Error, ErrorKind
from .public_key import PublicKey

logger = logging.getLogger(__name__)


class PrivateKey:
    """A scalar  d  with  1 ≤ d < n,  stored as 32 big-endian bytes."""

    __slots__ = ("_bytes", "_compressed")

    def __init__(self, seed: Union[bytes, bytearray, int]) -> None:
        if isinstance(seed, bool):
            raise Bip340Error(ErrorKind.INVALID_SCALAR, "secret must be bytes or int")
        if isinstance(seed, int):
            d = seed
        elif isinstance(seed, (bytes, bytearray)):
            if len(seed) != SCALAR_BYTES:
                raise Bip340Error(
                    ErrorKind.INVALID_LENGTH,
                    f"private key must be {SCALAR_BYTES} bytes, got {len(seed)}",
                )
            d = int.from_bytes(seed, "big")
        else:
            raise Bip340Error(ErrorKind.INVALID_SCALAR, "secret must be bytes or int")

        if not 0 < d < ORDER:
            raise Bip340Error(ErrorKind.INVALID_SCALAR, "secret out of range [1, n-1]")

        compressed = point_from_scalar(d.to_bytes(SCALAR_BYTES, "big"))
        if compressed[0] != EVEN_PREFIX:
            logger.debug("negating private key to obtain even-y public key")
            d = ORDER - d
            compressed = point_from_scalar(d.to_bytes(SCALAR_BYTES, "big"))
            if compressed[0] != EVEN_PREFIX:
                raise Bip340Error(
                    ErrorKind.DERIVATION_ERROR,
                    "negated scalar did not produce an even-y point",
                )

        self._bytes = d.to_bytes(SCALAR_BYTES, "big")
        self._compressed = compressed

    # constructors -----------------------------------------------------------
    @classmethod
    def from_bytes(cls, data: bytes) -> PrivateKey:
        return cls(bytes(data))

    @classmethod
    def from_secret(cls, secret: int) -> PrivateKey:
        return cls(int(secret))

    @classmethod
    def generate(cls) -> PrivateKey:
        """Uniform in [1, n-1] via rejection sampling."""
        while True:
            c = int.from_bytes(secrets.token_bytes(SCALAR_BYTES), "big")
            if 0 < c < ORDER:
                return cls(c)

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self._bytes

    @property
    def secret(self) -> int:
        return int.from_bytes(self._bytes, "big")

    @property
    def point(self) -> int:
        """x-coordinate of  d·G  as an integer."""
        return int.from_bytes(self._compressed[1:], "big")

    def hex(self) -> str:
        return self._bytes.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bytes": self._bytes,
            "secret": self.secret,
            "point": self.point,
            "hex": self.hex(),
        }

    # derivation -------------------------------------------------------------
    def compute_public_key(self) -> PublicKey:
        """The even-y public key  d·G  for this (normalized) scalar."""
        return PublicKey(self._compressed)

    # comparison -------------------------------------------------------------
    def equals(self, other: PrivateKey) -> bool:
        return isinstance(other, PrivateKey) and secrets.compare_digest(
            self._bytes, other._bytes,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._compressed)

    def __repr__(self) -> str:
        return f"PrivateKey(point=0x{self.point:064x})"[:32] + "…)"
