"""
x-only, even-parity secp256k1 public key and its Multikey encoding.

A BIP-340 Multikey value is  ``'z' + base58btc(0xe1 0x4a ‖ x)``  where
*x* is the 32-byte x-coordinate of the even-y point.
"""

from __future__ import annotations

from typing import Any, Dict

from .curve import (
    COMPRESSED_BYTES,
    EVEN_PREFIX,
    FIELD_PRIME,
    ODD_PREFIX,
    X_ONLY_BYTES,
    is_on_curve,
    lift_x,
)
from .encoding import decode_multibase, encode_multibase
from .errors import Bip340Error, ErrorKind

# ── Multikey header ─────────────────────────────────────────────────────
BIP340_MULTIKEY_PREFIX = bytes([0xE1, 0x4A])
MULTIKEY_BYTES = len(BIP340_MULTIKEY_PREFIX) + X_ONLY_BYTES


def encode_public_key(x_only: bytes) -> str:
    """Multikey-encode a 32-byte x-only public key."""
    if len(x_only) != X_ONLY_BYTES:
        raise Bip340Error(
            ErrorKind.INVALID_LENGTH,
            f"x-only public key must be {X_ONLY_BYTES} bytes, got {len(x_only)}",
        )
    return encode_multibase(BIP340_MULTIKEY_PREFIX + bytes(x_only))


def decode_public_key(multibase: str) -> bytes:
    """
    Decode a Multikey value back to its 32-byte x-only public key.

    Raises
    ------
    Bip340Error
        ``INVALID_MULTIBASE`` for a malformed string, ``INVALID_PREFIX``
        when the first two decoded bytes are not ``0xe1 0x4a``,
        ``INVALID_LENGTH`` when the payload is not 34 bytes.
    """
    decoded = decode_multibase(multibase)
    prefix = decoded[: len(BIP340_MULTIKEY_PREFIX)]
    if prefix != BIP340_MULTIKEY_PREFIX:
        raise Bip340Error(
            ErrorKind.INVALID_PREFIX,
            f"malformed multibase prefix {prefix.hex() or '<empty>'}",
        )
    if len(decoded) != MULTIKEY_BYTES:
        raise Bip340Error(
            ErrorKind.INVALID_LENGTH,
            f"publicKeyMultibase must decode to {MULTIKEY_BYTES} bytes, "
            f"got {len(decoded)}",
        )
    return decoded[len(BIP340_MULTIKEY_PREFIX):]


class PublicKey:
    """
    Even-parity secp256k1 point, stored as its 33-byte compressed form.

    Accepts either a 32-byte x-only key (the ``0x02`` prefix is implied)
    or a 33-byte compressed key.  Odd-parity (``0x03``) input is rejected
    rather than flipped: a flipped key would no longer correspond to the
    private key that produced it.
    """

    __slots__ = ("_bytes",)

    def __init__(self, data: bytes) -> None:
        data = bytes(data)
        if len(data) == X_ONLY_BYTES:
            data = bytes([EVEN_PREFIX]) + data
        elif len(data) != COMPRESSED_BYTES:
            raise Bip340Error(
                ErrorKind.INVALID_FORMAT,
                "public key must be 32 (x-only) or 33 (compressed) bytes, "
                f"got {len(data)}",
            )
        if data[0] == ODD_PREFIX:
            raise Bip340Error(
                ErrorKind.INVALID_FORMAT,
                "odd-parity public key (0x03) is not a valid BIP-340 key",
            )
        if data[0] != EVEN_PREFIX:
            raise Bip340Error(
                ErrorKind.INVALID_FORMAT,
                f"unknown compressed point prefix 0x{data[0]:02x}",
            )
        self._bytes = data

    # constructors -----------------------------------------------------------
    @classmethod
    def from_multibase(cls, multibase: str) -> PublicKey:
        return cls(decode_public_key(multibase))

    # views ------------------------------------------------------------------
    @property
    def compressed(self) -> bytes:
        return self._bytes

    @property
    def parity(self) -> int:
        return self._bytes[0]

    @property
    def x(self) -> bytes:
        return self._bytes[1:]

    @property
    def uncompressed(self) -> bytes:
        """65-byte  ``0x04 ‖ x ‖ y``  with the even root chosen for *y*."""
        try:
            raw = lift_x(self.x)
        except Bip340Error as exc:
            raise Bip340Error(
                ErrorKind.DECOMPRESSION_ERROR,
                f"cannot lift x-coordinate: {exc.message}",
            ) from exc
        x = int.from_bytes(raw[1:33], "big")
        y = int.from_bytes(raw[33:], "big")
        if not is_on_curve(x, y):
            raise Bip340Error(
                ErrorKind.DECOMPRESSION_ERROR,
                "x-coordinate does not correspond to a point on secp256k1",
            )
        if y & 1:
            y = FIELD_PRIME - y
        return raw[:33] + y.to_bytes(X_ONLY_BYTES, "big")

    @property
    def y(self) -> bytes:
        return self.uncompressed[33:]

    @property
    def multibase(self) -> str:
        return self.encode()

    @property
    def prefix(self) -> bytes:
        """The two Multikey header bytes, read back from the encoding."""
        return decode_multibase(self.multibase)[: len(BIP340_MULTIKEY_PREFIX)]

    # codec ------------------------------------------------------------------
    def encode(self) -> str:
        return encode_public_key(self.x)

    @staticmethod
    def decode(multibase: str) -> bytes:
        return decode_public_key(multibase)

    def hex(self) -> str:
        return self._bytes.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parity": self.parity,
            "x": self.x,
            "y": self.y,
            "multibase": self.multibase,
            "prefix": self.prefix,
        }

    # comparison -------------------------------------------------------------
    def equals(self, other: PublicKey) -> bool:
        return isinstance(other, PublicKey) and self._bytes == other._bytes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._bytes)

    def __repr__(self) -> str:
        return f"PublicKey({self.multibase})"
