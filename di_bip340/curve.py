"""
secp256k1 curve primitives.

Point recovery from an x-only coordinate is plain modular arithmetic in
Python; everything that touches the group law (scalar multiplication,
Schnorr signing and verification) is delegated to ``coincurve``, which
wraps Bitcoin Core's libsecp256k1.

Install
-------
    pip install coincurve>=18.0.0

References
----------
- SEC 2 v2 §2.4.1  secp256k1 domain parameters
- BIP-340            Schnorr signature specification for Bitcoin
"""

from __future__ import annotations

from coincurve import PrivateKey as _SK, PublicKeyXOnly as _XPK

from .errors import Bip340Error, ErrorKind

# ── secp256k1 constants ─────────────────────────────────────────────────
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
CURVE_B = 7
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

SCALAR_BYTES = 32
X_ONLY_BYTES = 32
COMPRESSED_BYTES = 33
UNCOMPRESSED_BYTES = 65
SIGNATURE_BYTES = 64

EVEN_PREFIX = 0x02
ODD_PREFIX = 0x03
UNCOMPRESSED_PREFIX = 0x04


# ── modular arithmetic ──────────────────────────────────────────────────
def mod_pow(base: int, exp: int, mod: int) -> int:
    """Square-and-multiply  base^exp mod *mod*  over non-negative integers."""
    if exp < 0:
        raise ValueError("negative exponent")
    result = 1 % mod
    base %= mod
    while exp > 0:
        if exp & 1:
            result = (result * base) % mod
        base = (base * base) % mod
        exp >>= 1
    return result


def sqrt_mod(a: int, p: int = FIELD_PRIME) -> int:
    """
    Candidate square root of *a* modulo a prime  p ≡ 3 (mod 4).

    Returns  a^((p+1)/4) mod p.  Whether *a* is actually a quadratic
    residue is not checked: callers must square the result and compare.
    """
    if p % 4 != 3:
        raise ValueError("sqrt_mod requires p ≡ 3 (mod 4)")
    return mod_pow(a, (p + 1) >> 2, p)


def curve_rhs(x: int) -> int:
    """Right-hand side of the curve equation,  x³ + 7 mod p."""
    return (mod_pow(x, 3, FIELD_PRIME) + CURVE_B) % FIELD_PRIME


def lift_x(x_bytes: bytes) -> bytes:
    """
    Lift a 32-byte x-coordinate to a 65-byte uncompressed point.

    Computes  y = sqrt(x³ + 7) mod p  and returns  ``0x04 ‖ x ‖ y``.
    Parity is not enforced: *y* is whichever root the exponentiation
    yields.

    Raises
    ------
    Bip340Error
        ``INVALID_LENGTH`` if *x_bytes* is not 32 bytes,
        ``OUT_OF_RANGE`` if  x == 0  or  x ≥ p.
    """
    if len(x_bytes) != X_ONLY_BYTES:
        raise Bip340Error(
            ErrorKind.INVALID_LENGTH,
            f"x-coordinate must be {X_ONLY_BYTES} bytes, got {len(x_bytes)}",
        )
    x = int.from_bytes(x_bytes, "big")
    if x == 0 or x >= FIELD_PRIME:
        raise Bip340Error(ErrorKind.OUT_OF_RANGE, "x-coordinate out of field range")
    y = sqrt_mod(curve_rhs(x), FIELD_PRIME)
    return (
        bytes([UNCOMPRESSED_PREFIX])
        + bytes(x_bytes)
        + y.to_bytes(X_ONLY_BYTES, "big")
    )


def is_on_curve(x: int, y: int) -> bool:
    return 0 <= x < FIELD_PRIME and 0 <= y < FIELD_PRIME and (
        (y * y) % FIELD_PRIME == curve_rhs(x)
    )


# ── libsecp256k1 group operations ───────────────────────────────────────
def point_from_scalar(secret: bytes) -> bytes:
    """Compressed SEC 1 encoding of  d · G  (C speed)."""
    try:
        compressed = _SK(secret).public_key.format(compressed=True)
    except ValueError as exc:
        raise Bip340Error(
            ErrorKind.DERIVATION_ERROR, f"scalar multiplication failed: {exc}",
        ) from exc
    if len(compressed) != COMPRESSED_BYTES or compressed[0] not in (
        EVEN_PREFIX, ODD_PREFIX,
    ):
        raise Bip340Error(
            ErrorKind.DERIVATION_ERROR, "derived point is not in compressed form",
        )
    return compressed


def schnorr_sign(secret: bytes, digest: bytes, aux: bytes) -> bytes:
    """BIP-340 signature over a 32-byte *digest* with auxiliary randomness."""
    try:
        return _SK(secret).sign_schnorr(digest, aux)
    except ValueError as exc:
        raise Bip340Error(ErrorKind.INVALID_SIGNATURE, str(exc)) from exc


def schnorr_verify(x_only: bytes, signature: bytes, digest: bytes) -> bool:
    """BIP-340 verification against an x-only public key."""
    try:
        key = _XPK(x_only)
    except ValueError as exc:
        raise Bip340Error(
            ErrorKind.DECOMPRESSION_ERROR, "x-only key is not on secp256k1",
        ) from exc
    return bool(key.verify(signature, digest))
