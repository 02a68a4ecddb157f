"""Tests for secp256k1 curve primitives."""

from __future__ import annotations

import hashlib
import secrets

import pytest

from di_bip340 import Bip340Error, ErrorKind
from di_bip340.curve import (
    FIELD_PRIME,
    GX,
    GY,
    ORDER,
    curve_rhs,
    is_on_curve,
    lift_x,
    mod_pow,
    point_from_scalar,
    schnorr_sign,
    schnorr_verify,
    sqrt_mod,
)


def _coords(uncompressed: bytes):
    return int.from_bytes(uncompressed[1:33], "big"), int.from_bytes(uncompressed[33:], "big")


class TestModPow:
    @pytest.mark.parametrize(
        "base, exp, mod",
        [(3, 200, 1_000_003), (2, 0, 97), (0, 5, 13), (FIELD_PRIME - 1, 2, FIELD_PRIME)],
    )
    def test_matches_builtin(self, base, exp, mod):
        assert mod_pow(base, exp, mod) == pow(base, exp, mod)

    def test_fermat(self):
        assert mod_pow(GX, FIELD_PRIME - 1, FIELD_PRIME) == 1


class TestSqrtMod:
    def test_small_prime(self):
        # 2² = 4 mod 7
        assert sqrt_mod(4, 7) in (2, 5)

    def test_generator_y(self):
        y = sqrt_mod(curve_rhs(GX))
        assert y in (GY, FIELD_PRIME - GY)

    def test_rejects_prime_not_3_mod_4(self):
        with pytest.raises(ValueError):
            sqrt_mod(4, 13)


class TestLiftX:
    def test_generator(self):
        raw = lift_x(GX.to_bytes(32, "big"))
        assert len(raw) == 65
        assert raw[0] == 0x04
        x, y = _coords(raw)
        assert x == GX
        assert y in (GY, FIELD_PRIME - GY)

    def test_zero_out_of_range(self):
        with pytest.raises(Bip340Error) as exc:
            lift_x(bytes(32))
        assert exc.value.kind is ErrorKind.OUT_OF_RANGE

    def test_field_prime_out_of_range(self):
        with pytest.raises(Bip340Error) as exc:
            lift_x(FIELD_PRIME.to_bytes(32, "big"))
        assert exc.value.kind is ErrorKind.OUT_OF_RANGE

    def test_wrong_length(self):
        with pytest.raises(Bip340Error) as exc:
            lift_x(b"\x01" * 31)
        assert exc.value.kind is ErrorKind.INVALID_LENGTH

    def test_non_residue_does_not_square_back(self):
        # roughly half of all x have no point; the result must be checked
        results = [_coords(lift_x(x.to_bytes(32, "big"))) for x in range(1, 64)]
        assert any(not is_on_curve(x, y) for x, y in results)
        assert any(is_on_curve(x, y) for x, y in results)


class TestGroupOperations:
    def test_generator_from_one(self):
        compressed = point_from_scalar((1).to_bytes(32, "big"))
        assert compressed == b"\x02" + GX.to_bytes(32, "big")

    def test_invalid_scalar(self):
        with pytest.raises(Bip340Error) as exc:
            point_from_scalar(ORDER.to_bytes(32, "big"))
        assert exc.value.kind is ErrorKind.DERIVATION_ERROR

    def test_sign_verify(self):
        secret = (7).to_bytes(32, "big")
        x_only = point_from_scalar(secret)[1:]
        digest = hashlib.sha256(b"curve").digest()
        sig = schnorr_sign(secret, digest, secrets.token_bytes(32))
        assert len(sig) == 64
        assert schnorr_verify(x_only, sig, digest)
        assert not schnorr_verify(x_only, sig, hashlib.sha256(b"other").digest())
