"""Tests for Multikey signing and the verification-method bridge."""

from __future__ import annotations

import hashlib

import pytest

from di_bip340 import Bip340Error, ErrorKind, KeyPair, Multikey
from di_bip340.encoding import encode_multibase

from .conftest import CONTROLLER, FULL_ID, KEY_ID, PRIVATE_KEY_BYTES, PUBLIC_KEY_MULTIBASE

MESSAGE = hashlib.sha256(b"hello, did:btc1").digest()


class TestIdentity:
    def test_full_id_fragment(self, signer: Multikey):
        assert signer.full_id() == FULL_ID

    def test_full_id_absolute(self, key_pair: KeyPair):
        mk = Multikey(FULL_ID, CONTROLLER, key_pair)
        assert mk.full_id() == FULL_ID

    def test_is_signer(self, signer: Multikey, verifier: Multikey):
        assert signer.is_signer
        assert not verifier.is_signer

    def test_requires_key_pair(self):
        with pytest.raises(Bip340Error) as exc:
            Multikey(KEY_ID, CONTROLLER, None)  # type: ignore[arg-type]
        assert exc.value.kind is ErrorKind.MISSING_KEY

    def test_from_private_key(self):
        mk = Multikey.from_private_key(KEY_ID, CONTROLLER, PRIVATE_KEY_BYTES)
        assert mk.public_key.multibase == PUBLIC_KEY_MULTIBASE
        assert mk.private_key.to_bytes() == PRIVATE_KEY_BYTES


class TestSignVerify:
    def test_signature_is_64_bytes(self, signer: Multikey):
        assert len(signer.sign(MESSAGE)) == 64

    def test_round_trip(self, signer: Multikey, verifier: Multikey):
        sig = signer.sign(MESSAGE)
        assert signer.verify(sig, MESSAGE)
        assert verifier.verify(sig, MESSAGE)

    def test_signing_is_randomized(self, signer: Multikey):
        a, b = signer.sign(MESSAGE), signer.sign(MESSAGE)
        assert a != b
        assert signer.verify(a, MESSAGE) and signer.verify(b, MESSAGE)

    def test_other_key_rejects(self, signer: Multikey):
        other = Multikey(KEY_ID, CONTROLLER, KeyPair.generate())
        assert not other.verify(signer.sign(MESSAGE), MESSAGE)

    def test_other_message_rejects(self, signer: Multikey):
        sig = signer.sign(MESSAGE)
        assert not signer.verify(sig, hashlib.sha256(b"tampered").digest())

    def test_flipped_signature_rejects(self, signer: Multikey):
        sig = bytearray(signer.sign(MESSAGE))
        sig[10] ^= 0x01
        assert not signer.verify(bytes(sig), MESSAGE)

    def test_verifier_cannot_sign(self, verifier: Multikey):
        with pytest.raises(Bip340Error) as exc:
            verifier.sign(MESSAGE)
        assert exc.value.kind is ErrorKind.MISSING_PRIVATE_KEY

    def test_verifier_has_no_private_key(self, verifier: Multikey):
        with pytest.raises(Bip340Error) as exc:
            _ = verifier.private_key
        assert exc.value.kind is ErrorKind.MISSING_PRIVATE_KEY

    def test_wrong_signature_length(self, signer: Multikey):
        with pytest.raises(Bip340Error) as exc:
            signer.verify(b"\x00" * 63, MESSAGE)
        assert exc.value.kind is ErrorKind.INVALID_SIGNATURE

    def test_wrong_digest_length(self, signer: Multikey):
        with pytest.raises(Bip340Error) as exc:
            signer.sign(b"not a digest")
        assert exc.value.kind is ErrorKind.INVALID_SIGNATURE

    def test_long_message_signed_by_digest(self, signer: Multikey, verifier: Multikey):
        digest = hashlib.sha256(b"a message longer than thirty-two bytes, hashed first").digest()
        assert verifier.verify(signer.sign(digest), digest)
        with pytest.raises(Bip340Error):
            verifier.verify(signer.sign(digest), digest + b"\x00")


class TestVerificationMethod:
    def test_to_verification_method(self, signer: Multikey):
        assert signer.to_verification_method() == {
            "id": KEY_ID,
            "type": "Multikey",
            "controller": CONTROLLER,
            "publicKeyMultibase": PUBLIC_KEY_MULTIBASE,
        }

    def test_round_trip(self, signer: Multikey):
        mk = Multikey.from_verification_method(signer.to_verification_method())
        assert mk.public_key.equals(signer.public_key)
        assert mk.id == KEY_ID
        assert mk.controller == CONTROLLER
        assert mk.full_id() == signer.full_id()

    def test_round_trip_generated(self):
        for _ in range(4):
            mk = Multikey(KEY_ID, CONTROLLER, KeyPair.generate())
            back = Multikey.from_verification_method(mk.to_verification_method())
            assert back.public_key.equals(mk.public_key)

    @pytest.mark.parametrize("field", ["id", "controller", "publicKeyMultibase"])
    def test_missing_field(self, signer: Multikey, field: str):
        vm = signer.to_verification_method()
        del vm[field]
        with pytest.raises(Bip340Error) as exc:
            Multikey.from_verification_method(vm)
        assert exc.value.kind is ErrorKind.MISSING_FIELD

    def test_wrong_type(self, signer: Multikey):
        vm = {**signer.to_verification_method(), "type": "JsonWebKey2020"}
        with pytest.raises(Bip340Error) as exc:
            Multikey.from_verification_method(vm)
        assert exc.value.kind is ErrorKind.INVALID_TYPE

    def test_wrong_prefix(self, signer: Multikey):
        bad = encode_multibase(b"\xed\x01" + signer.public_key.x)
        vm = {**signer.to_verification_method(), "publicKeyMultibase": bad}
        with pytest.raises(Bip340Error) as exc:
            Multikey.from_verification_method(vm)
        assert exc.value.kind is ErrorKind.INVALID_PREFIX
