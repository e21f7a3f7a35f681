from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from pemsign.crypto.keys import key_from_handle
from pemsign.crypto.signature import ROLE_ACTIONS, Signature, execute, infer_action
from pemsign.exceptions import KeyRoleError, MissingSignatureError, UnhandledActionError
from pemsign.models import Action, KeyRole


@pytest.mark.parametrize(
    "algorithm, fixture",
    [
        ("SHA256withRSA", "rsa_key"),
        ("SHA1withRSA", "rsa_key"),
        ("SHA512withRSA", "rsa_key"),
        ("SHA256withRSAandMGF1", "rsa_key"),
        ("SHAwithRSAandMGF1", "rsa_key"),
        ("SHA256withECDSA", "ec_key"),
        ("SHA384withECDSA", "ec_key"),
        ("SHA256withDSA", "dsa_key"),
    ],
)
def test_sign_then_verify_with_public_half(algorithm, fixture, request) -> None:
    private = request.getfixturevalue(fixture)
    signature = execute(Action.SIGN, algorithm, key_from_handle(private), "hello world")
    assert isinstance(signature, str) and signature
    assert int(signature, 16) >= 0

    public = key_from_handle(private.public_key())
    assert execute(Action.VERIFY, algorithm, public, "hello world", signature) is True
    assert execute(Action.VERIFY, algorithm, public, "hello world!", signature) is False


def test_rsa_signature_is_deterministic_hex(rsa_key) -> None:
    key = key_from_handle(rsa_key)
    first = execute(Action.SIGN, "SHA256withRSA", key, b"abc")
    assert first == execute(Action.SIGN, "SHA256withRSA", key, "abc")
    assert first == first.lower()
    assert len(first) == rsa_key.key_size // 4


def test_private_key_can_verify(rsa_key) -> None:
    key = key_from_handle(rsa_key)
    signature = execute(Action.SIGN, "SHA256withRSA", key, "data")
    assert execute(Action.VERIFY, "SHA256withRSA", key, "data", signature) is True


def test_signature_whitespace_is_ignored_and_bad_hex_is_false(rsa_key) -> None:
    key = key_from_handle(rsa_key)
    signature = execute(Action.SIGN, "SHA256withRSA", key, "data")
    assert execute(Action.VERIFY, "SHA256withRSA", key, "data", signature + "\n") is True
    assert execute(Action.VERIFY, "SHA256withRSA", key, "data", "zz" + signature[2:]) is False
    assert execute(Action.VERIFY, "SHA256withRSA", key, "data", bytes.fromhex(signature)) is True


def test_action_inferred_from_role(rsa_key) -> None:
    private = key_from_handle(rsa_key)
    signature = execute(Action.UNSPECIFIED, "SHA256withRSA", private, "data")
    assert isinstance(signature, str)
    public = key_from_handle(rsa_key.public_key())
    assert execute(Action.UNSPECIFIED, "SHA256withRSA", public, "data", signature) is True
    with pytest.raises(MissingSignatureError):
        execute(Action.UNSPECIFIED, "SHA256withRSA", public, "data")


def test_role_mapping_is_total() -> None:
    assert set(ROLE_ACTIONS) == set(KeyRole)
    assert infer_action(KeyRole.CERTIFICATE) is Action.VERIFY
    with pytest.raises(UnhandledActionError):
        infer_action("symmetric")  # type: ignore[arg-type]


def test_signing_needs_private_key(rsa_key, rsa_certificate) -> None:
    with pytest.raises(KeyRoleError, match="private key"):
        execute(Action.SIGN, "SHA256withRSA", key_from_handle(rsa_key.public_key()), "data")
    with pytest.raises(KeyRoleError):
        execute(Action.SIGN, "SHA256withRSA", key_from_handle(rsa_certificate), "data")


def test_key_family_must_match_algorithm(ec_key) -> None:
    with pytest.raises(KeyRoleError, match="SHA256withRSA"):
        execute(Action.SIGN, "SHA256withRSA", key_from_handle(ec_key), "data")


def test_pss_digest_too_large_for_modulus(small_rsa_key) -> None:
    with pytest.raises(KeyRoleError, match="Cannot sign with SHA512withRSAandMGF1"):
        execute(Action.SIGN, "SHA512withRSAandMGF1", key_from_handle(small_rsa_key), "data")


def test_signature_state_follows_key(rsa_key) -> None:
    sig = Signature("SHA256withRSA")
    assert sig.state is Action.UNSPECIFIED
    sig.init(key_from_handle(rsa_key))
    assert sig.state is Action.SIGN
    with pytest.raises(KeyRoleError):
        Signature("SHA256withRSA").sign()


@settings(max_examples=25, deadline=None)
@given(payload=st.binary(min_size=1, max_size=64), data=st.data())
def test_flipping_any_payload_byte_fails_verification(rsa_key, payload, data) -> None:
    key = key_from_handle(rsa_key)
    signature = execute(Action.SIGN, "SHA256withRSA", key, payload)
    index = data.draw(st.integers(min_value=0, max_value=len(payload) - 1))
    flipped = bytearray(payload)
    flipped[index] ^= data.draw(st.integers(min_value=1, max_value=255))
    assert execute(Action.VERIFY, "SHA256withRSA", key, bytes(flipped), signature) is False
    assert execute(Action.VERIFY, "SHA256withRSA", key, payload, signature) is True
