from __future__ import annotations

import pytest
from pydantic import ValidationError

from okcode.application.services import password_hashing
from okcode.application.services.password_hashing import (
    ScryptPasswordHasher,
    split_stored_secret,
)
from okcode.domain.users.exceptions import MalformedStoredSecretError
from okcode.shared.config import HashingConfig
from okcode.tests.support import FAST_SCRYPT_N


def test_hash_has_key_and_salt_hex(fast_hasher: ScryptPasswordHasher) -> None:
    stored = fast_hasher.hash("correcthorse1")

    key_hex, salt_hex = stored.split(".")
    assert len(key_hex) == 128
    assert len(salt_hex) == 32
    int(key_hex, 16)
    int(salt_hex, 16)


def test_verify_accepts_the_right_password(fast_hasher: ScryptPasswordHasher) -> None:
    stored = fast_hasher.hash("correcthorse1")

    assert fast_hasher.verify("correcthorse1", stored) is True


def test_verify_rejects_a_wrong_password(fast_hasher: ScryptPasswordHasher) -> None:
    stored = fast_hasher.hash("correcthorse1")

    assert fast_hasher.verify("correcthorse2", stored) is False
    assert fast_hasher.verify("", stored) is False


def test_same_password_gets_a_fresh_salt(fast_hasher: ScryptPasswordHasher) -> None:
    first = fast_hasher.hash("correcthorse1")
    second = fast_hasher.hash("correcthorse1")

    assert first != second
    assert first.split(".")[1] != second.split(".")[1]


def test_empty_password_cannot_be_hashed(fast_hasher: ScryptPasswordHasher) -> None:
    with pytest.raises(ValueError):
        fast_hasher.hash("")


@pytest.mark.parametrize(
    "stored",
    [
        "",
        "no-separator",
        "abcd.",
        ".abcd",
        "ab.cd.ef",
        "zz.abcd",
        "abc.abcd",
        "abcd.xyz0",
    ],
)
def test_malformed_stored_secret_fails_closed(
    fast_hasher: ScryptPasswordHasher, stored: str
) -> None:
    assert fast_hasher.verify("correcthorse1", stored) is False


def test_truncated_key_fails(fast_hasher: ScryptPasswordHasher) -> None:
    key_hex, salt_hex = fast_hasher.hash("correcthorse1").split(".")

    assert fast_hasher.verify("correcthorse1", f"{key_hex[:-2]}.{salt_hex}") is False


def test_split_stored_secret_raises_on_garbage() -> None:
    with pytest.raises(MalformedStoredSecretError):
        split_stored_secret("not-a-secret")


# RFC 7914 section 12; the second vector uses Node's crypto.scrypt default cost.
RFC7914_NACL = bytes.fromhex(
    "fdbabe1c9d3472007856e7190d01e9fe7c6ad7cbc8237830e77376634b373162"
    "2eaf30d92e22a3886ff109279d9830dac727afb94a83ee6d8360cbdfa2cc0640"
)
RFC7914_SODIUM_CHLORIDE = bytes.fromhex(
    "7023bdcb3afd7348461c06cd81fd38ebfda8fbba904f8e3ea9b543f6545da1f2"
    "d5432955613f0fcf62d49705242a9af9e61e85dc0d651e40dfcf017b45575887"
)


def test_derivation_matches_rfc7914_vectors() -> None:
    small = ScryptPasswordHasher(n=1024, r=8, p=16)
    default = ScryptPasswordHasher()

    assert small._derive("password", "NaCl") == RFC7914_NACL
    assert default._derive("pleaseletmein", "SodiumChloride") == RFC7914_SODIUM_CHLORIDE


def test_salt_hex_text_is_passed_to_scrypt_verbatim(monkeypatch: pytest.MonkeyPatch) -> None:
    hasher = ScryptPasswordHasher(n=FAST_SCRYPT_N)
    seen: dict = {}

    def fake_scrypt(password, *, salt, n, r, p, maxmem, dklen):
        seen.update(password=password, salt=salt, n=n, r=r, p=p, dklen=dklen)
        return b"\x11" * dklen

    monkeypatch.setattr(password_hashing.hashlib, "scrypt", fake_scrypt)
    stored = "11" * 64 + ".00112233445566778899aabbccddeeff"

    assert hasher.verify("password123", stored) is True
    assert seen == {
        "password": b"password123",
        "salt": b"00112233445566778899aabbccddeeff",
        "n": FAST_SCRYPT_N,
        "r": 8,
        "p": 1,
        "dklen": 64,
    }


def test_verify_dummy_always_fails(fast_hasher: ScryptPasswordHasher) -> None:
    assert fast_hasher.verify_dummy("anything") is False


def test_short_salt_is_refused() -> None:
    with pytest.raises(ValueError):
        ScryptPasswordHasher(n=FAST_SCRYPT_N, salt_bytes=8)


def test_from_config_uses_configured_cost() -> None:
    hasher = ScryptPasswordHasher.from_config(HashingConfig(SCRYPT_N=FAST_SCRYPT_N, SALT_BYTES=24))

    _, salt_hex = hasher.hash("correcthorse1").split(".")
    assert len(salt_hex) == 48


def test_cost_must_be_a_power_of_two() -> None:
    with pytest.raises(ValidationError):
        HashingConfig(SCRYPT_N=1000)
