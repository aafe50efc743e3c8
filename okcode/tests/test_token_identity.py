from __future__ import annotations

from datetime import datetime

import jwt
import pytest

from okcode.application.services.token_identity import TokenIdentityIssuer
from okcode.domain.users.entities import Principal
from okcode.domain.users.exceptions import InvalidTokenError
from okcode.infrastructure.repositories.users import InMemoryRevokedTokenStore
from okcode.tests.support import T0, FakeClock

SECRET = "token-signing-secret-0123456789abcdef"


def _principal(user_id: int = 1) -> Principal:
    return Principal(
        id=user_id,
        username="alice",
        name=None,
        bio=None,
        website=None,
        profile_image=None,
        created_at=T0,
    )


def _issuer(clock: FakeClock, **kwargs) -> TokenIdentityIssuer:
    return TokenIdentityIssuer(secret=SECRET, clock=clock, **kwargs)


def test_token_carries_principal_and_expiry(clock: FakeClock) -> None:
    issuer = _issuer(clock)

    credential = issuer.issue(_principal(42))
    claims = issuer.verify_token(credential.value)

    assert credential.kind == "token"
    assert claims.principal_id == 42
    assert claims.issued_at == T0
    assert claims.expires_at == datetime(2025, 1, 8, 12, 0, 0, tzinfo=T0.tzinfo)
    assert credential.expires_at == claims.expires_at


def test_token_valid_one_hour_later(clock: FakeClock) -> None:
    issuer = _issuer(clock)
    token = issuer.issue(_principal(42)).value

    clock.advance(hours=1)

    assert issuer.resolve(token) == 42


def test_token_expires_after_seven_days(clock: FakeClock) -> None:
    issuer = _issuer(clock)
    token = issuer.issue(_principal(42)).value

    clock.advance(days=7)
    assert issuer.resolve(token) is None

    clock.advance(seconds=1)
    with pytest.raises(InvalidTokenError):
        issuer.verify_token(token)


def test_tampered_signature_is_rejected(clock: FakeClock) -> None:
    issuer = _issuer(clock)
    header, payload, signature = issuer.issue(_principal()).value.split(".")
    swapped = ("B" if signature[0] == "A" else "A") + signature[1:]

    with pytest.raises(InvalidTokenError):
        issuer.verify_token(f"{header}.{payload}.{swapped}")


def test_token_signed_with_another_secret_is_rejected(clock: FakeClock) -> None:
    token = TokenIdentityIssuer(secret="some-other-secret-0123456789", clock=clock).issue(
        _principal()
    ).value

    with pytest.raises(InvalidTokenError):
        _issuer(clock).verify_token(token)


@pytest.mark.parametrize(
    "payload",
    [
        {"sub": "1", "iat": 1735732800, "exp": 1736337600},
        {"sub": "alice", "iat": 1735732800, "exp": 1736337600, "jti": "x"},
        {"iat": 1735732800, "exp": 1736337600, "jti": "x"},
    ],
)
def test_structurally_invalid_claims_are_rejected(clock: FakeClock, payload: dict) -> None:
    token = jwt.encode(payload, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        _issuer(clock).verify_token(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_garbage_is_rejected(clock: FakeClock, token: str) -> None:
    assert _issuer(clock).resolve(token) is None


def test_logout_without_revocation_keeps_token_valid(clock: FakeClock) -> None:
    issuer = _issuer(clock)
    token = issuer.issue(_principal(7)).value

    issuer.revoke(token)

    assert issuer.revocation_enabled is False
    assert issuer.resolve(token) == 7


def test_denylist_rejects_revoked_token(clock: FakeClock) -> None:
    revoked = InMemoryRevokedTokenStore(clock=clock)
    issuer = _issuer(clock, revoked=revoked)
    token = issuer.issue(_principal(7)).value
    other = issuer.issue(_principal(8)).value

    issuer.revoke(token)

    assert issuer.resolve(token) is None
    assert issuer.resolve(other) == 8


def test_denylist_entries_are_purged_after_expiry(clock: FakeClock) -> None:
    revoked = InMemoryRevokedTokenStore(clock=clock)
    issuer = _issuer(clock, revoked=revoked)
    issuer.revoke(issuer.issue(_principal(7)).value)

    assert revoked.purge_expired() == 0
    clock.advance(days=7)
    assert revoked.purge_expired() == 1


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        TokenIdentityIssuer(secret="")
