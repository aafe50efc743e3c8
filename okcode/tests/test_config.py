from __future__ import annotations

import pytest

from okcode.shared.config import AppConfig, AuthConfig, SecurityConfig


def test_weak_secret_aborts_production_startup() -> None:
    with pytest.raises(SystemExit):
        AppConfig(APP_ENV="production", SECRET_KEY="dev")


def test_weak_jwt_secret_aborts_production_startup() -> None:
    with pytest.raises(SystemExit):
        AppConfig(
            APP_ENV="production",
            SECRET_KEY="a-strong-random-value-0123456789",
            auth=AuthConfig(JWT_SECRET="test"),
        )


def test_strong_secret_starts_in_production() -> None:
    config = AppConfig(APP_ENV="production", SECRET_KEY="a-strong-random-value-0123456789")

    assert config.is_production()
    assert config.token_secret == "a-strong-random-value-0123456789"


def test_jwt_secret_takes_precedence() -> None:
    config = AppConfig(SECRET_KEY="app-secret", auth=AuthConfig(JWT_SECRET="jwt-secret"))

    assert config.token_secret == "jwt-secret"


def test_defaults_match_documented_values() -> None:
    auth = AuthConfig()

    assert auth.mode == "session"
    assert auth.session_ttl == 30 * 24 * 60 * 60
    assert auth.token_ttl == 7 * 24 * 60 * 60
    assert auth.session_cookie_name == "session_id"
    assert auth.token_revocation == "none"


def test_origins_and_flags_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "no")
    monkeypatch.setenv("AUTH_MODE", "token")

    security = SecurityConfig()

    assert security.allowed_origins == ["https://a.example", "https://b.example"]
    assert security.enable_rate_limit is False
    assert AuthConfig().mode == "token"
