from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

from flask import Flask

from okcode.app import create_app
from okcode.container import Container
from okcode.shared.config import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    HashingConfig,
    SecurityConfig,
    StorageConfig,
)

FAST_SCRYPT_N = 1024
T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_config(
    *,
    auth_mode: str = "session",
    storage: str = "memory",
    database_url: str = "sqlite://",
    revocation: str = "none",
    rate_limit: bool = False,
    rate_limit_requests: int = 10,
    **overrides: Any,
) -> AppConfig:
    values: dict[str, Any] = {
        "APP_ENV": "test",
        "SECRET_KEY": "test-secret-key-for-signing-0123456789",
        "LOG_LEVEL": "WARNING",
        "hashing": HashingConfig(SCRYPT_N=FAST_SCRYPT_N),
        "storage": StorageConfig(STORAGE_BACKEND=storage),
        "database": DatabaseConfig(DATABASE_URL=database_url),
        "auth": AuthConfig(
            AUTH_MODE=auth_mode, TOKEN_REVOCATION=revocation, PURGE_INTERVAL=0
        ),
        "security": SecurityConfig(
            ENABLE_RATE_LIMIT=rate_limit, RL_LIMIT=rate_limit_requests, ALLOWED_ORIGINS="*"
        ),
    }
    values.update(overrides)
    return AppConfig(**values)


def build_app(config: AppConfig) -> Iterator[Flask]:
    container = Container(config)
    app = create_app(config, container)
    app.config.update(TESTING=True)
    yield app
    container.close()
