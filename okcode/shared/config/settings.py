# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_WEAK_SECRETS = frozenset(
    {"", "dev", "development", "test", "your-secret-key", "instagram-clone-secret"}
)


def _section_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///okcode.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _section_config()


class StorageConfig(BaseSettings):
    backend: Literal["sql", "memory"] = Field("sql", alias="STORAGE_BACKEND")

    model_config = _section_config()


class HashingConfig(BaseSettings):
    # Node crypto.scrypt defaults.
    n: int = Field(16384, ge=2, alias="SCRYPT_N")
    r: int = Field(8, ge=1, alias="SCRYPT_R")
    p: int = Field(1, ge=1, alias="SCRYPT_P")
    dklen: int = Field(64, ge=16, alias="SCRYPT_DKLEN")
    salt_bytes: int = Field(16, ge=16, alias="SALT_BYTES")

    model_config = _section_config()

    @field_validator("n")
    @classmethod
    def _power_of_two(cls, value: int) -> int:
        if value & (value - 1):
            raise ValueError("SCRYPT_N must be a power of two")
        return value


class AuthConfig(BaseSettings):
    mode: Literal["session", "token"] = Field("session", alias="AUTH_MODE")

    session_ttl: int = Field(30 * 24 * 60 * 60, ge=60, alias="SESSION_TTL")
    session_cookie_name: str = Field("session_id", alias="SESSION_COOKIE_NAME")

    token_ttl: int = Field(7 * 24 * 60 * 60, ge=60, alias="TOKEN_TTL")
    jwt_secret: str | None = Field(None, alias="JWT_SECRET")
    token_revocation: Literal["none", "denylist"] = Field("none", alias="TOKEN_REVOCATION")

    purge_interval: float = Field(24 * 60 * 60, ge=0, alias="PURGE_INTERVAL")

    model_config = _section_config()


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _section_config()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _storage_config_factory() -> StorageConfig:
    return StorageConfig()  # type: ignore[call-arg]


def _hashing_config_factory() -> HashingConfig:
    return HashingConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")
    seed_demo_users: bool = Field(False, alias="SEED_DEMO_USERS")
    seed_demo_password: str | None = Field(None, alias="SEED_DEMO_PASSWORD")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    storage: StorageConfig = Field(default_factory=_storage_config_factory)
    hashing: HashingConfig = Field(default_factory=_hashing_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("debug_logging", "seed_demo_users", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        weak = [
            name
            for name, value in (
                ("SECRET_KEY", self.secret_key),
                ("JWT_SECRET", self.auth.jwt_secret),
            )
            if value is not None and value in _WEAK_SECRETS
        ]
        if weak:
            print(
                f"\n❌ CRITICAL SECURITY ERROR: Insecure {', '.join(weak)} detected in production!\n"
                "   Signing keys must be strong random values in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.auth.mode == "token" and self.auth.token_revocation == "none":
            warnings.append("⚠️  Tokens stay valid after logout (TOKEN_REVOCATION=none)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    @property
    def token_secret(self) -> str:
        return self.auth.jwt_secret or self.secret_key


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "HashingConfig",
    "SecurityConfig",
    "StorageConfig",
    "load_config",
]
