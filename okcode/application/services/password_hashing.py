# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies.

Stored secrets have the form ``<derived key hex>.<salt hex>``. The salt hex
string itself is the scrypt salt, matching secrets written by Node's
``crypto.scrypt(password, saltHex, 64)``.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from okcode.domain.users.exceptions import MalformedStoredSecretError
from okcode.domain.users.repositories import PasswordHasher
from okcode.shared.config import HashingConfig
from okcode.shared.logging import logger

SEPARATOR = "."
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_hex(value: str) -> bool:
    return bool(value) and len(value) % 2 == 0 and all(ch in _HEX_DIGITS for ch in value)


def split_stored_secret(stored: str) -> tuple[bytes, str]:
    if not stored or stored.count(SEPARATOR) != 1:
        raise MalformedStoredSecretError()
    key_hex, salt_hex = stored.split(SEPARATOR)
    if not _is_hex(key_hex) or not _is_hex(salt_hex):
        raise MalformedStoredSecretError()
    return bytes.fromhex(key_hex), salt_hex


class ScryptPasswordHasher(PasswordHasher):
    def __init__(
        self,
        *,
        n: int = 16384,
        r: int = 8,
        p: int = 1,
        dklen: int = 64,
        salt_bytes: int = 16,
    ) -> None:
        if salt_bytes < 16:
            raise ValueError("salt must be at least 16 bytes")
        self._n = n
        self._r = r
        self._p = p
        self._dklen = dklen
        self._salt_bytes = salt_bytes
        # scrypt needs 128 * r * N bytes; leave headroom above OpenSSL's 32 MiB default.
        self._maxmem = max(64 * 1024 * 1024, 256 * r * n)
        self._dummy_secret = self.hash(secrets.token_urlsafe(32))

    @classmethod
    def from_config(cls, config: HashingConfig) -> ScryptPasswordHasher:
        return cls(
            n=config.n,
            r=config.r,
            p=config.p,
            dklen=config.dklen,
            salt_bytes=config.salt_bytes,
        )

    def _derive(self, password: str, salt_hex: str) -> bytes:
        return hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt_hex.encode("ascii"),
            n=self._n,
            r=self._r,
            p=self._p,
            maxmem=self._maxmem,
            dklen=self._dklen,
        )

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("password must not be empty")
        salt_hex = secrets.token_hex(self._salt_bytes)
        return f"{self._derive(password, salt_hex).hex()}{SEPARATOR}{salt_hex}"

    def verify(self, password: str, hashed: str) -> bool:
        try:
            expected, salt_hex = split_stored_secret(hashed)
        except MalformedStoredSecretError:
            logger.warning("password_hashing: malformed stored secret, verification failed")
            return self.verify_dummy(password)
        supplied = self._derive(password or "", salt_hex)
        return hmac.compare_digest(expected, supplied)

    def verify_dummy(self, password: str) -> bool:
        """Burn one derivation so unknown usernames cost as much as wrong passwords."""
        self.verify(password, self._dummy_secret)
        return False


__all__ = ["ScryptPasswordHasher", "split_stored_secret"]
