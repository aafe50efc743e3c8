# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .entities import User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def add(self, user: User) -> User: ...


class SessionStore(Protocol):
    def set(self, session_id: str, principal_id: int, ttl: timedelta) -> datetime: ...
    def get(self, session_id: str) -> int | None: ...
    def delete(self, session_id: str) -> None: ...
    def purge_expired(self) -> int: ...


class RevokedTokenStore(Protocol):
    def add(self, token_id: str, expires_at: datetime) -> None: ...
    def contains(self, token_id: str) -> bool: ...
    def purge_expired(self) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
    def verify_dummy(self, password: str) -> bool: ...
