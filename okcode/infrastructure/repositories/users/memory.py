# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Dictionary-backed stores for development and tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from threading import Lock

from okcode.domain.users.entities import User
from okcode.domain.users.exceptions import DuplicateUsernameError
from okcode.domain.users.repositories import RevokedTokenStore, SessionStore, UserRepository
from okcode.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryUserRepository(UserRepository):
    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._by_id: dict[int, User] = {}
        self._by_username: dict[str, User] = {}
        self._seq = 1
        self._lock = Lock()
        self._clock = clock

    def find_by_username(self, username: str) -> User | None:
        with self._lock:
            return self._by_username.get(username)

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            return self._by_id.get(user_id)

    def add(self, user: User) -> User:
        with self._lock:
            if user.username in self._by_username:
                raise DuplicateUsernameError()
            stored = replace(user, id=self._seq, created_at=user.created_at or self._clock())
            self._seq += 1
            self._by_id[stored.id] = stored
            self._by_username[stored.username] = stored
            return stored


class InMemorySessionStore(SessionStore):
    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._sessions: dict[str, tuple[int, datetime]] = {}
        self._lock = Lock()
        self._clock = clock

    def set(self, session_id: str, principal_id: int, ttl: timedelta) -> datetime:
        expires_at = self._clock() + ttl
        with self._lock:
            self._sessions[session_id] = (principal_id, expires_at)
        return expires_at

    def get(self, session_id: str) -> int | None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            principal_id, expires_at = entry
            if expires_at <= self._clock():
                del self._sessions[session_id]
                return None
            return principal_id

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, (_, exp) in self._sessions.items() if exp <= now]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.debug(f"sessions: purged {len(expired)} expired entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class InMemoryRevokedTokenStore(RevokedTokenStore):
    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._revoked: dict[str, datetime] = {}
        self._lock = Lock()
        self._clock = clock

    def add(self, token_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._revoked[token_id] = expires_at

    def contains(self, token_id: str) -> bool:
        with self._lock:
            return token_id in self._revoked

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [jti for jti, exp in self._revoked.items() if exp <= now]
            for jti in expired:
                del self._revoked[jti]
        return len(expired)
