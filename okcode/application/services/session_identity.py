# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from okcode.domain.users.entities import IssuedCredential, Principal
from okcode.domain.users.repositories import SessionStore
from okcode.shared.logging import logger

DEFAULT_SESSION_TTL = timedelta(days=30)


class SessionIdentityIssuer:
    """Stateful identity: opaque session ids mapped to principals in a store."""

    kind = "session"

    def __init__(self, *, store: SessionStore, ttl: timedelta = DEFAULT_SESSION_TTL) -> None:
        self._store = store
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, principal: Principal) -> IssuedCredential:
        session_id = secrets.token_urlsafe(48)
        expires_at: datetime = self._store.set(session_id, principal.id, self._ttl)
        logger.info(
            f"sessions: issued for user={principal.id} exp={expires_at.isoformat()} "
            f"sid={session_id[:8]}…"
        )
        return IssuedCredential(kind="session", value=session_id, expires_at=expires_at)

    def resolve(self, credential: str) -> int | None:
        if not credential:
            return None
        return self._store.get(credential)

    def revoke(self, credential: str) -> None:
        if not credential:
            return
        self._store.delete(credential)
        logger.info(f"sessions: revoked sid={credential[:8]}…")


__all__ = ["DEFAULT_SESSION_TTL", "SessionIdentityIssuer"]
