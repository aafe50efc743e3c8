# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from okcode.domain.users.entities import User as DomainUser
from okcode.domain.users.exceptions import DuplicateUsernameError
from okcode.domain.users.repositories import RevokedTokenStore, SessionStore, UserRepository
from okcode.infrastructure.db.models import RevokedTokenRow, SessionRow, UserRow, as_utc
from okcode.infrastructure.db.session import Database
from okcode.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_domain(row: UserRow) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        name=row.name,
        bio=row.bio,
        website=row.website,
        profile_image=row.profile_image,
        created_at=as_utc(row.created_at) if row.created_at else None,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def find_by_username(self, username: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.get(UserRow, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = UserRow(
                    username=user.username,
                    password_hash=user.password_hash,
                    name=user.name,
                    bio=user.bio,
                    website=user.website,
                    profile_image=user.profile_image,
                )
                if user.created_at is not None:
                    row.created_at = user.created_at
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info("users: unique constraint rejected a duplicate username")
            raise DuplicateUsernameError() from exc


class SqlAlchemySessionStore(SessionStore):
    def __init__(
        self, database: Database, *, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._db = database
        self._clock = clock

    def set(self, session_id: str, principal_id: int, ttl: timedelta) -> datetime:
        expires_at = self._clock() + ttl
        with self._db.session_scope() as session:
            session.merge(
                SessionRow(session_id=session_id, user_id=principal_id, expires_at=expires_at)
            )
        return expires_at

    def get(self, session_id: str) -> int | None:
        with self._db.session_scope() as session:
            row = session.get(SessionRow, session_id)
            if row is None:
                return None
            if as_utc(row.expires_at) <= self._clock():
                session.delete(row)
                return None
            return row.user_id

    def delete(self, session_id: str) -> None:
        with self._db.session_scope() as session:
            session.execute(delete(SessionRow).where(SessionRow.session_id == session_id))

    def purge_expired(self) -> int:
        with self._db.session_scope() as session:
            result = session.execute(
                delete(SessionRow).where(SessionRow.expires_at <= self._clock())
            )
            return result.rowcount or 0


class SqlAlchemyRevokedTokenStore(RevokedTokenStore):
    def __init__(
        self, database: Database, *, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._db = database
        self._clock = clock

    def add(self, token_id: str, expires_at: datetime) -> None:
        with self._db.session_scope() as session:
            session.merge(RevokedTokenRow(token_id=token_id, expires_at=expires_at))

    def contains(self, token_id: str) -> bool:
        with self._db.session_scope() as session:
            return session.get(RevokedTokenRow, token_id) is not None

    def purge_expired(self) -> int:
        with self._db.session_scope() as session:
            result = session.execute(
                delete(RevokedTokenRow).where(RevokedTokenRow.expires_at <= self._clock())
            )
            return result.rowcount or 0
