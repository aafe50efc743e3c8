# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from okcode.shared.config import DatabaseConfig
from okcode.shared.errors import StoreUnavailableError
from okcode.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _engine_kwargs(config: DatabaseConfig) -> dict[str, Any]:
    if config.url.startswith("sqlite"):
        kwargs: dict[str, Any] = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": int(config.pool_timeout),
            },
        }
        if _is_memory_sqlite(config.url):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_pre_ping": True,
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_timeout": config.pool_timeout,
    }


class Database:
    """Explicitly constructed engine + session factory; closed with ``dispose``."""

    def __init__(self, config: DatabaseConfig) -> None:
        self._engine: Engine = create_engine(config.url, echo=False, **_engine_kwargs(config))
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )
        logger.info(f"db: engine created for {self._engine.url.render_as_string(hide_password=True)}")

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_all(self) -> None:
        from okcode.infrastructure.db import models  # noqa: F401  (registers tables)

        Base.metadata.create_all(bind=self._engine)
        logger.info("Database schema ensured")

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self._engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        logger.debug("db.session: opened session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed session")
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            logger.exception("db.session: error, rolling back")
            session.rollback()
            raise StoreUnavailableError() from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            logger.debug("db.session: closed session")

    def ping(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error(f"db: ping failed ({type(exc).__name__})")
            raise StoreUnavailableError() from exc
        return True

    def dispose(self) -> None:
        self._engine.dispose()
        logger.info("db: engine disposed")


__all__ = ["Base", "Database"]
