# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .memory import InMemoryRevokedTokenStore, InMemorySessionStore, InMemoryUserRepository
from .sqlalchemy_user_repository import (
    SqlAlchemyRevokedTokenStore,
    SqlAlchemySessionStore,
    SqlAlchemyUserRepository,
)

__all__ = [
    "InMemoryRevokedTokenStore",
    "InMemorySessionStore",
    "InMemoryUserRepository",
    "SqlAlchemyRevokedTokenStore",
    "SqlAlchemySessionStore",
    "SqlAlchemyUserRepository",
]
