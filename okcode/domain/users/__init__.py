# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import IssuedCredential, Principal, TokenClaims, User
from .exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidTokenError,
    MalformedStoredSecretError,
)
from .repositories import PasswordHasher, RevokedTokenStore, SessionStore, UserRepository

__all__ = [
    "DuplicateUsernameError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "IssuedCredential",
    "MalformedStoredSecretError",
    "PasswordHasher",
    "Principal",
    "RevokedTokenStore",
    "SessionStore",
    "TokenClaims",
    "User",
    "UserRepository",
]
