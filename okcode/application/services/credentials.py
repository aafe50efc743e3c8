# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Single credential check shared by every login entry point."""

from __future__ import annotations

from okcode.domain.users.entities import Principal
from okcode.domain.users.exceptions import InvalidCredentialsError
from okcode.domain.users.repositories import PasswordHasher, UserRepository
from okcode.shared.logging import logger


class CredentialVerifier:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def authenticate(self, username: str, password: str) -> Principal:
        user = self._users.find_by_username(username)
        if user is None:
            self._password_hasher.verify_dummy(password)
            logger.debug("credentials: rejected login attempt")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.debug("credentials: rejected login attempt")
            raise InvalidCredentialsError()

        return user.to_principal()


__all__ = ["CredentialVerifier"]
