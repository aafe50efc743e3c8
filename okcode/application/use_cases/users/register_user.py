# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from okcode.application.interfaces import IdentityIssuer
from okcode.domain.users.entities import IssuedCredential, Principal, User
from okcode.domain.users.exceptions import DuplicateUsernameError
from okcode.domain.users.repositories import PasswordHasher, UserRepository


@dataclass(slots=True, frozen=True)
class RegistrationInput:
    username: str
    password: str
    name: str | None = None
    bio: str | None = None
    website: str | None = None
    profile_image: str | None = None


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        issuer: IdentityIssuer,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._issuer = issuer
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, data: RegistrationInput) -> tuple[Principal, IssuedCredential]:
        if self._users.find_by_username(data.username):
            raise DuplicateUsernameError()
        hashed = self._password_hasher.hash(data.password)
        user = User(
            id=0,
            username=data.username,
            password_hash=hashed,
            name=data.name,
            bio=data.bio,
            website=data.website,
            profile_image=data.profile_image,
            created_at=self._clock(),
        )
        principal = self._users.add(user).to_principal()
        credential = self._issuer.issue(principal)
        return principal, credential
