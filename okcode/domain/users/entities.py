# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

CredentialKind = Literal["session", "token"]


@dataclass(slots=True, frozen=True)
class Principal:
    """Public identity of an account. Never carries secret material."""

    id: int
    username: str
    name: str | None
    bio: str | None
    website: str | None
    profile_image: str | None
    created_at: datetime | None


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    password_hash: str
    name: str | None = None
    bio: str | None = None
    website: str | None = None
    profile_image: str | None = None
    created_at: datetime | None = None

    def to_principal(self) -> Principal:
        return Principal(
            id=self.id,
            username=self.username,
            name=self.name,
            bio=self.bio,
            website=self.website,
            profile_image=self.profile_image,
            created_at=self.created_at,
        )


@dataclass(slots=True, frozen=True)
class IssuedCredential:

    kind: CredentialKind
    value: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:

    principal_id: int
    issued_at: datetime
    expires_at: datetime
    token_id: str
