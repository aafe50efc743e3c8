# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from okcode.domain.users.entities import Principal
from okcode.shared.errors.validation_types import ValidationErrorType

_USERNAME_PATTERN = r"^[a-zA-Z0-9_.]+$"


def _check_username(value: str) -> str:
    if not value:
        raise PydanticCustomError(
            ValidationErrorType.MISSING.value,
            "Username cannot be empty",
            {}
        )

    if not re.match(_USERNAME_PATTERN, value):
        raise PydanticCustomError(
            ValidationErrorType.USERNAME_INVALID_CHARS.value,
            "Username may contain only ASCII letters, digits, '_' and '.'",
            {"pattern": _USERNAME_PATTERN}
        )

    return value


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=8, max_length=128)
    name: str | None = Field(None, max_length=128)
    bio: str | None = Field(None, max_length=2000)
    website: str | None = Field(None, max_length=512)
    profile_image: str | None = Field(None, max_length=1024)

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_BLANK.value,
                "Password cannot be blank",
                {}
            )
        return value

    @field_validator("website", "profile_image")
    @classmethod
    def validate_url(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not re.match(r"^https?://", value):
            raise PydanticCustomError(
                ValidationErrorType.URL_INVALID.value,
                "Must be an http(s) URL",
                {}
            )
        return value

    @field_validator("name", "bio")
    @classmethod
    def empty_to_none(cls, value: str | None) -> str | None:
        return value or None


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login


class PrincipalDTO(BaseModel):
    id: int
    username: str
    name: str | None
    bio: str | None
    website: str | None
    profile_image: str | None
    created_at: datetime | None

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    @classmethod
    def from_principal(cls, principal: Principal) -> PrincipalDTO:
        return cls(
            id=principal.id,
            username=principal.username,
            name=principal.name,
            bio=principal.bio,
            website=principal.website,
            profile_image=principal.profile_image,
            created_at=principal.created_at,
        )


class AuthResponseDTO(BaseModel):
    user: PrincipalDTO
    token: str | None = None

    def dump(self) -> dict:
        payload: dict = {"user": self.user.model_dump(mode="json", by_alias=True)}
        if self.token:
            payload["token"] = self.token
        return payload


class AuthSuccessDTO(BaseModel):
    ok: bool = True
