# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from okcode.shared.errors.base import DomainError


class DuplicateUsernameError(DomainError):
    code = "username_taken"
    status = HTTPStatus.BAD_REQUEST


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class InvalidTokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED


class MalformedStoredSecretError(DomainError):
    """Raised while parsing a stored secret; callers turn it into a failed verification."""

    code = "malformed_stored_secret"
    status = HTTPStatus.INTERNAL_SERVER_ERROR
