# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum


class ValidationErrorType(str, Enum):
    MISSING = "missing"
    USERNAME_INVALID_CHARS = "username_invalid_chars"
    PASSWORD_BLANK = "password_blank"
    URL_INVALID = "url_invalid"


__all__ = ["ValidationErrorType"]
