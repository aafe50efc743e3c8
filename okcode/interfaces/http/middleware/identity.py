# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resolve the presented credential to a principal before route handlers run."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from functools import wraps

from flask import Flask, Request, g, request

from okcode.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from okcode.domain.users.entities import Principal
from okcode.shared.errors import UnauthorizedError
from okcode.shared.logging import logger


def extract_credential(req: Request, *, kind: str, cookie_name: str) -> str:
    """Session ids only travel in the cookie, tokens only in the Bearer header."""
    if kind == "session":
        return req.cookies.get(cookie_name, "")
    auth_header = req.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip()
    return ""


def configure_identity(
    app: Flask,
    *,
    current_user: GetCurrentUserUseCase,
    kind: str,
    cookie_name: str,
    skip_paths: tuple[str, ...] = ("/api/health",),
    debug_mode: bool = False,
) -> None:
    @app.before_request
    def _resolve_principal() -> None:
        g.principal = None
        if request.method == "OPTIONS" or request.path in skip_paths:
            return
        credential = extract_credential(request, kind=kind, cookie_name=cookie_name)
        if not credential:
            return

        g.credential = credential
        principal = current_user.execute(credential)
        if principal is None:
            if debug_mode:
                digest = hashlib.sha256(credential.encode()).hexdigest()[:8]
                logger.debug(f"identity: credential <hash:{digest}> did not resolve")
            return

        g.principal = principal
        g.user_id = principal.id


def current_principal() -> Principal | None:
    return getattr(g, "principal", None)


def login_required(f: Callable):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if current_principal() is None:
            logger.warning(f"Unauthenticated request to {request.method} {request.path}")
            raise UnauthorizedError()
        return f(*args, **kwargs)

    return wrapper


__all__ = ["configure_identity", "current_principal", "extract_credential", "login_required"]
