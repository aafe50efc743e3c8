# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from okcode.application.interfaces import IdentityIssuer
from okcode.domain.users.entities import Principal
from okcode.domain.users.repositories import UserRepository


class GetCurrentUserUseCase:
    """Resolve a presented credential to a principal, or ``None`` if unauthenticated."""

    def __init__(self, *, users: UserRepository, issuer: IdentityIssuer) -> None:
        self._users = users
        self._issuer = issuer

    def execute(self, credential: str) -> Principal | None:
        if not credential:
            return None
        principal_id = self._issuer.resolve(credential)
        if principal_id is None:
            return None
        user = self._users.find_by_id(principal_id)
        return user.to_principal() if user else None
