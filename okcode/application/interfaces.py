# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from okcode.domain.users.entities import IssuedCredential, Principal


class IdentityIssuer(Protocol):
    """One identity discipline (server-side sessions or signed tokens)."""

    kind: str

    def issue(self, principal: Principal) -> IssuedCredential: ...

    def resolve(self, credential: str) -> int | None: ...

    def revoke(self, credential: str) -> None: ...
