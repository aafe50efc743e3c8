# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from okcode.application.interfaces import IdentityIssuer
from okcode.application.services.credentials import CredentialVerifier
from okcode.domain.users.entities import IssuedCredential, Principal


class LoginUserUseCase:
    def __init__(self, *, verifier: CredentialVerifier, issuer: IdentityIssuer) -> None:
        self._verifier = verifier
        self._issuer = issuer

    def execute(self, username: str, password: str) -> tuple[Principal, IssuedCredential]:
        principal = self._verifier.authenticate(username, password)
        credential = self._issuer.issue(principal)
        return principal, credential
