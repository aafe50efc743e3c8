"""Use-case for ending a session or discarding a token."""

from __future__ import annotations

from okcode.application.interfaces import IdentityIssuer


class LogoutUserUseCase:
    def __init__(self, *, issuer: IdentityIssuer) -> None:
        self._issuer = issuer

    def execute(self, credential: str) -> None:
        if credential:
            self._issuer.revoke(credential)
