# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless identity: HS256 JSON Web Tokens.

Expiry is checked against an injectable clock instead of PyJWT's wall-clock
check, so every decode failure and every expiry maps to the same
``InvalidTokenError``.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from okcode.domain.users.entities import IssuedCredential, Principal, TokenClaims
from okcode.domain.users.exceptions import InvalidTokenError
from okcode.domain.users.repositories import RevokedTokenStore
from okcode.shared.logging import logger

ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(days=7)
_REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIdentityIssuer:
    kind = "token"

    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        revoked: RevokedTokenStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._revoked = revoked
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def revocation_enabled(self) -> bool:
        return self._revoked is not None

    def issue(self, principal: Principal) -> IssuedCredential:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": str(principal.id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        logger.info(f"tokens: issued for user={principal.id} exp={expires_at.isoformat()}")
        return IssuedCredential(kind="token", value=token, expires_at=expires_at)

    def verify_token(self, token: str) -> TokenClaims:
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.debug(f"tokens: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        claims = self._parse_claims(payload)
        if self._clock() >= claims.expires_at:
            logger.debug("tokens: rejected (expired)")
            raise InvalidTokenError()
        if self._revoked is not None and self._revoked.contains(claims.token_id):
            logger.debug("tokens: rejected (revoked)")
            raise InvalidTokenError()
        return claims

    @staticmethod
    def _parse_claims(payload: dict) -> TokenClaims:
        sub, iat, exp, jti = (payload.get(name) for name in _REQUIRED_CLAIMS)
        if not isinstance(sub, str) or not sub.isdigit():
            raise InvalidTokenError()
        if not all(isinstance(value, int) and not isinstance(value, bool) for value in (iat, exp)):
            raise InvalidTokenError()
        if not isinstance(jti, str) or not jti:
            raise InvalidTokenError()
        return TokenClaims(
            principal_id=int(sub),
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=datetime.fromtimestamp(exp, UTC),
            token_id=jti,
        )

    def resolve(self, credential: str) -> int | None:
        try:
            return self.verify_token(credential).principal_id
        except InvalidTokenError:
            return None

    def revoke(self, credential: str) -> None:
        if self._revoked is None:
            logger.info("tokens: logout without revocation, token stays valid until expiry")
            return
        try:
            claims = self.verify_token(credential)
        except InvalidTokenError:
            return
        self._revoked.add(claims.token_id, claims.expires_at)
        logger.info(f"tokens: revoked for user={claims.principal_id}")


__all__ = ["ALGORITHM", "DEFAULT_TOKEN_TTL", "TokenIdentityIssuer"]
