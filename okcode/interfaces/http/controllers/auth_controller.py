# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from okcode.application.use_cases.users.login_user import LoginUserUseCase
from okcode.application.use_cases.users.logout_user import LogoutUserUseCase
from okcode.application.use_cases.users.register_user import (
    RegisterUserUseCase,
    RegistrationInput,
)
from okcode.domain.users.entities import IssuedCredential, Principal
from okcode.domain.users.exceptions import DuplicateUsernameError, InvalidCredentialsError
from okcode.infrastructure.audit import AuditAction, audit_log
from okcode.interfaces.http.dto.auth import (
    AuthResponseDTO,
    AuthSuccessDTO,
    LoginRequestDTO,
    PrincipalDTO,
    RegisterRequestDTO,
)
from okcode.interfaces.http.middleware.identity import (
    current_principal,
    extract_credential,
    login_required,
)
from okcode.shared.config import AuthConfig, SecurityConfig
from okcode.shared.errors.validation import raise_validation_error
from okcode.shared.logging import logger
from okcode.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        credential_kind: str,
        auth_config: AuthConfig,
        security: SecurityConfig,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._credential_kind = credential_kind
        self._auth = auth_config
        self._security = security

    def _respond(
        self, principal: Principal, credential: IssuedCredential, status: HTTPStatus
    ) -> tuple[Response, int]:
        token = credential.value if credential.kind == "token" else None
        payload = AuthResponseDTO(user=PrincipalDTO.from_principal(principal), token=token)
        response = jsonify(payload.dump())
        if credential.kind == "session":
            response.set_cookie(
                self._auth.session_cookie_name,
                credential.value,
                httponly=True,
                samesite=self._security.cookie_samesite,
                secure=self._security.cookie_secure,
                expires=credential.expires_at,
            )
        return response, status

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        data = RegistrationInput(
            username=dto.username,
            password=dto.password,
            name=dto.name,
            bio=dto.bio,
            website=dto.website,
            profile_image=dto.profile_image,
        )
        try:
            principal, credential = self._register_use_case.execute(data)
        except DuplicateUsernameError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=_get_client_ip(),
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            user_id=principal.id,
            ip_address=_get_client_ip(),
            details={"username": dto.username},
            success=True,
        )
        logger.info(f"auth.register: ok user_id={principal.id}")
        return self._respond(principal, credential, HTTPStatus.CREATED)

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()

        try:
            principal, credential = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=principal.id,
            ip_address=ip_address,
            details={"username": dto.username},
            success=True,
        )
        logger.info(f"auth.login: ok user_id={principal.id} mode={credential.kind}")
        return self._respond(principal, credential, HTTPStatus.OK)

    def logout(self) -> tuple[Response, int]:
        credential = extract_credential(
            request, kind=self._credential_kind, cookie_name=self._auth.session_cookie_name
        )
        principal = current_principal()

        self._logout_use_case.execute(credential)

        audit_log(
            AuditAction.LOGOUT,
            user_id=principal.id if principal else None,
            ip_address=_get_client_ip(),
            success=True,
        )

        response = jsonify(AuthSuccessDTO().model_dump())
        response.delete_cookie(
            self._auth.session_cookie_name,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
            httponly=True,
        )
        logger.info("auth.logout: ok")
        return response, HTTPStatus.OK

    @login_required
    def current_user(self) -> tuple[Response, int]:
        principal = current_principal()
        assert principal is not None
        payload = PrincipalDTO.from_principal(principal).model_dump(mode="json", by_alias=True)
        return jsonify(payload), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        throttle = rate_limit(
            self._security.rate_limit_requests,
            self._security.rate_limit_window,
            enabled=self._security.enable_rate_limit,
        )
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/register", view_func=throttle(self.register), methods=["POST"])
        bp.add_url_rule("/login", view_func=throttle(self.login), methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/user", view_func=self.current_user, methods=["GET"])
        return bp
