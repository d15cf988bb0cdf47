# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, g, request
from pydantic import ValidationError

from easyapi.application.use_cases.auth import (
    GenerateApiKeyUseCase,
    ListSessionsUseCase,
    LoginUserUseCase,
    LogoutAllDevicesUseCase,
    LogoutUserUseCase,
    RefreshAccessTokenUseCase,
    RegisterUserUseCase,
    SetUserActiveUseCase,
)
from easyapi.infrastructure.audit import AuditAction, AuditLogger
from easyapi.interfaces.http.dto.auth import (
    LoginRequestDTO,
    RefreshRequestDTO,
    RegisterRequestDTO,
    SessionDTO,
    UserDTO,
)
from easyapi.interfaces.http.errors import (
    ApiKeyGenerationError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    LogoutFailedError,
    RegistrationFailedError,
    UserNotFoundError,
)
from easyapi.interfaces.http.middleware.auth import require_current_user
from easyapi.interfaces.http.responses import success_response
from easyapi.shared.errors.validation import raise_validation_error
from easyapi.shared.logging import ContextualLogger, logger
from easyapi.shared.middleware.pipeline import Pipeline, PipelineRequest


def _get_client_ip() -> str:
    pipeline_request: PipelineRequest | None = getattr(g, "pipeline_request", None)
    if pipeline_request is not None:
        return pipeline_request.client_ip
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address or "unknown"


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        refresh_use_case: RefreshAccessTokenUseCase,
        logout_use_case: LogoutUserUseCase,
        logout_all_use_case: LogoutAllDevicesUseCase,
        generate_api_key_use_case: GenerateApiKeyUseCase,
        list_sessions_use_case: ListSessionsUseCase,
        set_user_active_use_case: SetUserActiveUseCase,
        register_pipeline: Pipeline,
        login_pipeline: Pipeline,
        protected_pipeline: Pipeline,
        admin_pipeline: Pipeline,
        audit: AuditLogger | None = None,
        log: ContextualLogger = logger,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_use_case = refresh_use_case
        self._logout_use_case = logout_use_case
        self._logout_all_use_case = logout_all_use_case
        self._generate_api_key_use_case = generate_api_key_use_case
        self._list_sessions_use_case = list_sessions_use_case
        self._set_user_active_use_case = set_user_active_use_case
        self._register_pipeline = register_pipeline
        self._login_pipeline = login_pipeline
        self._protected_pipeline = protected_pipeline
        self._admin_pipeline = admin_pipeline
        self._audit = audit or AuditLogger(log)
        self._log = log

    def register(self) -> tuple[Response, HTTPStatus]:
        try:
            dto = RegisterRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc, "Email and password are required")

        result = self._register_use_case.execute(dto.email, dto.password, dto.role)
        if not result.ok:
            self._log.info(f"auth.register: rejected ({result.failure.value})")
            raise RegistrationFailedError(result.message or "Registration failed")

        user = result.unwrap()
        self._audit.log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"role": user.role.value},
        )
        self._log.info(f"auth.register: ok user_id={user.id}")
        return success_response(
            "User registered successfully",
            {"user": UserDTO.from_domain(user).model_dump()},
            HTTPStatus.CREATED,
        )

    def login(self) -> tuple[Response, HTTPStatus]:
        try:
            dto = LoginRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc, "Email and password are required")

        ip_address = _get_client_ip()
        result = self._login_use_case.execute(dto.email, dto.password)
        if not result.ok:
            self._audit.log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"reason": result.failure.value},
                success=False,
            )
            raise InvalidCredentialsError(result.message or "Invalid email or password")

        grant = result.unwrap()
        self._audit.log(AuditAction.LOGIN_SUCCESS, user_id=grant.user.id, ip_address=ip_address)
        self._log.info(f"auth.login: ok user_id={grant.user.id}")
        return success_response(
            "Login successful",
            {
                "accessToken": grant.access_token,
                "refreshToken": grant.refresh_token,
                "user": UserDTO.from_domain(grant.user).model_dump(),
                "expiresIn": grant.expires_in,
            },
        )

    def refresh(self) -> tuple[Response, HTTPStatus]:
        try:
            dto = RefreshRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc, "Refresh token is required")

        result = self._refresh_use_case.execute(dto.refresh_token)
        if not result.ok:
            self._log.info(f"auth.refresh: rejected ({result.failure.value})")
            raise InvalidRefreshTokenError(result.message or "Invalid refresh token")

        grant = result.unwrap()
        self._audit.log(AuditAction.TOKEN_REFRESHED, user_id=grant.user_id, ip_address=_get_client_ip())
        return success_response(
            "Token refreshed successfully",
            {"accessToken": grant.access_token, "expiresIn": grant.expires_in},
        )

    def logout(self) -> tuple[Response, HTTPStatus]:
        try:
            dto = RefreshRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc, "Refresh token is required")

        result = self._logout_use_case.execute(dto.refresh_token)
        if not result.ok:
            self._log.info("auth.logout: token unknown or already revoked")
            raise LogoutFailedError(result.message or "Invalid or already revoked token")

        self._audit.log(AuditAction.LOGOUT, ip_address=_get_client_ip())
        return success_response("Logged out successfully")

    def me(self) -> tuple[Response, HTTPStatus]:
        user = require_current_user()
        return success_response(
            "User retrieved successfully", {"user": UserDTO.from_domain(user).model_dump()}
        )

    def generate_api_key(self) -> tuple[Response, HTTPStatus]:
        user = require_current_user()
        result = self._generate_api_key_use_case.execute(user.id)
        if not result.ok:
            self._log.error(f"auth.api_key: could not store key for user_id={user.id}")
            raise ApiKeyGenerationError(result.message or "Failed to generate API key")

        self._audit.log(AuditAction.API_KEY_GENERATED, user_id=user.id, ip_address=_get_client_ip())
        return success_response("API key generated successfully", {"apiKey": result.unwrap()})

    def logout_all(self) -> tuple[Response, HTTPStatus]:
        user = require_current_user()
        revoked = self._logout_all_use_case.execute(user.id).unwrap()
        self._audit.log(
            AuditAction.LOGOUT_ALL,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"revoked_count": revoked},
        )
        return success_response("Logged out from all devices", {"revokedCount": revoked})

    def list_sessions(self) -> tuple[Response, HTTPStatus]:
        user = require_current_user()
        listing = self._list_sessions_use_case.execute(user.id).unwrap()
        return success_response(
            "Sessions retrieved successfully",
            {
                "sessions": [SessionDTO.from_domain(s).model_dump() for s in listing.sessions],
                "count": listing.count,
            },
        )

    def deactivate_user(self, user_id: int) -> tuple[Response, HTTPStatus]:
        return self._set_active(user_id, active=False)

    def activate_user(self, user_id: int) -> tuple[Response, HTTPStatus]:
        return self._set_active(user_id, active=True)

    def _set_active(self, user_id: int, *, active: bool) -> tuple[Response, HTTPStatus]:
        admin = require_current_user()
        result = self._set_user_active_use_case.execute(user_id, active)
        if not result.ok:
            raise UserNotFoundError(user_id)

        action = AuditAction.USER_ACTIVATED if active else AuditAction.USER_DEACTIVATED
        self._audit.log(
            action,
            user_id=admin.id,
            ip_address=_get_client_ip(),
            details={"target_user_id": user_id},
        )
        message = "User activated successfully" if active else "User deactivated successfully"
        return success_response(message, {"user": UserDTO.from_domain(result.unwrap()).model_dump()})

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/auth")
        bp.add_url_rule("/register", view_func=self._register_pipeline.wrap(self.register), methods=["POST"])
        bp.add_url_rule("/login", view_func=self._login_pipeline.wrap(self.login), methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self._protected_pipeline.wrap(self.me), methods=["GET"])
        bp.add_url_rule(
            "/api-key",
            view_func=self._protected_pipeline.wrap(self.generate_api_key),
            methods=["POST"],
        )
        bp.add_url_rule(
            "/logout-all",
            view_func=self._protected_pipeline.wrap(self.logout_all),
            methods=["POST"],
        )
        bp.add_url_rule(
            "/sessions",
            view_func=self._protected_pipeline.wrap(self.list_sessions),
            methods=["GET"],
        )
        bp.add_url_rule(
            "/users/<int:user_id>/deactivate",
            view_func=self._admin_pipeline.wrap(self.deactivate_user),
            methods=["POST"],
        )
        bp.add_url_rule(
            "/users/<int:user_id>/activate",
            view_func=self._admin_pipeline.wrap(self.activate_user),
            methods=["POST"],
        )
        return bp


__all__ = ["AuthController"]
