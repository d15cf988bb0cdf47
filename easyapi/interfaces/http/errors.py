# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HTTP-facing errors for auth failures reported by the use cases."""

from __future__ import annotations

from http import HTTPStatus

from easyapi.shared.errors.base import DomainError, InfrastructureError


class RegistrationFailedError(DomainError):
    default_code = "registration_failed"
    default_status = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message=message)


class InvalidCredentialsError(DomainError):
    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message=message)


class InvalidRefreshTokenError(DomainError):
    default_code = "invalid_token"
    default_status = HTTPStatus.UNAUTHORIZED

    def __init__(self, message: str = "Invalid refresh token") -> None:
        super().__init__(message=message)


class LogoutFailedError(DomainError):
    default_code = "logout_failed"
    default_status = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str = "Invalid or already revoked token") -> None:
        super().__init__(message=message)


class UserNotFoundError(DomainError):
    default_code = "user_not_found"
    default_status = HTTPStatus.NOT_FOUND

    def __init__(self, user_id: int) -> None:
        super().__init__(context={"user_id": user_id}, message="User not found")


class ApiKeyGenerationError(InfrastructureError):
    def __init__(self, message: str = "Failed to generate API key") -> None:
        super().__init__("api_key_failed", message=message)


__all__ = [
    "ApiKeyGenerationError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "LogoutFailedError",
    "RegistrationFailedError",
    "UserNotFoundError",
]
