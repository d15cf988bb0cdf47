# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Structured outcomes returned by the auth use cases.

Expected failures (bad password, duplicate email, unusable token) are
values, not exceptions: the HTTP layer decides how to surface them and the
use cases stay free of transport and logging concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from easyapi.domain.users.entities import RefreshSession, SafeUser

T = TypeVar("T")


class AuthFailure(str, Enum):
    INVALID_EMAIL = "invalid_email"
    WEAK_PASSWORD = "weak_password"
    INVALID_ROLE = "invalid_role"
    EMAIL_TAKEN = "email_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    USER_NOT_FOUND = "user_not_found"
    INVALID_API_KEY = "invalid_api_key"
    API_KEY_FAILED = "api_key_failed"


FAILURE_MESSAGES: dict[AuthFailure, str] = {
    AuthFailure.INVALID_EMAIL: "Invalid email format",
    AuthFailure.WEAK_PASSWORD: "Password must be at least {min_length} characters",
    AuthFailure.INVALID_ROLE: "Role must be one of: admin, user",
    AuthFailure.EMAIL_TAKEN: "User with this email already exists",
    AuthFailure.INVALID_CREDENTIALS: "Invalid email or password",
    AuthFailure.INVALID_TOKEN: "Invalid refresh token",
    AuthFailure.USER_NOT_FOUND: "User not found",
    AuthFailure.INVALID_API_KEY: "Invalid API key",
    AuthFailure.API_KEY_FAILED: "Failed to generate API key",
}


@dataclass(slots=True, frozen=True)
class AuthResult(Generic[T]):
    value: T | None = None
    failure: AuthFailure | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> AuthResult[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, failure: AuthFailure, message: str | None = None) -> AuthResult[T]:
        return cls(failure=failure, message=message or FAILURE_MESSAGES[failure])

    def unwrap(self) -> T:
        if self.failure is not None or self.value is None:
            raise ValueError(f"unwrap() on failed auth result: {self.failure}")
        return self.value


@dataclass(slots=True, frozen=True)
class LoginGrant:

    access_token: str
    refresh_token: str
    user: SafeUser
    expires_in: int


@dataclass(slots=True, frozen=True)
class RefreshGrant:

    access_token: str
    expires_in: int
    user_id: int


@dataclass(slots=True, frozen=True)
class SessionListing:

    sessions: list[RefreshSession]
    count: int


__all__ = [
    "AuthFailure",
    "AuthResult",
    "FAILURE_MESSAGES",
    "LoginGrant",
    "RefreshGrant",
    "SessionListing",
]
