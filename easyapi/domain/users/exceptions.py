# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum
from http import HTTPStatus

from easyapi.shared.errors.base import DomainError


class TokenFailure(str, Enum):
    EXPIRED = "expired"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"


class AccessTokenError(DomainError):
    default_code = "invalid_token"
    default_status = HTTPStatus.UNAUTHORIZED

    def __init__(self, reason: TokenFailure) -> None:
        super().__init__(message="Invalid or expired token")
        self.reason = reason


class SigningSecretMissingError(RuntimeError):
    """No signing secret configured; the process must not serve requests."""

    def __init__(self) -> None:
        super().__init__("JWT_SECRET is not set; refusing to issue or verify access tokens")


class UserAlreadyExistsError(DomainError):
    default_code = "user_already_exists"

    def __init__(self) -> None:
        super().__init__(message="User with this email already exists")
