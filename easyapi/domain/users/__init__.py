# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    AccessTokenClaims,
    CredentialKind,
    RefreshSession,
    RefreshToken,
    Role,
    SafeUser,
    User,
)
from .exceptions import (
    AccessTokenError,
    SigningSecretMissingError,
    TokenFailure,
    UserAlreadyExistsError,
)
from .repositories import PasswordHasher, RefreshTokenRepository, UserRepository

__all__ = [
    "AccessTokenClaims",
    "AccessTokenError",
    "CredentialKind",
    "PasswordHasher",
    "RefreshSession",
    "RefreshToken",
    "RefreshTokenRepository",
    "Role",
    "SafeUser",
    "SigningSecretMissingError",
    "TokenFailure",
    "User",
    "UserAlreadyExistsError",
    "UserRepository",
]
