# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .api_keys import GenerateApiKeyUseCase, ValidateApiKeyUseCase
from .login_user import LoginUserUseCase
from .logout_user import LogoutAllDevicesUseCase, LogoutUserUseCase
from .refresh_token import RefreshAccessTokenUseCase
from .register_user import RegisterUserUseCase
from .results import AuthFailure, AuthResult, LoginGrant, RefreshGrant, SessionListing
from .sessions import ListSessionsUseCase, PurgeExpiredTokensUseCase, SetUserActiveUseCase

__all__ = [
    "AuthFailure",
    "AuthResult",
    "GenerateApiKeyUseCase",
    "ListSessionsUseCase",
    "LoginGrant",
    "LoginUserUseCase",
    "LogoutAllDevicesUseCase",
    "LogoutUserUseCase",
    "PurgeExpiredTokensUseCase",
    "RefreshAccessTokenUseCase",
    "RefreshGrant",
    "RegisterUserUseCase",
    "SessionListing",
    "SetUserActiveUseCase",
    "ValidateApiKeyUseCase",
]
