# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from easyapi.application.services.token_codec import JwtTokenCodec
from easyapi.domain.users.entities import SafeUser
from easyapi.domain.users.repositories import UserRepository

from .results import AuthFailure, AuthResult


class GenerateApiKeyUseCase:
    """Issue a fresh API key, replacing (and so invalidating) any previous one.

    The plaintext key is returned exactly once; nothing else exposes it.
    """

    def __init__(self, *, users: UserRepository, codec: JwtTokenCodec) -> None:
        self._users = users
        self._codec = codec

    def execute(self, user_id: int) -> AuthResult[str]:
        api_key = self._codec.mint_api_key()
        if not self._users.set_api_key(user_id, api_key):
            return AuthResult.fail(AuthFailure.API_KEY_FAILED)
        return AuthResult.success(api_key)


class ValidateApiKeyUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, api_key: str) -> AuthResult[SafeUser]:
        user = self._users.find_by_api_key(api_key) if api_key else None
        if user is None or not user.is_active:
            return AuthResult.fail(AuthFailure.INVALID_API_KEY)
        return AuthResult.success(user.to_safe())
