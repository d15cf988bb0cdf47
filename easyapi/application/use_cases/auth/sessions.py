# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from easyapi.domain.users.entities import SafeUser
from easyapi.domain.users.repositories import RefreshTokenRepository, UserRepository

from .results import AuthFailure, AuthResult, SessionListing


class ListSessionsUseCase:
    def __init__(self, *, tokens: RefreshTokenRepository) -> None:
        self._tokens = tokens

    def execute(self, user_id: int) -> AuthResult[SessionListing]:
        sessions = self._tokens.list_active_for_user(user_id)
        count = self._tokens.count_active_for_user(user_id)
        return AuthResult.success(SessionListing(sessions=sessions, count=count))


class PurgeExpiredTokensUseCase:
    """Maintenance sweep; never part of the request path."""

    def __init__(self, *, tokens: RefreshTokenRepository) -> None:
        self._tokens = tokens

    def execute(self) -> int:
        return self._tokens.delete_expired()


class SetUserActiveUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int, active: bool) -> AuthResult[SafeUser]:
        user = self._users.set_active(user_id, active)
        if user is None:
            return AuthResult.fail(AuthFailure.USER_NOT_FOUND)
        return AuthResult.success(user.to_safe())
