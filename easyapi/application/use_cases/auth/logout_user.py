"""Use-cases for revoking refresh tokens."""

from __future__ import annotations

from easyapi.domain.users.repositories import RefreshTokenRepository

from .results import AuthFailure, AuthResult


class LogoutUserUseCase:
    def __init__(self, *, tokens: RefreshTokenRepository) -> None:
        self._tokens = tokens

    def execute(self, refresh_token: str) -> AuthResult[bool]:
        if refresh_token and self._tokens.revoke(refresh_token):
            return AuthResult.success(True)
        return AuthResult.fail(AuthFailure.INVALID_TOKEN, "Invalid or already revoked token")


class LogoutAllDevicesUseCase:
    def __init__(self, *, tokens: RefreshTokenRepository) -> None:
        self._tokens = tokens

    def execute(self, user_id: int) -> AuthResult[int]:
        return AuthResult.success(self._tokens.revoke_all_for_user(user_id))
