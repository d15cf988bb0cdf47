# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from easyapi.application.services.token_codec import JwtTokenCodec
from easyapi.domain.users.repositories import RefreshTokenRepository, UserRepository

from .results import AuthFailure, AuthResult, RefreshGrant


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshAccessTokenUseCase:
    """Exchange a usable refresh token for a new access token.

    The refresh token itself is left untouched (no rotation); it stays
    valid until it expires or is revoked by logout.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: RefreshTokenRepository,
        codec: JwtTokenCodec,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._codec = codec
        self._clock = clock

    def execute(self, refresh_token: str) -> AuthResult[RefreshGrant]:
        if not refresh_token:
            return AuthResult.fail(AuthFailure.INVALID_TOKEN)

        row = self._tokens.find_usable(refresh_token)
        if row is None or not row.is_usable(self._clock()):
            return AuthResult.fail(AuthFailure.INVALID_TOKEN)

        user = self._users.find_by_id(row.user_id)
        if user is None or not user.is_active:
            return AuthResult.fail(AuthFailure.USER_NOT_FOUND)

        access_token = self._codec.mint_access_token(user.id, user.email, user.role.value)
        return AuthResult.success(
            RefreshGrant(
                access_token=access_token,
                expires_in=self._codec.ttl_seconds,
                user_id=user.id,
            )
        )
