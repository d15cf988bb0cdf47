# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from easyapi.application.services.token_codec import JwtTokenCodec
from easyapi.domain.users.repositories import (
    PasswordHasher,
    RefreshTokenRepository,
    UserRepository,
)

from .policies import normalize_email
from .results import AuthFailure, AuthResult, LoginGrant

REFRESH_TOKEN_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: RefreshTokenRepository,
        password_hasher: PasswordHasher,
        codec: JwtTokenCodec,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._codec = codec
        self._refresh_ttl = refresh_ttl
        self._clock = clock
        self._decoy_hash: str | None = None

    def _burn_verification(self, password: str) -> None:
        # Unknown emails still pay for one hash check so response timing
        # does not reveal which addresses are registered.
        if self._decoy_hash is None:
            self._decoy_hash = self._password_hasher.hash("decoy-password-for-timing")
        self._password_hasher.verify(password, self._decoy_hash)

    def execute(self, email: str, password: str) -> AuthResult[LoginGrant]:
        lookup = normalize_email(email) or email.strip()
        user = self._users.find_by_email(lookup)
        if user is None:
            self._burn_verification(password)
            return AuthResult.fail(AuthFailure.INVALID_CREDENTIALS)

        password_valid = self._password_hasher.verify(password, user.password_hash)
        if not password_valid or not user.is_active:
            return AuthResult.fail(AuthFailure.INVALID_CREDENTIALS)

        access_token = self._codec.mint_access_token(user.id, user.email, user.role.value)
        refresh_token = self._codec.mint_refresh_token()
        self._tokens.add(user.id, refresh_token, self._clock() + self._refresh_ttl)
        self._users.touch_login(user.id)

        return AuthResult.success(
            LoginGrant(
                access_token=access_token,
                refresh_token=refresh_token,
                user=user.to_safe(),
                expires_in=self._codec.ttl_seconds,
            )
        )
