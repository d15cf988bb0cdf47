# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Access-token signing and opaque credential generation."""

from __future__ import annotations

import secrets
import time
from collections.abc import Callable
from typing import Any

import jwt

from easyapi.domain.users.entities import AccessTokenClaims
from easyapi.domain.users.exceptions import (
    AccessTokenError,
    SigningSecretMissingError,
    TokenFailure,
)

ALGORITHM = "HS256"
DEFAULT_ACCESS_TOKEN_TTL = 1800
OPAQUE_TOKEN_BYTES = 32

_REQUIRED_CLAIMS = ("iss", "aud", "iat", "exp", "sub", "email", "role")


class JwtTokenCodec:
    """Mints and verifies HS256 access tokens.

    Expiry is checked against the injected clock rather than PyJWT's own
    wall-clock check so that verification stays a pure function of the
    token, the secret and ``clock``. A token is valid while
    ``clock() < exp``.
    """

    def __init__(
        self,
        *,
        secret: str | None,
        issuer: str = "easy-api",
        ttl_seconds: int = DEFAULT_ACCESS_TOKEN_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise SigningSecretMissingError()
        self._secret = secret
        self._issuer = issuer
        self._ttl = int(ttl_seconds)
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def mint_access_token(self, subject_id: int, email: str, role: str) -> str:
        issued_at = int(self._clock())
        payload = {
            "iss": self._issuer,
            "aud": self._issuer,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
            # PyJWT insists on a string subject.
            "sub": str(subject_id),
            "email": email,
            "role": role,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                audience=self._issuer,
                issuer=self._issuer,
                options={
                    "require": list(_REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise AccessTokenError(TokenFailure.BAD_SIGNATURE) from exc
        except jwt.PyJWTError as exc:
            raise AccessTokenError(TokenFailure.MALFORMED) from exc

        try:
            subject_id = int(payload["sub"])
            issued_at = int(payload["iat"])
            expires_at = int(payload["exp"])
        except (TypeError, ValueError) as exc:
            raise AccessTokenError(TokenFailure.MALFORMED) from exc

        if self._clock() >= expires_at:
            raise AccessTokenError(TokenFailure.EXPIRED)

        return AccessTokenClaims(
            subject_id=subject_id,
            email=str(payload["email"]),
            role=str(payload["role"]),
            issuer=str(payload["iss"]),
            issued_at=issued_at,
            expires_at=expires_at,
        )

    @staticmethod
    def mint_refresh_token() -> str:
        return secrets.token_hex(OPAQUE_TOKEN_BYTES)

    @staticmethod
    def mint_api_key() -> str:
        return secrets.token_hex(OPAQUE_TOKEN_BYTES)


__all__ = ["ALGORITHM", "DEFAULT_ACCESS_TOKEN_TTL", "JwtTokenCodec"]
