# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Credential resolution and role guard stages for the request pipeline.

A request carrying ``Authorization`` is judged by that header alone: a
failed Bearer credential is never rescued by a valid ``X-API-Key``.
"""

from __future__ import annotations

from collections.abc import Iterable

from flask import g
from flask.typing import ResponseReturnValue

from easyapi.application.services.token_codec import JwtTokenCodec
from easyapi.application.use_cases.auth.api_keys import ValidateApiKeyUseCase
from easyapi.domain.users.entities import CredentialKind, Role, SafeUser
from easyapi.domain.users.exceptions import AccessTokenError
from easyapi.domain.users.repositories import UserRepository
from easyapi.shared.errors import ForbiddenError, UnauthorizedError
from easyapi.shared.logging import ContextualLogger, logger
from easyapi.shared.middleware.pipeline import Handler, PipelineRequest

USER_ATTRIBUTE = "user"
USER_ID_ATTRIBUTE = "user_id"
CREDENTIAL_KIND_ATTRIBUTE = "credential_kind"

_INVALID_CREDENTIALS_MESSAGE = "Invalid or expired credentials"


class AuthResolutionMiddleware:
    def __init__(
        self,
        *,
        codec: JwtTokenCodec,
        users: UserRepository,
        api_keys: ValidateApiKeyUseCase | None = None,
        optional: bool = False,
        log: ContextualLogger = logger,
    ) -> None:
        self._codec = codec
        self._users = users
        self._api_keys = api_keys or ValidateApiKeyUseCase(users=users)
        self._optional = optional
        self._log = log

    @property
    def optional(self) -> bool:
        return self._optional

    def handle(self, request: PipelineRequest, next_: Handler) -> ResponseReturnValue:
        authorization = request.header("Authorization")
        api_key = request.header("X-API-Key")

        if authorization is not None:
            user = self._resolve_bearer(request, authorization)
            kind = CredentialKind.BEARER
        elif api_key is not None:
            user = self._resolve_api_key(request, api_key)
            kind = CredentialKind.API_KEY
        else:
            if self._optional:
                return next_(request)
            self._log.warning(f"auth: no credentials on {request.method} {request.path}")
            raise UnauthorizedError("Missing authentication credentials")

        if user is None:
            raise UnauthorizedError(_INVALID_CREDENTIALS_MESSAGE)

        request.attributes[USER_ATTRIBUTE] = user
        request.attributes[USER_ID_ATTRIBUTE] = user.id
        request.attributes[CREDENTIAL_KIND_ATTRIBUTE] = kind
        self._log.debug(f"auth: resolved user_id={user.id} via {kind.value}")
        return next_(request)

    def _resolve_bearer(self, request: PipelineRequest, authorization: str) -> SafeUser | None:
        scheme, _, token = authorization.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            self._log.warning(f"auth: unsupported Authorization scheme on {request.path}")
            return None

        try:
            claims = self._codec.verify_access_token(token)
        except AccessTokenError as exc:
            self._log.warning(f"auth: bearer rejected ({exc.reason.value}) on {request.path}")
            return None

        user = self._users.find_by_id(claims.subject_id)
        if user is None or not user.is_active:
            self._log.warning(f"auth: bearer subject {claims.subject_id} missing or inactive")
            return None
        return user.to_safe()

    def _resolve_api_key(self, request: PipelineRequest, api_key: str) -> SafeUser | None:
        result = self._api_keys.execute(api_key)
        if not result.ok:
            self._log.warning(f"auth: api key rejected on {request.path} from {request.client_ip}")
            return None
        return result.unwrap()


class RoleGuardMiddleware:
    """Lets through only authenticated users holding one of ``roles``."""

    def __init__(self, roles: Iterable[Role], *, log: ContextualLogger = logger) -> None:
        self._roles = frozenset(roles)
        self._log = log

    def handle(self, request: PipelineRequest, next_: Handler) -> ResponseReturnValue:
        user: SafeUser | None = request.attributes.get(USER_ATTRIBUTE)
        if user is None:
            raise UnauthorizedError()
        if user.role not in self._roles:
            self._log.warning(
                f"auth: user_id={user.id} with role {user.role.value} denied {request.path}"
            )
            raise ForbiddenError()
        return next_(request)


def current_user() -> SafeUser | None:
    return getattr(g, USER_ATTRIBUTE, None)


def require_current_user() -> SafeUser:
    user = current_user()
    if user is None:
        raise UnauthorizedError()
    return user


__all__ = [
    "AuthResolutionMiddleware",
    "RoleGuardMiddleware",
    "current_user",
    "require_current_user",
]
