# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from easyapi.application.services import JwtTokenCodec, WerkzeugPasswordHasher
from easyapi.application.use_cases.auth import (
    GenerateApiKeyUseCase,
    ListSessionsUseCase,
    LoginUserUseCase,
    LogoutAllDevicesUseCase,
    LogoutUserUseCase,
    PurgeExpiredTokensUseCase,
    RefreshAccessTokenUseCase,
    RegisterUserUseCase,
    SetUserActiveUseCase,
    ValidateApiKeyUseCase,
)
from easyapi.domain.users.entities import Role
from easyapi.infrastructure.audit import AuditLogger
from easyapi.infrastructure.db import build_engine, build_session_factory
from easyapi.infrastructure.repositories.users import (
    SqlAlchemyRefreshTokenRepository,
    SqlAlchemyUserRepository,
)
from easyapi.interfaces.http.controllers.auth_controller import AuthController
from easyapi.interfaces.http.controllers.health_controller import HealthController
from easyapi.interfaces.http.middleware.auth import (
    AuthResolutionMiddleware,
    RoleGuardMiddleware,
)
from easyapi.shared.config import AppConfig
from easyapi.shared.logging import ContextualLogger, logger
from easyapi.shared.middleware import InMemoryRateLimiter, Pipeline, RateLimitMiddleware


class Container:
    def __init__(self, config: AppConfig, *, log: ContextualLogger = logger) -> None:
        self.config = config
        self.log = log

    # Persistence

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def refresh_token_repository(self) -> SqlAlchemyRefreshTokenRepository:
        return SqlAlchemyRefreshTokenRepository(self.session_factory)

    # Services

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        auth = self.config.auth
        return JwtTokenCodec(
            secret=auth.jwt_secret,
            issuer=auth.jwt_issuer,
            ttl_seconds=auth.access_token_ttl,
        )

    @cached_property
    def audit(self) -> AuditLogger:
        return AuditLogger(self.log)

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            min_password_length=self.config.auth.password_min_length,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.refresh_token_repository,
            password_hasher=self.password_hasher,
            codec=self.token_codec,
            refresh_ttl=timedelta(days=self.config.auth.refresh_token_ttl_days),
        )

    @cached_property
    def refresh_access_token_use_case(self) -> RefreshAccessTokenUseCase:
        return RefreshAccessTokenUseCase(
            users=self.user_repository,
            tokens=self.refresh_token_repository,
            codec=self.token_codec,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(tokens=self.refresh_token_repository)

    @cached_property
    def logout_all_devices_use_case(self) -> LogoutAllDevicesUseCase:
        return LogoutAllDevicesUseCase(tokens=self.refresh_token_repository)

    @cached_property
    def generate_api_key_use_case(self) -> GenerateApiKeyUseCase:
        return GenerateApiKeyUseCase(users=self.user_repository, codec=self.token_codec)

    @cached_property
    def validate_api_key_use_case(self) -> ValidateApiKeyUseCase:
        return ValidateApiKeyUseCase(users=self.user_repository)

    @cached_property
    def list_sessions_use_case(self) -> ListSessionsUseCase:
        return ListSessionsUseCase(tokens=self.refresh_token_repository)

    @cached_property
    def purge_expired_tokens_use_case(self) -> PurgeExpiredTokensUseCase:
        return PurgeExpiredTokensUseCase(tokens=self.refresh_token_repository)

    @cached_property
    def set_user_active_use_case(self) -> SetUserActiveUseCase:
        return SetUserActiveUseCase(users=self.user_repository)

    # Pipelines

    def _rate_limited(self, limit: int) -> Pipeline:
        security = self.config.security
        limiter = InMemoryRateLimiter(limit, security.rate_limit_window)
        return Pipeline([RateLimitMiddleware(limiter, enabled=security.enable_rate_limit)])

    @cached_property
    def register_pipeline(self) -> Pipeline:
        return self._rate_limited(self.config.security.register_rate_limit)

    @cached_property
    def login_pipeline(self) -> Pipeline:
        return self._rate_limited(self.config.security.login_rate_limit)

    @cached_property
    def auth_middleware(self) -> AuthResolutionMiddleware:
        return AuthResolutionMiddleware(
            codec=self.token_codec,
            users=self.user_repository,
            api_keys=self.validate_api_key_use_case,
            log=self.log,
        )

    @cached_property
    def protected_pipeline(self) -> Pipeline:
        return Pipeline([self.auth_middleware])

    @cached_property
    def admin_pipeline(self) -> Pipeline:
        return self.protected_pipeline.pipe(RoleGuardMiddleware([Role.ADMIN], log=self.log))

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            refresh_use_case=self.refresh_access_token_use_case,
            logout_use_case=self.logout_user_use_case,
            logout_all_use_case=self.logout_all_devices_use_case,
            generate_api_key_use_case=self.generate_api_key_use_case,
            list_sessions_use_case=self.list_sessions_use_case,
            set_user_active_use_case=self.set_user_active_use_case,
            register_pipeline=self.register_pipeline,
            login_pipeline=self.login_pipeline,
            protected_pipeline=self.protected_pipeline,
            admin_pipeline=self.admin_pipeline,
            audit=self.audit,
            log=self.log,
        )

    @cached_property
    def health_controller(self) -> HealthController:
        return HealthController(engine=self.engine)


__all__ = ["Container"]
