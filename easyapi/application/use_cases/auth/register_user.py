# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from easyapi.domain.users.entities import Role, SafeUser
from easyapi.domain.users.exceptions import UserAlreadyExistsError
from easyapi.domain.users.repositories import PasswordHasher, UserRepository

from .policies import MIN_PASSWORD_LENGTH, normalize_email, password_is_acceptable
from .results import FAILURE_MESSAGES, AuthFailure, AuthResult


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        min_password_length: int = MIN_PASSWORD_LENGTH,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._min_password_length = min_password_length

    def execute(self, email: str, password: str, role: str = Role.USER.value) -> AuthResult[SafeUser]:
        normalized = normalize_email(email)
        if normalized is None:
            return AuthResult.fail(AuthFailure.INVALID_EMAIL)

        if self._users.find_by_email(normalized) is not None:
            return AuthResult.fail(AuthFailure.EMAIL_TAKEN)

        if not password_is_acceptable(password, self._min_password_length):
            message = FAILURE_MESSAGES[AuthFailure.WEAK_PASSWORD].format(
                min_length=self._min_password_length
            )
            return AuthResult.fail(AuthFailure.WEAK_PASSWORD, message)

        parsed_role = Role.parse(role)
        if parsed_role is None:
            return AuthResult.fail(AuthFailure.INVALID_ROLE)

        hashed = self._password_hasher.hash(password)
        try:
            user = self._users.add(normalized, hashed, parsed_role)
        except UserAlreadyExistsError:
            # Lost a race against a concurrent registration.
            return AuthResult.fail(AuthFailure.EMAIL_TAKEN)
        return AuthResult.success(user.to_safe())
