# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import RefreshSession, RefreshToken, Role, User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_api_key(self, api_key: str) -> User | None: ...
    def add(self, email: str, password_hash: str, role: Role) -> User: ...
    def set_api_key(self, user_id: int, api_key: str) -> bool: ...
    def touch_login(self, user_id: int) -> None: ...
    def set_active(self, user_id: int, active: bool) -> User | None: ...


class RefreshTokenRepository(Protocol):
    def add(self, user_id: int, token: str, expires_at: datetime) -> RefreshToken: ...
    def find_usable(self, token: str) -> RefreshToken | None: ...
    def revoke(self, token: str) -> bool: ...
    def revoke_all_for_user(self, user_id: int) -> int: ...
    def list_active_for_user(self, user_id: int) -> list[RefreshSession]: ...
    def count_active_for_user(self, user_id: int) -> int: ...
    def delete_expired(self) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
