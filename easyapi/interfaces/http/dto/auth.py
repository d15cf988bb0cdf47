# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from easyapi.domain.users.entities import RefreshSession, SafeUser
from easyapi.shared.utils import format_timestamp


class RegisterRequestDTO(BaseModel):
    # Business rules (email syntax, password length, role) live in the use case.
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1)
    role: str = "user"


class LoginRequestDTO(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1)


class RefreshRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(min_length=1, alias="refreshToken")


class UserDTO(BaseModel):
    id: int
    email: str
    role: str
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, user: SafeUser) -> UserDTO:
        return cls(
            id=user.id,
            email=user.email,
            role=user.role.value,
            is_active=user.is_active,
            created_at=format_timestamp(user.created_at),
            updated_at=format_timestamp(user.updated_at),
        )


class SessionDTO(BaseModel):
    id: int
    created_at: str | None = None
    expires_at: str | None = None

    @classmethod
    def from_domain(cls, session: RefreshSession) -> SessionDTO:
        return cls(
            id=session.id,
            created_at=format_timestamp(session.created_at),
            expires_at=format_timestamp(session.expires_at),
        )


__all__ = [
    "LoginRequestDTO",
    "RefreshRequestDTO",
    "RegisterRequestDTO",
    "SessionDTO",
    "UserDTO",
]
