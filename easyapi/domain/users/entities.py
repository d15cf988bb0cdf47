# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: str) -> Role | None:
        try:
            return cls(value)
        except ValueError:
            return None


class CredentialKind(str, Enum):
    BEARER = "bearer"
    API_KEY = "api_key"


@dataclass(slots=True, frozen=True)
class SafeUser:
    """User projection that is allowed to leave the credential store."""

    id: int
    email: str
    role: Role
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(slots=True, frozen=True)
class User:

    id: int
    email: str
    password_hash: str = field(repr=False)
    role: Role = Role.USER
    api_key: str | None = field(default=None, repr=False)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_safe(self) -> SafeUser:
        return SafeUser(
            id=self.id,
            email=self.email,
            role=self.role,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(slots=True, frozen=True)
class RefreshToken:

    id: int
    user_id: int
    token: str = field(repr=False)
    expires_at: datetime
    revoked: bool = False
    created_at: datetime | None = None

    def is_usable(self, now: datetime) -> bool:
        return not self.revoked and self.expires_at > now


@dataclass(slots=True, frozen=True)
class RefreshSession:
    """Active refresh token as shown to its owner, without the secret."""

    id: int
    created_at: datetime | None
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class AccessTokenClaims:

    subject_id: int
    email: str
    role: str
    issuer: str
    issued_at: int
    expires_at: int
