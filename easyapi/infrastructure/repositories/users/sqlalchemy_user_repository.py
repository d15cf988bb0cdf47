# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from easyapi.domain.users.entities import RefreshSession, Role
from easyapi.domain.users.entities import RefreshToken as DomainRefreshToken
from easyapi.domain.users.entities import User as DomainUser
from easyapi.domain.users.exceptions import UserAlreadyExistsError
from easyapi.domain.users.repositories import RefreshTokenRepository, UserRepository
from easyapi.infrastructure.db.models import RefreshToken, User
from easyapi.infrastructure.db.session import session_scope
from easyapi.shared.utils import as_utc


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _user_to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        role=Role(row.role),
        api_key=row.api_key,
        is_active=bool(row.is_active),
        created_at=as_utc(row.created_at) if row.created_at else None,
        updated_at=as_utc(row.updated_at) if row.updated_at else None,
    )


def _token_to_domain(row: RefreshToken) -> DomainRefreshToken:
    return DomainRefreshToken(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=as_utc(row.expires_at),
        revoked=bool(row.revoked),
        created_at=as_utc(row.created_at) if row.created_at else None,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def find_by_email(self, email: str) -> DomainUser | None:
        with session_scope(self._session_factory) as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _user_to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with session_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _user_to_domain(row) if row else None

    def find_by_api_key(self, api_key: str) -> DomainUser | None:
        with session_scope(self._session_factory) as session:
            row = session.scalars(
                select(User).where(User.api_key == api_key, User.is_active.is_(True))
            ).first()
            return _user_to_domain(row) if row else None

    def add(self, email: str, password_hash: str, role: Role) -> DomainUser:
        try:
            with session_scope(self._session_factory) as session:
                now = self._clock()
                row = User(
                    email=email,
                    password_hash=password_hash,
                    role=role,
                    created_at=now,
                    updated_at=now,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _user_to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc

    def set_api_key(self, user_id: int, api_key: str) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id)
                .values(api_key=api_key, updated_at=self._clock())
            )
            return result.rowcount > 0

    def touch_login(self, user_id: int) -> None:
        with session_scope(self._session_factory) as session:
            session.execute(
                update(User).where(User.id == user_id).values(updated_at=self._clock())
            )

    def set_active(self, user_id: int, active: bool) -> DomainUser | None:
        with session_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                return None
            row.is_active = active
            row.updated_at = self._clock()
            session.flush()
            return _user_to_domain(row)


class SqlAlchemyRefreshTokenRepository(RefreshTokenRepository):
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def add(self, user_id: int, token: str, expires_at: datetime) -> DomainRefreshToken:
        with session_scope(self._session_factory) as session:
            row = RefreshToken(
                user_id=user_id,
                token=token,
                expires_at=expires_at,
                created_at=self._clock(),
            )
            session.add(row)
            session.flush()
            return _token_to_domain(row)

    def find_usable(self, token: str) -> DomainRefreshToken | None:
        with session_scope(self._session_factory) as session:
            row = session.scalars(
                select(RefreshToken).where(
                    RefreshToken.token == token,
                    RefreshToken.revoked.is_(False),
                    RefreshToken.expires_at > self._clock(),
                )
            ).first()
            return _token_to_domain(row) if row else None

    def revoke(self, token: str) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                update(RefreshToken)
                .where(RefreshToken.token == token, RefreshToken.revoked.is_(False))
                .values(revoked=True)
            )
            return result.rowcount > 0

    def revoke_all_for_user(self, user_id: int) -> int:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                update(RefreshToken)
                .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
                .values(revoked=True)
            )
            return int(result.rowcount)

    def _active_filter(self, user_id: int):
        return (
            RefreshToken.user_id == user_id,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > self._clock(),
        )

    def list_active_for_user(self, user_id: int) -> list[RefreshSession]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                select(RefreshToken)
                .where(*self._active_filter(user_id))
                .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())
            ).all()
            return [
                RefreshSession(
                    id=row.id,
                    created_at=as_utc(row.created_at) if row.created_at else None,
                    expires_at=as_utc(row.expires_at),
                )
                for row in rows
            ]

    def count_active_for_user(self, user_id: int) -> int:
        with session_scope(self._session_factory) as session:
            return int(
                session.scalar(
                    select(func.count(RefreshToken.id)).where(*self._active_filter(user_id))
                )
                or 0
            )

    def delete_expired(self) -> int:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                delete(RefreshToken).where(RefreshToken.expires_at < self._clock())
            )
            return int(result.rowcount)
