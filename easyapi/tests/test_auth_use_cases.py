from __future__ import annotations

from dataclasses import dataclass

import pytest

from easyapi.application.services.token_codec import JwtTokenCodec
from easyapi.application.use_cases.auth import (
    AuthFailure,
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

from .fakes import (
    DeterministicHasher,
    FixedClock,
    InMemoryRefreshTokenRepository,
    InMemoryUserRepository,
)

SECRET = "use-case-test-secret-0123456789abcdef012345"


@dataclass
class AuthKit:
    clock: FixedClock
    users: InMemoryUserRepository
    tokens: InMemoryRefreshTokenRepository
    hasher: DeterministicHasher
    codec: JwtTokenCodec
    register: RegisterUserUseCase
    login: LoginUserUseCase
    refresh: RefreshAccessTokenUseCase
    logout: LogoutUserUseCase


@pytest.fixture()
def kit() -> AuthKit:
    clock = FixedClock()
    users = InMemoryUserRepository(clock)
    tokens = InMemoryRefreshTokenRepository(clock)
    hasher = DeterministicHasher()
    codec = JwtTokenCodec(secret=SECRET, clock=clock.timestamp)
    return AuthKit(
        clock=clock,
        users=users,
        tokens=tokens,
        hasher=hasher,
        codec=codec,
        register=RegisterUserUseCase(users=users, password_hasher=hasher),
        login=LoginUserUseCase(
            users=users, tokens=tokens, password_hasher=hasher, codec=codec, clock=clock
        ),
        refresh=RefreshAccessTokenUseCase(users=users, tokens=tokens, codec=codec, clock=clock),
        logout=LogoutUserUseCase(tokens=tokens),
    )


def test_register_then_login_succeeds(kit: AuthKit) -> None:
    registered = kit.register.execute("alice@example.com", "password123")
    assert registered.ok
    user = registered.unwrap()
    assert user.email == "alice@example.com"
    assert user.role is Role.USER
    assert not hasattr(user, "password_hash")

    result = kit.login.execute("alice@example.com", "password123")

    assert result.ok
    grant = result.unwrap()
    assert grant.user.id == user.id
    assert grant.expires_in == 1800
    assert len(grant.refresh_token) == 64
    assert kit.codec.verify_access_token(grant.access_token).subject_id == user.id
    assert kit.users.logins == [user.id]


def test_register_stores_hash_not_password(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")

    stored = kit.users.find_by_email("alice@example.com")
    assert stored is not None
    assert stored.password_hash == "hashed:password123"


def test_register_with_admin_role(kit: AuthKit) -> None:
    result = kit.register.execute("root@example.com", "password123", "admin")

    assert result.unwrap().role is Role.ADMIN


@pytest.mark.parametrize(
    ("email", "password", "role", "failure"),
    [
        ("not-an-email", "password123", "user", AuthFailure.INVALID_EMAIL),
        ("bob@example.com", "short", "user", AuthFailure.WEAK_PASSWORD),
        ("bob@example.com", "password123", "superuser", AuthFailure.INVALID_ROLE),
    ],
)
def test_register_rejects_invalid_input(
    kit: AuthKit, email: str, password: str, role: str, failure: AuthFailure
) -> None:
    result = kit.register.execute(email, password, role)

    assert not result.ok
    assert result.failure is failure
    assert kit.users.find_by_email("bob@example.com") is None


def test_weak_password_message_names_minimum(kit: AuthKit) -> None:
    result = kit.register.execute("bob@example.com", "1234567")

    assert result.message == "Password must be at least 8 characters"


def test_register_duplicate_email(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")

    result = kit.register.execute("alice@example.com", "different-password")

    assert result.failure is AuthFailure.EMAIL_TAKEN
    assert result.message == "User with this email already exists"


def test_login_failures_are_indistinguishable(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")

    wrong_password = kit.login.execute("alice@example.com", "wrong-password")
    unknown_email = kit.login.execute("nobody@example.com", "password123")

    assert wrong_password.failure is AuthFailure.INVALID_CREDENTIALS
    assert unknown_email.failure is AuthFailure.INVALID_CREDENTIALS
    assert wrong_password.message == unknown_email.message == "Invalid email or password"


def test_login_unknown_email_still_verifies_a_hash(kit: AuthKit) -> None:
    kit.login.execute("nobody@example.com", "password123")

    assert kit.hasher.verify_calls == 1


def test_login_inactive_user_fails_like_bad_password(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    kit.users.set_active(user.id, False)

    result = kit.login.execute("alice@example.com", "password123")

    assert result.failure is AuthFailure.INVALID_CREDENTIALS
    assert result.message == "Invalid email or password"


def test_refresh_issues_access_token_without_rotation(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")
    grant = kit.login.execute("alice@example.com", "password123").unwrap()

    first = kit.refresh.execute(grant.refresh_token)
    second = kit.refresh.execute(grant.refresh_token)

    assert first.ok and second.ok
    claims = kit.codec.verify_access_token(first.unwrap().access_token)
    assert claims.subject_id == grant.user.id
    assert claims.email == "alice@example.com"
    assert claims.role == "user"


def test_refresh_with_never_issued_token(kit: AuthKit) -> None:
    result = kit.refresh.execute("ab" * 32)

    assert result.failure is AuthFailure.INVALID_TOKEN


def test_refresh_with_expired_token(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")
    grant = kit.login.execute("alice@example.com", "password123").unwrap()

    kit.clock.advance(days=7, seconds=1)

    assert kit.refresh.execute(grant.refresh_token).failure is AuthFailure.INVALID_TOKEN


def test_logout_then_refresh_fails(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")
    grant = kit.login.execute("alice@example.com", "password123").unwrap()

    assert kit.logout.execute(grant.refresh_token).ok

    assert kit.refresh.execute(grant.refresh_token).failure is AuthFailure.INVALID_TOKEN


def test_double_logout_fails_second_time(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")
    grant = kit.login.execute("alice@example.com", "password123").unwrap()

    assert kit.logout.execute(grant.refresh_token).ok
    second = kit.logout.execute(grant.refresh_token)

    assert second.failure is AuthFailure.INVALID_TOKEN
    assert second.message == "Invalid or already revoked token"


def test_logout_only_revokes_the_given_token(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")
    laptop = kit.login.execute("alice@example.com", "password123").unwrap()
    phone = kit.login.execute("alice@example.com", "password123").unwrap()

    kit.logout.execute(laptop.refresh_token)

    assert kit.refresh.execute(phone.refresh_token).ok


def test_refresh_for_deactivated_user(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    grant = kit.login.execute("alice@example.com", "password123").unwrap()
    kit.users.set_active(user.id, False)

    assert kit.refresh.execute(grant.refresh_token).failure is AuthFailure.USER_NOT_FOUND


def test_logout_all_revokes_every_session(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    grants = [kit.login.execute("alice@example.com", "password123").unwrap() for _ in range(3)]
    kit.logout.execute(grants[0].refresh_token)

    result = LogoutAllDevicesUseCase(tokens=kit.tokens).execute(user.id)

    assert result.unwrap() == 2
    for grant in grants:
        assert kit.refresh.execute(grant.refresh_token).failure is AuthFailure.INVALID_TOKEN


def test_list_sessions_hides_token_values(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    first = kit.login.execute("alice@example.com", "password123").unwrap()
    kit.login.execute("alice@example.com", "password123")
    kit.logout.execute(first.refresh_token)

    listing = ListSessionsUseCase(tokens=kit.tokens).execute(user.id).unwrap()

    assert listing.count == 1
    assert len(listing.sessions) == 1
    assert not hasattr(listing.sessions[0], "token")


def test_generate_api_key_replaces_previous_key(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    generate = GenerateApiKeyUseCase(users=kit.users, codec=kit.codec)
    validate = ValidateApiKeyUseCase(users=kit.users)

    old_key = generate.execute(user.id).unwrap()
    new_key = generate.execute(user.id).unwrap()

    assert old_key != new_key
    assert len(new_key) == 64
    assert validate.execute(new_key).unwrap().id == user.id
    assert validate.execute(old_key).failure is AuthFailure.INVALID_API_KEY


def test_generate_api_key_for_missing_user(kit: AuthKit) -> None:
    result = GenerateApiKeyUseCase(users=kit.users, codec=kit.codec).execute(999)

    assert result.failure is AuthFailure.API_KEY_FAILED


def test_validate_api_key_rejects_inactive_owner(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    key = GenerateApiKeyUseCase(users=kit.users, codec=kit.codec).execute(user.id).unwrap()
    kit.users.set_active(user.id, False)

    result = ValidateApiKeyUseCase(users=kit.users).execute(key)

    assert result.failure is AuthFailure.INVALID_API_KEY


def test_set_user_active_toggles_and_reports_missing(kit: AuthKit) -> None:
    user = kit.register.execute("alice@example.com", "password123").unwrap()
    use_case = SetUserActiveUseCase(users=kit.users)

    assert use_case.execute(user.id, False).unwrap().is_active is False
    assert use_case.execute(user.id, True).unwrap().is_active is True
    assert use_case.execute(404, True).failure is AuthFailure.USER_NOT_FOUND


def test_purge_removes_only_expired_tokens(kit: AuthKit) -> None:
    kit.register.execute("alice@example.com", "password123")
    old = kit.login.execute("alice@example.com", "password123").unwrap()
    kit.clock.advance(days=8)
    fresh = kit.login.execute("alice@example.com", "password123").unwrap()

    deleted = PurgeExpiredTokensUseCase(tokens=kit.tokens).execute()

    assert deleted == 1
    assert kit.tokens.get(old.refresh_token) is None
    assert kit.tokens.get(fresh.refresh_token) is not None
