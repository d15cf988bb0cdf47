from __future__ import annotations

import jwt
import pytest

from easyapi.application.services.token_codec import JwtTokenCodec
from easyapi.domain.users.exceptions import (
    AccessTokenError,
    SigningSecretMissingError,
    TokenFailure,
)

SECRET = "codec-test-secret-0123456789abcdef0123456789"
ISSUED_AT = 1_700_000_000


class MutableClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock(ISSUED_AT)


@pytest.fixture()
def codec(clock: MutableClock) -> JwtTokenCodec:
    return JwtTokenCodec(secret=SECRET, ttl_seconds=1800, clock=clock)


def test_round_trip_carries_identity_claims(codec: JwtTokenCodec) -> None:
    claims = codec.verify_access_token(codec.mint_access_token(7, "alice@example.com", "user"))

    assert claims.subject_id == 7
    assert claims.email == "alice@example.com"
    assert claims.role == "user"
    assert claims.issuer == "easy-api"
    assert claims.issued_at == ISSUED_AT
    assert claims.expires_at == ISSUED_AT + 1800


def test_token_valid_until_expiry_boundary(codec: JwtTokenCodec, clock: MutableClock) -> None:
    token = codec.mint_access_token(1, "a@example.com", "user")

    clock.now = ISSUED_AT + 1799
    assert codec.verify_access_token(token).subject_id == 1

    clock.now = ISSUED_AT + 1801
    with pytest.raises(AccessTokenError) as exc_info:
        codec.verify_access_token(token)
    assert exc_info.value.reason is TokenFailure.EXPIRED


def test_token_expires_exactly_at_exp(codec: JwtTokenCodec, clock: MutableClock) -> None:
    token = codec.mint_access_token(1, "a@example.com", "user")
    clock.now = ISSUED_AT + 1800

    with pytest.raises(AccessTokenError) as exc_info:
        codec.verify_access_token(token)
    assert exc_info.value.reason is TokenFailure.EXPIRED


def test_foreign_secret_is_bad_signature(clock: MutableClock) -> None:
    other = JwtTokenCodec(secret="another-secret-0123456789abcdef01234567", clock=clock)
    codec = JwtTokenCodec(secret=SECRET, clock=clock)
    token = other.mint_access_token(1, "a@example.com", "user")

    with pytest.raises(AccessTokenError) as exc_info:
        codec.verify_access_token(token)
    assert exc_info.value.reason is TokenFailure.BAD_SIGNATURE


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_garbage_is_malformed(codec: JwtTokenCodec, token: str) -> None:
    with pytest.raises(AccessTokenError) as exc_info:
        codec.verify_access_token(token)
    assert exc_info.value.reason is TokenFailure.MALFORMED


def test_token_from_other_issuer_is_rejected(clock: MutableClock) -> None:
    token = JwtTokenCodec(secret=SECRET, issuer="someone-else", clock=clock).mint_access_token(
        1, "a@example.com", "user"
    )

    with pytest.raises(AccessTokenError) as exc_info:
        JwtTokenCodec(secret=SECRET, clock=clock).verify_access_token(token)
    assert exc_info.value.reason is TokenFailure.MALFORMED


def test_token_missing_claims_is_malformed(codec: JwtTokenCodec) -> None:
    token = jwt.encode({"sub": "1", "iss": "easy-api"}, SECRET, algorithm="HS256")

    with pytest.raises(AccessTokenError) as exc_info:
        codec.verify_access_token(token)
    assert exc_info.value.reason is TokenFailure.MALFORMED


def test_access_token_error_maps_to_unauthorized(codec: JwtTokenCodec) -> None:
    with pytest.raises(AccessTokenError) as exc_info:
        codec.verify_access_token("not-a-jwt")

    assert exc_info.value.status == 401
    assert exc_info.value.code == "invalid_token"


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_secret_refuses_to_build(secret: str | None) -> None:
    with pytest.raises(SigningSecretMissingError):
        JwtTokenCodec(secret=secret)


def test_opaque_tokens_are_64_hex_and_unique() -> None:
    tokens = {JwtTokenCodec.mint_refresh_token() for _ in range(20)}
    keys = {JwtTokenCodec.mint_api_key() for _ in range(20)}

    assert len(tokens) == 20
    assert len(keys) == 20
    for value in tokens | keys:
        assert len(value) == 64
        int(value, 16)
