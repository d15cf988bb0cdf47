from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from easyapi.domain.users.entities import Role
from easyapi.infrastructure.container import Container
from easyapi.infrastructure.db import init_db
from easyapi.scripts import purge_expired_tokens
from easyapi.shared.config import AppConfig, AuthConfig, DatabaseConfig, SecurityConfig


def test_defaults() -> None:
    config = AuthConfig(JWT_SECRET="x" * 40)  # type: ignore[call-arg]

    assert config.access_token_ttl == 1800
    assert config.jwt_issuer == "easy-api"
    assert config.refresh_token_ttl_days == 7


def test_origins_parsed_from_comma_list() -> None:
    config = SecurityConfig(ALLOWED_ORIGINS="https://a.example.com, https://b.example.com")  # type: ignore[call-arg]

    assert config.allowed_origins == ["https://a.example.com", "https://b.example.com"]


def test_production_rejects_weak_secret() -> None:
    with pytest.raises(SystemExit):
        AppConfig(  # type: ignore[call-arg]
            APP_ENV="production",
            auth=AuthConfig(JWT_SECRET="changeme"),  # type: ignore[call-arg]
        )


def test_production_accepts_strong_secret() -> None:
    config = AppConfig(  # type: ignore[call-arg]
        APP_ENV="production",
        auth=AuthConfig(JWT_SECRET="s" * 64),  # type: ignore[call-arg]
        security=SecurityConfig(ALLOWED_ORIGINS="https://app.example.com", ENABLE_HSTS=True),  # type: ignore[call-arg]
    )

    assert config.is_production()


def test_purge_script_deletes_expired_tokens(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    url = f"sqlite:///{tmp_path / 'purge.db'}"
    container = Container(
        AppConfig(database=DatabaseConfig(DATABASE_URL=url))  # type: ignore[call-arg]
    )
    init_db(container.engine)
    user = container.user_repository.add("alice@example.com", "hash", Role.USER)
    now = datetime.now(UTC)
    container.refresh_token_repository.add(user.id, "expired", now - timedelta(days=1))
    container.refresh_token_repository.add(user.id, "live", now + timedelta(days=1))
    container.engine.dispose()

    exit_code = purge_expired_tokens.main(["--database-url", url])

    assert exit_code == 0
    assert "Deleted 1 expired refresh token(s)" in capsys.readouterr().out
    assert container.refresh_token_repository.find_usable("live") is not None


def test_purge_exit_code_does_not_depend_on_count(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'many.db'}"
    container = Container(
        AppConfig(database=DatabaseConfig(DATABASE_URL=url))  # type: ignore[call-arg]
    )
    init_db(container.engine)
    user = container.user_repository.add("alice@example.com", "hash", Role.USER)
    past = datetime.now(UTC) - timedelta(days=1)
    for index in range(3):
        container.refresh_token_repository.add(user.id, f"expired-{index}", past)
    container.engine.dispose()

    assert purge_expired_tokens.purge(url) == 3
    assert purge_expired_tokens.main(["--database-url", url]) == 0
