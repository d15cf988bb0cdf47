# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Delete refresh tokens whose expiry has passed."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from easyapi.infrastructure.container import Container
from easyapi.infrastructure.db import init_db
from easyapi.shared.config import DatabaseConfig, load_config
from easyapi.shared.logging import logger, setup_logging


def purge(database_url: str | None = None) -> int:
    config = load_config()
    if database_url:
        config = config.model_copy(
            update={"database": DatabaseConfig(DATABASE_URL=database_url)}  # type: ignore[call-arg]
        )

    container = Container(config)
    init_db(container.engine)
    deleted = container.purge_expired_tokens_use_case.execute()
    logger.info(f"maintenance: purged {deleted} expired refresh tokens")
    return deleted


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete expired refresh tokens")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL (defaults to DATABASE_URL)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level for this run",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)
    deleted = purge(args.database_url)
    print(f"Deleted {deleted} expired refresh token(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
