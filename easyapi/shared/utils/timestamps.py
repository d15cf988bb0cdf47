# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_timestamp(value: datetime | None) -> str | None:
    """Render a stored datetime as local server time, ``YYYY-MM-DD HH:MM:SS``."""
    if value is None:
        return None
    return as_utc(value).astimezone().strftime(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


__all__ = ["TIMESTAMP_FORMAT", "as_utc", "format_timestamp", "now_timestamp"]
