# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .timestamps import TIMESTAMP_FORMAT, as_utc, format_timestamp, now_timestamp

__all__ = ["TIMESTAMP_FORMAT", "as_utc", "format_timestamp", "now_timestamp"]
