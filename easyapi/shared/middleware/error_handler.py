# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask

from easyapi.shared.config import AppConfig
from easyapi.shared.errors import register_error_handler


def configure_error_handling(app: Flask, config: AppConfig) -> None:
    register_error_handler(
        app,
        debug_mode=config.debug_logging,
        production=config.is_production(),
    )
