# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import importlib
from typing import Any, Protocol, cast

from flask import Flask

from easyapi.domain.users.exceptions import SigningSecretMissingError
from easyapi.infrastructure.container import Container
from easyapi.infrastructure.db import init_db
from easyapi.shared.config import AppConfig, load_config
from easyapi.shared.logging import logger, setup_logging
from easyapi.shared.middleware.error_handler import configure_error_handling
from easyapi.shared.middleware.request_logger import configure_request_logging

CONTAINER_EXTENSION = "easyapi.container"


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_config()
    setup_logging(
        level="DEBUG" if config.debug_logging else config.log_level,
        log_file=config.log_file,
    )

    container = Container(config)
    try:
        container.token_codec
    except SigningSecretMissingError:
        logger.critical("JWT_SECRET is not configured; refusing to start")
        raise

    init_db(container.engine)

    app = Flask(__name__)
    configure_error_handling(app, config)
    configure_request_logging(app, debug_mode=config.debug_logging)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/*": {"origins": config.security.allowed_origins}},
        "allow_headers": ["Content-Type", "Authorization", "X-API-Key", "X-Request-ID"],
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.health_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.extensions[CONTAINER_EXTENSION] = container

    enable_hsts = config.security.enable_hsts

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )
        # Tokens and keys travel in these bodies.
        resp.headers.setdefault("Cache-Control", "no-store")

        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    logger.info(f"Flask app initialized (env={config.app_env})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000)
