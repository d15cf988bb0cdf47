# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from easyapi.shared.logging import logger
from easyapi.shared.utils import now_timestamp

from .base import AppError


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def handle_app_error(error: AppError, *, include_context: bool = True) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict(include_context=include_context))
    if error.status == HTTPStatus.UNAUTHORIZED:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response, error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    production: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    include_context = not production

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.info(f"Handled application error {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc, include_context=include_context)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        payload = {
            "success": False,
            "error": (exc.name or "http_error").lower().replace(" ", "_"),
            "message": exc.description if include_context else exc.name,
            "timestamp": now_timestamp(),
        }
        return jsonify(payload), exc.code or default_status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        user_id = getattr(g, "user_id", None)

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {_client_ip()}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")

        payload = {
            "success": False,
            "error": "internal_error",
            "message": "Internal server error",
            "timestamp": now_timestamp(),
        }
        return jsonify(payload), default_status
