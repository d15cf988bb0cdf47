# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Response, jsonify

from easyapi.shared.utils import now_timestamp


def success_response(
    message: str,
    data: dict[str, Any] | None = None,
    status: HTTPStatus = HTTPStatus.OK,
) -> tuple[Response, HTTPStatus]:
    payload: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    payload["timestamp"] = now_timestamp()
    return jsonify(payload), status


__all__ = ["success_response"]
