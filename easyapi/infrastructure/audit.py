# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum
from typing import Any

from easyapi.shared.logging import ContextualLogger, logger

_SENSITIVE_KEYS = ("password", "token", "secret", "key", "hash", "authorization")


class AuditAction(str, Enum):
    REGISTER = "register"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    TOKEN_REFRESHED = "token_refreshed"
    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    API_KEY_GENERATED = "api_key_generated"
    USER_ACTIVATED = "user_activated"
    USER_DEACTIVATED = "user_deactivated"


class AuditLogger:
    """Writes audit events as single structured log lines."""

    def __init__(self, log: ContextualLogger = logger) -> None:
        self._log = log

    def log(
        self,
        action: AuditAction,
        user_id: int | None = None,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        safe_details = _sanitize_details(details) if details else {}

        message = (
            f"AUDIT: {action.value} | "
            f"user_id={user_id} | "
            f"ip={ip_address} | "
            f"success={success}"
        )
        if safe_details:
            message += f" | details={safe_details}"

        if success:
            self._log.info(message)
        else:
            self._log.warning(message)


def _sanitize_details(details: dict[str, Any]) -> dict[str, Any]:
    sanitized = {}
    for key, value in details.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value

    return sanitized


__all__ = ["AuditAction", "AuditLogger"]
