# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str) -> str | None:
    """Return the canonical form of ``email``, or ``None`` if it is not an address."""
    try:
        return validate_email(email.strip(), check_deliverability=False).normalized
    except EmailNotValidError:
        return None


def password_is_acceptable(password: str, min_length: int = MIN_PASSWORD_LENGTH) -> bool:
    return len(password) >= min_length


__all__ = ["MIN_PASSWORD_LENGTH", "normalize_email", "password_is_acceptable"]
