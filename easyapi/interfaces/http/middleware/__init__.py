# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth import (
    AuthResolutionMiddleware,
    RoleGuardMiddleware,
    current_user,
    require_current_user,
)

__all__ = [
    "AuthResolutionMiddleware",
    "RoleGuardMiddleware",
    "current_user",
    "require_current_user",
]
