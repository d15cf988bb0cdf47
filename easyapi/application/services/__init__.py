# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .password_hashing import WerkzeugPasswordHasher
from .token_codec import JwtTokenCodec

__all__ = ["JwtTokenCodec", "WerkzeugPasswordHasher"]
