# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .pipeline import Handler, Middleware, Pipeline, PipelineRequest
from .rate_limit import InMemoryRateLimiter, RateLimitMiddleware

__all__ = [
    "Handler",
    "InMemoryRateLimiter",
    "Middleware",
    "Pipeline",
    "PipelineRequest",
    "RateLimitMiddleware",
]
