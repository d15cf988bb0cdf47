# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from flask.typing import ResponseReturnValue

from easyapi.shared.errors.base import RateLimitedError
from easyapi.shared.logging import logger

from .pipeline import Handler, PipelineRequest


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = Lock()
        self._buckets: dict[str, Bucket] = defaultdict(lambda: Bucket(deque(maxlen=self._limit)))

    def allow(self, key: str) -> bool:
        return self.retry_after(key) == 0.0

    def retry_after(self, key: str) -> float:
        """Record a hit for ``key``; 0.0 if allowed, else seconds until a slot frees up."""
        with self._lock:
            now = self._clock()
            bucket = self._buckets[key]
            # Drop old
            while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
                bucket.timestamps.popleft()
            if len(bucket.timestamps) >= self._limit:
                return max(0.1, self._window - (now - bucket.timestamps[0]))
            bucket.timestamps.append(now)
            return 0.0


class RateLimitMiddleware:
    def __init__(self, limiter: InMemoryRateLimiter, *, enabled: bool = True) -> None:
        self._limiter = limiter
        self._enabled = enabled

    def handle(self, request: PipelineRequest, next_: Handler) -> ResponseReturnValue:
        if not self._enabled:
            return next_(request)
        key = f"{request.path}:{request.client_ip}"
        wait = self._limiter.retry_after(key)
        if wait:
            logger.warning(f"rate_limit: blocked {request.method} {request.path} from {request.client_ip}")
            raise RateLimitedError(retry_after=wait)
        return next_(request)


__all__ = ["InMemoryRateLimiter", "RateLimitMiddleware"]
