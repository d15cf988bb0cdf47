# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Ordered middleware pipeline wrapped around a terminal handler.

Each stage implements ``handle(request, next_)`` and either returns a
response itself, raises an :class:`~easyapi.shared.errors.AppError`, or
delegates to ``next_``. The chain is built with a single right fold at
dispatch time, so stages run in the order they were added.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from functools import reduce, wraps
from typing import Any, Protocol

from flask import Request, g, request
from flask.typing import ResponseReturnValue
from werkzeug.datastructures import Headers


@dataclass(slots=True)
class PipelineRequest:
    method: str
    path: str
    headers: Headers
    body: Mapping[str, Any] = field(default_factory=dict)
    remote_addr: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_flask(cls, req: Request) -> PipelineRequest:
        payload = req.get_json(silent=True)
        return cls(
            method=req.method,
            path=req.path,
            headers=Headers(req.headers),
            body=payload if isinstance(payload, dict) else {},
            remote_addr=req.remote_addr,
        )

    def header(self, name: str) -> str | None:
        """Header value with surrounding whitespace stripped; blank counts as absent."""
        value = self.headers.get(name)
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def client_ip(self) -> str:
        forwarded = self.headers.get("X-Forwarded-For", "")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return self.remote_addr or "unknown"


Handler = Callable[[PipelineRequest], ResponseReturnValue]


class Middleware(Protocol):
    def handle(self, request: PipelineRequest, next_: Handler) -> ResponseReturnValue: ...


def _link(next_: Handler, stage: Middleware) -> Handler:
    def handler(req: PipelineRequest) -> ResponseReturnValue:
        return stage.handle(req, next_)

    return handler


class Pipeline:
    def __init__(self, stages: Iterable[Middleware] = ()) -> None:
        self._stages: tuple[Middleware, ...] = tuple(stages)

    @property
    def stages(self) -> tuple[Middleware, ...]:
        return self._stages

    def pipe(self, stage: Middleware) -> Pipeline:
        return Pipeline((*self._stages, stage))

    def process(self, req: PipelineRequest, destination: Handler) -> ResponseReturnValue:
        handler = reduce(_link, reversed(self._stages), destination)
        return handler(req)

    def wrap(self, view: Callable[..., ResponseReturnValue]) -> Callable[..., ResponseReturnValue]:
        """Run ``view`` behind this pipeline as a Flask view function.

        Request-scoped attributes set by the stages are copied onto ``flask.g``
        before the view runs.
        """

        @wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> ResponseReturnValue:
            def destination(req: PipelineRequest) -> ResponseReturnValue:
                g.pipeline_request = req
                for key, value in req.attributes.items():
                    setattr(g, key, value)
                return view(*args, **kwargs)

            return self.process(PipelineRequest.from_flask(request), destination)

        return wrapper


__all__ = ["Handler", "Middleware", "Pipeline", "PipelineRequest"]
