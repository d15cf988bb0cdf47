from __future__ import annotations

import pytest
from werkzeug.datastructures import Headers

from easyapi.shared.errors import RateLimitedError, UnauthorizedError
from easyapi.shared.middleware import (
    InMemoryRateLimiter,
    Pipeline,
    PipelineRequest,
    RateLimitMiddleware,
)


class Recorder:
    def __init__(self, name: str, calls: list[str]) -> None:
        self.name = name
        self.calls = calls

    def handle(self, request, next_):
        self.calls.append(f"{self.name}:before")
        response = next_(request)
        self.calls.append(f"{self.name}:after")
        return response


class Deny:
    def handle(self, request, next_):
        raise UnauthorizedError()


class ShortCircuit:
    def handle(self, request, next_):
        return "short"


def make_request(**headers: str) -> PipelineRequest:
    return PipelineRequest(method="GET", path="/thing", headers=Headers(headers))


def test_stages_run_in_insertion_order() -> None:
    calls: list[str] = []
    pipeline = Pipeline([Recorder("a", calls)]).pipe(Recorder("b", calls))

    result = pipeline.process(make_request(), lambda req: calls.append("handler") or "done")

    assert result == "done"
    assert calls == ["a:before", "b:before", "handler", "b:after", "a:after"]


def test_empty_pipeline_calls_destination() -> None:
    assert Pipeline().process(make_request(), lambda req: "done") == "done"


def test_stage_can_short_circuit() -> None:
    calls: list[str] = []
    pipeline = Pipeline([ShortCircuit(), Recorder("late", calls)])

    assert pipeline.process(make_request(), lambda req: "done") == "short"
    assert calls == []


def test_stage_error_propagates_and_skips_handler() -> None:
    reached: list[bool] = []
    pipeline = Pipeline([Deny()])

    with pytest.raises(UnauthorizedError):
        pipeline.process(make_request(), lambda req: reached.append(True))
    assert reached == []


def test_pipe_returns_new_pipeline() -> None:
    base = Pipeline()
    extended = base.pipe(Deny())

    assert base.stages == ()
    assert len(extended.stages) == 1


def test_stage_attributes_reach_destination() -> None:
    class Tag:
        def handle(self, request, next_):
            request.attributes["user_id"] = 42
            return next_(request)

    result = Pipeline([Tag()]).process(make_request(), lambda req: req.attributes["user_id"])

    assert result == 42


def test_headers_are_case_insensitive_and_blank_is_absent() -> None:
    request = make_request(**{"X-Api-Key": "  abc  ", "Authorization": "   "})

    assert request.header("x-api-key") == "abc"
    assert request.header("authorization") is None
    assert request.header("missing") is None


def test_client_ip_prefers_forwarded_for() -> None:
    request = make_request(**{"X-Forwarded-For": "10.0.0.1, 10.0.0.2"})
    request.remote_addr = "127.0.0.1"

    assert request.client_ip == "10.0.0.1"


class StepClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_rate_limiter_blocks_after_limit_and_recovers() -> None:
    clock = StepClock()
    limiter = InMemoryRateLimiter(2, 10.0, clock=clock)

    assert limiter.allow("k")
    assert limiter.allow("k")
    assert not limiter.allow("k")
    assert limiter.allow("other")

    clock.now = 10.5
    assert limiter.allow("k")


def test_rate_limit_stage_raises_when_exhausted() -> None:
    stage = RateLimitMiddleware(InMemoryRateLimiter(1, 60.0, clock=StepClock()))
    pipeline = Pipeline([stage])

    assert pipeline.process(make_request(), lambda req: "ok") == "ok"
    with pytest.raises(RateLimitedError) as exc_info:
        pipeline.process(make_request(), lambda req: "ok")
    assert exc_info.value.status == 429


def test_disabled_rate_limit_stage_lets_everything_through() -> None:
    stage = RateLimitMiddleware(InMemoryRateLimiter(1, 60.0), enabled=False)
    pipeline = Pipeline([stage])

    for _ in range(5):
        assert pipeline.process(make_request(), lambda req: "ok") == "ok"
