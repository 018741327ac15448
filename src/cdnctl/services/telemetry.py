"""Request tracing for ``--verbose`` runs.

A traced service operation opens a root :class:`Span`; every API call made
through :func:`cdnctl.services._helpers.call_api` opens a child span under
it.  When the operation returns a ServiceResult, the span tree is attached
as ``meta["telemetry"]`` so the verbose renderer can show where the time
went.  With telemetry off, each entry point costs one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from cdnctl.services.result import ServiceResult

log = structlog.get_logger("cdnctl.telemetry")

_enabled: ContextVar[bool] = ContextVar("cdnctl_telemetry_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("cdnctl_current_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """One timed unit of work: a service operation or a single API call."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def child(self, name: str) -> Span:
        span = Span(name=name, parent=self)
        self.children.append(span)
        return span

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


def enable_telemetry() -> None:
    """Turn tracing on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, or None when tracing is off."""
    return _current_span.get() if _enabled.get() else None


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Open a child span of the current span for the duration of the block.

    Yields None outside a traced operation so callers can annotate
    conditionally.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return

    span = parent.child(name)
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Run a service method as a root span and attach the tree to its result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        token = _current_span.set(root)
        result: Any = None
        try:
            result = func(*args, **kwargs)
        finally:
            root.end()
            _current_span.reset(token)
            log.debug(
                "span.complete",
                span_name=root.name,
                duration_ms=round(root.duration_ms, 2),
                ok=result.ok if isinstance(result, ServiceResult) else result is not None,
                api_calls=len(root.children),
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            result = result.model_copy(update={"meta": meta})
        return result  # type: ignore[no-any-return]

    return wrapper
