"""Shared service-layer helpers: error type, API call tracing."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from cdnctl.domain.types import ErrorCode
from cdnctl.infrastructure.api import APIError, AuthError, NetworkError, NotFoundError
from cdnctl.services.result import ServiceError
from cdnctl.services.telemetry import trace_span

_R = TypeVar("_R")


class OperationError(Exception):
    """A command cannot proceed: bad input, unresolvable service, or a
    wrapped API failure.  Converted to a failed ServiceResult at the
    service boundary."""

    def __init__(self, code: ErrorCode | str, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = message
        self.detail = detail

    def to_error(self, **context: Any) -> ServiceError:
        return ServiceError(code=self.code, message=self.message, detail={**context, **self.detail})


def api_error_code(exc: APIError) -> ErrorCode:
    """Map an API exception onto its stable error code."""
    if isinstance(exc, NotFoundError):
        return ErrorCode.NOT_FOUND
    if isinstance(exc, AuthError):
        return ErrorCode.AUTH_ERROR
    if isinstance(exc, NetworkError):
        return ErrorCode.NETWORK_ERROR
    return ErrorCode.API_ERROR


def call_api(name: str, func: Callable[..., _R], *args: Any, **kwargs: Any) -> _R:
    """Invoke one client method inside a telemetry span."""
    with trace_span(f"api.{name}") as span:
        try:
            return func(*args, **kwargs)
        except APIError as exc:
            if span is not None:
                span.annotate("error", type(exc).__name__)
                if exc.status is not None:
                    span.annotate("status", exc.status)
            raise
