"""BaseService — shared foundation for API-backed services.

Every service receives an :class:`APIClient` and an :class:`ErrorLog`.
Public methods resolve their target through :class:`ServiceVersionResolver`,
call the API, and convert any failure into a failed ServiceResult after
recording it in the error log.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cdnctl.domain.types import ResolvedService
from cdnctl.infrastructure.api import APIError
from cdnctl.infrastructure.errlog import ErrorLog
from cdnctl.services._helpers import OperationError, api_error_code, call_api
from cdnctl.services.resolver import ServiceVersionResolver
from cdnctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from cdnctl.infrastructure.api import APIClient
    from cdnctl.services.resolver import ResolveOptions


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class LoggingService(BaseService):
            @traced
            def list(self, kind: str, options: ResolveOptions) -> ServiceResult:
                resolved = None
                try:
                    resolved = self._resolve(options)
                    items = self._api("list_logging", self._client.list_logging, ...)
                except (OperationError, APIError) as exc:
                    return self._fail("list_logging", exc, resolved)
                ...
    """

    def __init__(self, client: APIClient, *, errlog: ErrorLog | None = None) -> None:
        self._client = client
        self._errlog = errlog if errlog is not None else ErrorLog()
        self._resolver = ServiceVersionResolver(client)

    def _resolve(self, options: ResolveOptions) -> ResolvedService:
        return self._resolver.resolve(options)

    def _api(self, name: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return call_api(name, func, *args, **kwargs)

    def _fail(
        self,
        op: str,
        exc: OperationError | APIError,
        resolved: ResolvedService | None = None,
    ) -> ServiceResult:
        """Record *exc* in the error log and wrap it as a failed result."""
        context = resolved.context() if resolved is not None else {}
        if isinstance(exc, OperationError):
            error = exc.to_error(**context)
        else:
            detail = dict(context)
            if exc.status is not None:
                detail["status"] = exc.status
            error = ServiceError(code=api_error_code(exc), message=str(exc), detail=detail)

        self._errlog.add(exc, error.context())
        return ServiceResult(ok=False, op=op, error=error)

    @staticmethod
    def _meta(resolved: ResolvedService) -> dict[str, Any]:
        """Resolution details surfaced in verbose output."""
        meta: dict[str, Any] = {"service_id_source": resolved.source.value}
        if resolved.cloned_from is not None:
            meta["autoclone"] = (
                f"Service version {resolved.cloned_from} is not editable, so it was "
                "automatically cloned because --autoclone is enabled. "
                f"Now operating on version {resolved.version}."
            )
        return meta
