"""ServiceResult and ServiceError — what every service operation returns.

INVARIANT: public service methods never raise for expected failures
(unresolvable service, non-editable version, API errors); they return a
ServiceResult with ``ok=False``.  Commands hand the result to
``AppContext.emit`` which picks stdout or stderr and the exit code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

REMEDIATION_KEY = "remediation"


class ServiceError(BaseModel):
    """Why an operation failed.

    ``code`` is one of :class:`cdnctl.domain.types.ErrorCode`.  ``detail``
    carries diagnostic context (``service_id``, ``service_version``,
    HTTP ``status``) and optionally a user-facing ``remediation`` hint.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def remediation(self) -> str | None:
        return self.detail.get(REMEDIATION_KEY)

    def context(self) -> dict[str, Any]:
        """Diagnostic fields only, without the remediation hint."""
        return {k: v for k, v in self.detail.items() if k != REMEDIATION_KEY}


class ServiceResult(BaseModel):
    """Outcome of one command's service call.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name; selects the renderer (``"list_logging"``).
        data: Operation payload on success.
        warnings: Non-fatal notes, printed to stderr.
        error: Set when ``ok`` is False.
        meta: Resolution notes and the telemetry tree, shown with ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def failure(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    """A failed result for errors detected before any API call."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )
