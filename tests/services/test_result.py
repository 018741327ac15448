"""Tests for ServiceResult, ServiceError and the failure shorthand."""

import json

import pytest
from pydantic import ValidationError

from cdnctl.domain.types import ErrorCode
from cdnctl.services.result import ServiceError, ServiceResult, failure


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="list_logging", data={"count": 0})
        assert result.ok is True
        assert result.op == "list_logging"
        assert result.data == {"count": 0}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="describe_service",
            data={"id": "svc"},
            meta={"service_id_source": "flag"},
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["id"] == "svc"
        assert parsed["meta"]["service_id_source"] == "flag"

    def test_json_is_deterministic(self) -> None:
        result = ServiceResult(ok=True, op="x", data={"b": 1, "a": 2})
        assert result.model_dump_json(indent=2) == result.model_dump_json(indent=2)
        assert list(json.loads(result.model_dump_json())) == [
            "ok",
            "op",
            "data",
            "warnings",
            "error",
            "meta",
        ]

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestFailure:
    def test_builds_error(self) -> None:
        result = failure(
            "update_snippet", ErrorCode.INVALID_ARGUMENTS, "bad args", remediation="fix it"
        )
        assert result.ok is False
        assert result.op == "update_snippet"
        assert result.error == ServiceError(
            code="INVALID_ARGUMENTS", message="bad args", detail={"remediation": "fix it"}
        )

    def test_default_detail(self) -> None:
        assert failure("op", "E", "msg").error.detail == {}  # type: ignore[union-attr]


class TestServiceErrorDetail:
    def test_remediation_split_from_context(self) -> None:
        err = ServiceError(
            code=ErrorCode.ACTIVE_LOCKED_VERSION,
            message="service version 2 is not editable",
            detail={"service_id": "svc", "remediation": "Use --autoclone"},
        )
        assert err.remediation == "Use --autoclone"
        assert err.context() == {"service_id": "svc"}

    def test_no_remediation(self) -> None:
        err = ServiceError(code=ErrorCode.API_ERROR, message="boom")
        assert err.remediation is None
        assert err.context() == {}
