"""Core value types shared across the CLI.

``OptionalFlag`` tracks whether a flag was given at all, so ``--priority 0``
is distinguishable from an omitted ``--priority``.  Version and service
models mirror the API's JSON payloads.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class OptionalFlag(BaseModel, Generic[T]):
    """A flag value tagged with whether the user supplied it."""

    model_config = {"frozen": True}

    was_set: bool = False
    value: T | None = None

    @classmethod
    def of(cls, value: Any) -> OptionalFlag[Any]:
        return cls(was_set=True, value=value)

    @classmethod
    def from_value(cls, value: Any) -> OptionalFlag[Any]:
        """Build from a Click value where ``None`` means "not given"."""
        if value is None:
            return cls()
        return cls.of(value)


class VersionSelector(StrEnum):
    """Symbolic ``--version`` values."""

    LATEST = "latest"
    ACTIVE = "active"


class ServiceIDSource(StrEnum):
    """Where a resolved service ID came from."""

    FLAG = "flag"
    SERVICE_NAME = "service_name"
    ENV = "env"
    MANIFEST = "manifest"


class ErrorCode(StrEnum):
    """Stable error codes carried in ``ServiceError.code``."""

    NO_SERVICE_ID = "NO_SERVICE_ID"
    NO_SERVICE_VERSION = "NO_SERVICE_VERSION"
    INVALID_VERSION = "INVALID_VERSION"
    NO_ACTIVE_VERSION = "NO_ACTIVE_VERSION"
    ACTIVE_LOCKED_VERSION = "ACTIVE_LOCKED_VERSION"
    INVALID_FLAG_COMBINATION = "INVALID_FLAG_COMBINATION"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    NOT_FOUND = "NOT_FOUND"
    AUTH_ERROR = "AUTH_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    API_ERROR = "API_ERROR"


class ServiceVersion(BaseModel):
    """A single configuration version of a service."""

    model_config = {"frozen": True}

    number: int
    service_id: str = ""
    active: bool = False
    locked: bool = False
    deployed: bool = False
    staging: bool = False
    testing: bool = False
    comment: str | None = ""
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def editable(self) -> bool:
        return not (self.active or self.locked)


class Service(BaseModel):
    """A CDN service as returned by the service endpoints."""

    model_config = {"frozen": True}

    id: str
    name: str = ""
    type: str = "vcl"
    comment: str | None = ""
    customer_id: str | None = None
    version: int | None = Field(default=None, description="Active version number.")
    created_at: str | None = None
    updated_at: str | None = None
    versions: list[ServiceVersion] = Field(default_factory=list)


class ResolvedService(BaseModel):
    """Concrete (service, version) pair a command operates on.

    ``editable`` is None when version metadata was never fetched, which
    happens for read-only commands given a literal version number.
    """

    model_config = {"frozen": True}

    service_id: str
    version: int
    editable: bool | None = None
    source: ServiceIDSource = ServiceIDSource.FLAG
    cloned_from: int | None = None

    def context(self) -> dict[str, Any]:
        """Fields attached to error reports."""
        return {"service_id": self.service_id, "service_version": self.version}
