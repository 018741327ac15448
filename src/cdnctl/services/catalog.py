"""CatalogService — services and their versions.

Lookups (``list``, ``describe``, ``search``) only need a service ID.
Version actions resolve a full service version; they accept active or
locked versions because cloning, activating and locking are exactly the
operations that make sense on them.
"""

from __future__ import annotations

from typing import Any

from cdnctl.domain.types import ResolvedService, Service, ServiceVersion
from cdnctl.infrastructure.api import APIError
from cdnctl.services._helpers import OperationError
from cdnctl.services.base import BaseService
from cdnctl.services.resolver import ResolveOptions
from cdnctl.services.result import ServiceResult
from cdnctl.services.telemetry import traced

_VERSION_ACTIONS = {
    "activate": "activate_version",
    "deactivate": "deactivate_version",
    "lock": "lock_version",
}


class CatalogService(BaseService):
    """Service and service-version operations."""

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    @traced
    def list_services(self) -> ServiceResult:
        op = "list_services"
        try:
            raw = self._api("list_services", self._client.list_services)
        except APIError as exc:
            return self._fail(op, exc)
        items = [Service.model_validate(s).model_dump(exclude={"versions"}) for s in raw]
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    @traced
    def describe_service(self, options: ResolveOptions) -> ServiceResult:
        op = "describe_service"
        try:
            service_id, source = self._resolver.resolve_service_id(options)
            raw = self._api("get_service", self._client.get_service, service_id)
        except (OperationError, APIError) as exc:
            return self._fail(op, exc)
        service = Service.model_validate(raw)
        return ServiceResult(
            ok=True,
            op=op,
            data=service.model_dump(),
            meta={"service_id_source": source.value},
        )

    @traced
    def search_service(self, name: str) -> ServiceResult:
        op = "search_service"
        try:
            raw = self._api("search_service", self._client.search_service, name)
        except APIError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data=Service.model_validate(raw).model_dump())

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    @traced
    def list_versions(self, options: ResolveOptions) -> ServiceResult:
        op = "list_versions"
        try:
            service_id, source = self._resolver.resolve_service_id(options)
            raw = self._api("list_versions", self._client.list_versions, service_id)
        except (OperationError, APIError) as exc:
            return self._fail(op, exc)
        versions = sorted(
            (ServiceVersion.model_validate(v) for v in raw), key=lambda v: v.number
        )
        items = [v.model_dump() for v in versions]
        return ServiceResult(
            ok=True,
            op=op,
            data={"service_id": service_id, "items": items, "count": len(items)},
            meta={"service_id_source": source.value},
        )

    @traced
    def clone_version(self, options: ResolveOptions) -> ServiceResult:
        op = "clone_version"
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_any_version(options))
            raw = self._api(
                "clone_version", self._client.clone_version, resolved.service_id, resolved.version
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)
        clone = ServiceVersion.model_validate(raw)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "service_id": resolved.service_id,
                "version": resolved.version,
                "new_version": clone.number,
            },
            meta=self._meta(resolved),
        )

    @traced
    def version_action(self, action: str, options: ResolveOptions) -> ServiceResult:
        """Run ``activate``, ``deactivate`` or ``lock`` on a version."""
        op = f"{action}_version"
        method = _VERSION_ACTIONS[action]
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_any_version(options))
            raw = self._api(
                method, getattr(self._client, method), resolved.service_id, resolved.version
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)
        version = ServiceVersion.model_validate(raw or {"number": resolved.version})
        data: dict[str, Any] = {
            "service_id": resolved.service_id,
            "version": version.number,
            "active": version.active,
            "locked": version.locked,
        }
        return ServiceResult(ok=True, op=op, data=data, meta=self._meta(resolved))


def _any_version(options: ResolveOptions) -> ResolveOptions:
    return options.model_copy(update={"allow_active_locked": True})
