"""LoggingService — CRUD for every logging backend in the catalogue.

One service covers all backends: the backend's ``path`` selects the API
resource and its field schema decides which attributes are sent.  Read
operations may target active or locked versions; writes go through the
resolver's editability check (and ``--autoclone``).
"""

from __future__ import annotations

from typing import Any

from cdnctl.domain.endpoints import LoggingBackend, get_backend
from cdnctl.domain.types import ResolvedService
from cdnctl.infrastructure.api import APIError
from cdnctl.services._helpers import OperationError
from cdnctl.services.base import BaseService
from cdnctl.services.resolver import ResolveOptions
from cdnctl.services.result import ServiceResult
from cdnctl.services.telemetry import traced


def _read_only(options: ResolveOptions) -> ResolveOptions:
    return options.model_copy(update={"allow_active_locked": True})


def _writable(options: ResolveOptions) -> ResolveOptions:
    return options.model_copy(update={"allow_active_locked": False})


class LoggingService(BaseService):
    """List, describe, create, update and delete logging endpoints."""

    @traced
    def list(self, kind: str, options: ResolveOptions) -> ServiceResult:
        op = "list_logging"
        backend = get_backend(kind)
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_read_only(options))
            items = self._api(
                "list_logging",
                self._client.list_logging,
                backend.path,
                resolved.service_id,
                resolved.version,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **self._header(backend, resolved),
                "items": items,
                "count": len(items),
            },
            meta=self._meta(resolved),
        )

    @traced
    def describe(self, kind: str, options: ResolveOptions, name: str) -> ServiceResult:
        op = "describe_logging"
        backend = get_backend(kind)
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_read_only(options))
            item = self._api(
                "get_logging",
                self._client.get_logging,
                backend.path,
                resolved.service_id,
                resolved.version,
                name,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        return ServiceResult(
            ok=True,
            op=op,
            data={**self._header(backend, resolved), "name": name, "item": item},
            meta=self._meta(resolved),
        )

    @traced
    def create(
        self,
        kind: str,
        options: ResolveOptions,
        name: str,
        fields: dict[str, Any],
    ) -> ServiceResult:
        """Create an endpoint.  ``None`` field values are not sent."""
        op = "create_logging"
        backend = get_backend(kind)
        payload = {"name": name, **_known_fields(backend, fields)}
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_writable(options))
            item = self._api(
                "create_logging",
                self._client.create_logging,
                backend.path,
                resolved.service_id,
                resolved.version,
                payload,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        return ServiceResult(
            ok=True,
            op=op,
            data={**self._header(backend, resolved), "name": name, "item": item},
            meta=self._meta(resolved),
        )

    @traced
    def update(
        self,
        kind: str,
        options: ResolveOptions,
        name: str,
        fields: dict[str, Any],
        *,
        new_name: str | None = None,
    ) -> ServiceResult:
        """Update an endpoint, sending only the fields the caller set."""
        op = "update_logging"
        backend = get_backend(kind)
        payload = _known_fields(backend, fields)
        if new_name is not None:
            payload["name"] = new_name
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_writable(options))
            item = self._api(
                "update_logging",
                self._client.update_logging,
                backend.path,
                resolved.service_id,
                resolved.version,
                name,
                payload,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **self._header(backend, resolved),
                "name": (item or {}).get("name", new_name or name),
                "previous_name": name,
                "fields_changed": sorted(payload),
                "item": item,
            },
            meta=self._meta(resolved),
        )

    @traced
    def delete(self, kind: str, options: ResolveOptions, name: str) -> ServiceResult:
        op = "delete_logging"
        backend = get_backend(kind)
        resolved: ResolvedService | None = None
        try:
            resolved = self._resolve(_writable(options))
            self._api(
                "delete_logging",
                self._client.delete_logging,
                backend.path,
                resolved.service_id,
                resolved.version,
                name,
            )
        except (OperationError, APIError) as exc:
            return self._fail(op, exc, resolved)

        return ServiceResult(
            ok=True,
            op=op,
            data={**self._header(backend, resolved), "name": name},
            meta=self._meta(resolved),
        )

    @staticmethod
    def _header(backend: LoggingBackend, resolved: ResolvedService) -> dict[str, Any]:
        return {
            "kind": backend.name,
            "label": backend.label,
            "service_id": resolved.service_id,
            "version": resolved.version,
        }


def _known_fields(backend: LoggingBackend, fields: dict[str, Any]) -> dict[str, Any]:
    """Drop unset values and keys the backend does not define."""
    keys = {f.key for f in backend.all_fields}
    return {k: v for k, v in fields.items() if k in keys and v is not None}
