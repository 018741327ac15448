"""ServiceVersionResolver — turn user flags into a concrete service version.

Every command that targets a service version goes through here:

1. **Service ID**: ``--service-id``, else ``--service-name`` looked up via
   the API, else ``CDNCTL_SERVICE_ID``, else the manifest's ``service_id``.
2. **Version**: a literal number is used as given; ``latest`` and
   ``active`` are picked from the service's version list.
3. **Editability**: mutating commands refuse active or locked versions
   unless ``--autoclone`` is set, in which case the version is cloned and
   the clone is used instead.

A failure at any step raises :class:`OperationError` carrying the service
ID and version known so far.  No step is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, Field

from cdnctl.config.manifest import SERVICE_ID_ENV_VAR, ManifestData
from cdnctl.domain.types import (
    ErrorCode,
    OptionalFlag,
    ResolvedService,
    ServiceIDSource,
    ServiceVersion,
    VersionSelector,
)
from cdnctl.infrastructure.api import APIError, NotFoundError
from cdnctl.services._helpers import OperationError, api_error_code, call_api

if TYPE_CHECKING:
    from cdnctl.infrastructure.api import APIClient

log = structlog.get_logger("cdnctl.resolver")

AUTOCLONE_REMEDIATION = (
    "Pass --autoclone to operate on an editable clone of this version, "
    "or clone one first with 'cdnctl service-version clone'."
)
SERVICE_ID_REMEDIATION = (
    "Provide a service with --service-id or --service-name, set "
    f"{SERVICE_ID_ENV_VAR}, or add service_id to cdn.toml."
)
VERSION_REMEDIATION = "Provide --version as a version number, 'latest' or 'active'."


class ResolveOptions(BaseModel):
    """Everything the resolver needs from one command invocation.

    Attributes:
        service_id: Explicit ``--service-id`` value.
        service_name: ``--service-name``, resolved via the API when set.
        version: ``--version`` value (number, ``latest`` or ``active``).
        autoclone: ``--autoclone`` was passed.
        allow_active_locked: The command may operate on an active or
            locked version as-is (read-only commands).
        version_required: Fail when ``--version`` is missing instead of
            falling back to ``latest``.
        manifest: Environment and manifest-file defaults.
    """

    model_config = {"frozen": True}

    service_id: str | None = None
    service_name: OptionalFlag = Field(default_factory=OptionalFlag)
    version: OptionalFlag = Field(default_factory=OptionalFlag)
    autoclone: bool = False
    allow_active_locked: bool = False
    version_required: bool = True
    manifest: ManifestData = Field(default_factory=ManifestData)


class ServiceVersionResolver:
    """Resolves :class:`ResolveOptions` into a :class:`ResolvedService`."""

    def __init__(self, client: APIClient) -> None:
        self._client = client

    def resolve(self, options: ResolveOptions) -> ResolvedService:
        """Resolve service ID and version, cloning if requested."""
        service_id, source = self.resolve_service_id(options)
        log.debug("service.resolved", service_id=service_id, source=source.value)

        number, metadata = self._select_version(service_id, options)

        needs_metadata = options.autoclone or not options.allow_active_locked
        if metadata is None and needs_metadata:
            metadata = self._fetch_version(service_id, number)

        if metadata is not None and not metadata.editable:
            if options.autoclone:
                clone = self._clone_version(service_id, number)
                log.debug(
                    "version.autocloned",
                    service_id=service_id,
                    cloned_from=number,
                    version=clone.number,
                )
                return ResolvedService(
                    service_id=service_id,
                    version=clone.number,
                    editable=clone.editable,
                    source=source,
                    cloned_from=number,
                )
            if not options.allow_active_locked:
                raise OperationError(
                    ErrorCode.ACTIVE_LOCKED_VERSION,
                    f"service version {number} is not editable",
                    service_id=service_id,
                    service_version=number,
                    remediation=AUTOCLONE_REMEDIATION,
                )

        return ResolvedService(
            service_id=service_id,
            version=number,
            editable=metadata.editable if metadata is not None else None,
            source=source,
        )

    def resolve_service_id(self, options: ResolveOptions) -> tuple[str, ServiceIDSource]:
        """Determine the service ID alone (for commands without a version)."""
        if options.service_name.was_set:
            if options.service_id:
                raise OperationError(
                    ErrorCode.INVALID_FLAG_COMBINATION,
                    "invalid flag combination, --service-name and --service-id",
                    remediation="Use either --service-id or --service-name, not both.",
                )
            name = str(options.service_name.value or "")
            return self._lookup_service_name(name), ServiceIDSource.SERVICE_NAME
        if options.service_id:
            return options.service_id, ServiceIDSource.FLAG
        if options.manifest.env_service_id:
            return options.manifest.env_service_id, ServiceIDSource.ENV
        if options.manifest.file_service_id:
            return options.manifest.file_service_id, ServiceIDSource.MANIFEST
        raise OperationError(
            ErrorCode.NO_SERVICE_ID,
            "error reading service: no service ID found",
            remediation=SERVICE_ID_REMEDIATION,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _lookup_service_name(self, name: str) -> str:
        try:
            service = call_api("search_service", self._client.search_service, name)
        except NotFoundError as exc:
            raise OperationError(
                ErrorCode.NOT_FOUND,
                f"error matching service name with available services: {name}",
                service_name=name,
            ) from exc
        except APIError as exc:
            raise OperationError(
                api_error_code(exc),
                f"error looking up service name {name!r}: {exc}",
                service_name=name,
            ) from exc
        service_id = (service or {}).get("id")
        if not service_id:
            raise OperationError(
                ErrorCode.NOT_FOUND,
                f"error matching service name with available services: {name}",
                service_name=name,
            )
        return str(service_id)

    def _select_version(
        self, service_id: str, options: ResolveOptions
    ) -> tuple[int, ServiceVersion | None]:
        """Pick the version number.  Metadata comes back only when the
        version list had to be fetched anyway."""
        raw = str(options.version.value or "").strip() if options.version.was_set else ""
        if not raw:
            if options.version_required:
                raise OperationError(
                    ErrorCode.NO_SERVICE_VERSION,
                    "error reading service version: no service version specified",
                    service_id=service_id,
                    remediation=VERSION_REMEDIATION,
                )
            raw = VersionSelector.LATEST.value

        selector = raw.lower()
        if selector in (VersionSelector.LATEST, VersionSelector.ACTIVE):
            versions = self._list_versions(service_id)
            if selector == VersionSelector.LATEST:
                return versions[0].number, versions[0]
            for v in versions:
                if v.active:
                    return v.number, v
            raise OperationError(
                ErrorCode.NO_ACTIVE_VERSION,
                "error finding service version: no active service version found",
                service_id=service_id,
            )

        try:
            number = int(raw)
        except ValueError:
            number = 0
        if number < 1:
            raise OperationError(
                ErrorCode.INVALID_VERSION,
                f"error parsing service version: {raw!r} is not a version number",
                service_id=service_id,
                remediation=VERSION_REMEDIATION,
            )
        return number, None

    def _list_versions(self, service_id: str) -> list[ServiceVersion]:
        """All versions, highest number first."""
        try:
            raw = call_api("list_versions", self._client.list_versions, service_id)
        except APIError as exc:
            raise OperationError(
                api_error_code(exc),
                f"error listing service versions: {exc}",
                service_id=service_id,
            ) from exc
        versions = [ServiceVersion.model_validate(v) for v in raw]
        if not versions:
            raise OperationError(
                ErrorCode.NO_SERVICE_VERSION,
                "error listing service versions: no versions available",
                service_id=service_id,
            )
        versions.sort(key=lambda v: v.number, reverse=True)
        return versions

    def _fetch_version(self, service_id: str, number: int) -> ServiceVersion:
        try:
            raw = call_api("get_version", self._client.get_version, service_id, number)
        except APIError as exc:
            raise OperationError(
                api_error_code(exc),
                f"error fetching service version {number}: {exc}",
                service_id=service_id,
                service_version=number,
            ) from exc
        return ServiceVersion.model_validate(raw)

    def _clone_version(self, service_id: str, number: int) -> ServiceVersion:
        try:
            raw = call_api("clone_version", self._client.clone_version, service_id, number)
        except APIError as exc:
            raise OperationError(
                api_error_code(exc),
                f"error cloning service version: {exc}",
                service_id=service_id,
                service_version=number,
            ) from exc
        return ServiceVersion.model_validate(raw)
