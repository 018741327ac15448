"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Holds the settings, lazily builds the API client
and manifest, owns the error log, and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from cdnctl.domain.types import ErrorCode, OptionalFlag
from cdnctl.infrastructure.errlog import ErrorLog
from cdnctl.output.formatters import OutputSettings, format_result
from cdnctl.services.result import failure

if TYPE_CHECKING:
    import httpx

    from cdnctl.config.manifest import ManifestData
    from cdnctl.config.settings import CdnSettings
    from cdnctl.infrastructure.api import APIClient
    from cdnctl.services.resolver import ResolveOptions
    from cdnctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The API client and manifest are created on first use so ``--help``
    and ``--examples`` never touch the network or the filesystem.
    """

    def __init__(
        self,
        settings: CdnSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.errlog = ErrorLog(settings.error_log)
        self._transport = transport
        self._client: APIClient | None = None
        self._manifest: ManifestData | None = None

        from cdnctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        from cdnctl.services.telemetry import disable_telemetry, enable_telemetry

        if settings.verbose:
            enable_telemetry()
        else:
            disable_telemetry()

    @property
    def client(self) -> APIClient:
        """The API client (created lazily on first access)."""
        if self._client is None:
            from cdnctl.infrastructure.api import APIClient

            api = self.settings.api
            self._client = APIClient(
                token=api.token,
                endpoint=api.endpoint,
                timeout=api.timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def manifest(self) -> ManifestData:
        """Service defaults from the environment and ``cdn.toml``."""
        if self._manifest is None:
            from cdnctl.config.manifest import load_manifest

            self._manifest = load_manifest(self.settings.manifest_path)
        return self._manifest

    def resolve_options(
        self,
        *,
        service_id: str | None = None,
        service_name: OptionalFlag[str] | None = None,
        version: OptionalFlag[str] | None = None,
        autoclone: bool = False,
        version_required: bool = True,
    ) -> ResolveOptions:
        """Bundle the standard service/version flags for the resolver."""
        from cdnctl.services.resolver import ResolveOptions

        return ResolveOptions(
            service_id=service_id or None,
            service_name=service_name or OptionalFlag(),
            version=version or OptionalFlag(),
            autoclone=autoclone,
            version_required=version_required,
            manifest=self.manifest,
        )

    def reject_verbose_json(self, op: str, json_output: bool) -> None:
        """Fail before any API call when both --verbose and --json are set."""
        if json_output and self.settings.verbose:
            self.emit(
                failure(
                    op,
                    ErrorCode.INVALID_FLAG_COMBINATION,
                    "invalid flag combination, --verbose and --json",
                    remediation="Use either --verbose or --json, not both.",
                )
            )

    def emit(self, result: ServiceResult, *, json_output: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(json_output=json_output, verbose=self.settings.verbose)
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self, *_args: Any) -> None:
        """Release the HTTP client and flush the error log."""
        if self._client is not None:
            self._client.close()
            self._client = None
        self.errlog.persist()
