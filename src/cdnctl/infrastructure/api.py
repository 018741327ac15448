"""Synchronous REST client for the CDN provider's API.

A thin wrapper over :class:`httpx.Client`: one method per endpoint, JSON
payloads returned as plain dicts and lists.  Write requests are sent
form-encoded, which is what the API expects.  Parsing into models happens
in the service layer.

Failures are raised as :class:`APIError` subclasses so callers can tell a
missing resource from bad credentials from an unreachable host.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cdnctl import __version__

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.fastly.com"
TOKEN_HEADER = "Fastly-Key"


class APIError(Exception):
    """A request to the API failed."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.detail = detail

    def __str__(self) -> str:
        parts = [self.message]
        if self.detail:
            parts.append(self.detail)
        text = ": ".join(parts)
        if self.status is not None:
            return f"{text} (HTTP {self.status})"
        return text


class AuthError(APIError):
    """The token is missing, invalid, or lacks permission (401/403)."""


class NotFoundError(APIError):
    """The requested resource does not exist (404)."""


class NetworkError(APIError):
    """The API could not be reached."""


def _error_from_response(response: httpx.Response) -> APIError:
    message = response.reason_phrase or "API request failed"
    detail: str | None = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("msg") or message)
        if body.get("detail"):
            detail = str(body["detail"])

    status = response.status_code
    if status in (401, 403):
        return AuthError(message, status=status, detail=detail)
    if status == 404:
        return NotFoundError(message, status=status, detail=detail)
    return APIError(message, status=status, detail=detail)


def _encode_form(fields: dict[str, Any]) -> dict[str, str]:
    """Flatten field values to the strings the form endpoints accept."""
    encoded: dict[str, str] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "1" if value else "0"
        else:
            encoded[key] = str(value)
    return encoded


class APIClient:
    """Blocking API client.  One instance per CLI invocation.

    Args:
        token: API token sent in the ``Fastly-Key`` header.
        endpoint: Base URL of the API.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests pass a MockTransport).
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"cdnctl/{__version__}",
        }
        if token:
            headers[TOKEN_HEADER] = token
        self._client = httpx.Client(
            base_url=endpoint,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> APIClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or None)."""
        data = _encode_form(form) if form is not None else None
        logger.debug("api.request %s %s", method, path)
        try:
            response = self._client.request(method, path, params=params, data=data)
        except httpx.TransportError as exc:
            raise NetworkError(f"error reaching the API: {exc}") from exc

        if response.is_error:
            raise _error_from_response(response)
        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def list_services(self) -> list[dict[str, Any]]:
        return self.request("GET", "/service") or []

    def get_service(self, service_id: str) -> dict[str, Any]:
        return self.request("GET", f"/service/{service_id}/details")

    def search_service(self, name: str) -> dict[str, Any]:
        return self.request("GET", "/service/search", params={"name": name})

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    def list_versions(self, service_id: str) -> list[dict[str, Any]]:
        return self.request("GET", f"/service/{service_id}/version") or []

    def get_version(self, service_id: str, version: int) -> dict[str, Any]:
        return self.request("GET", f"/service/{service_id}/version/{version}")

    def clone_version(self, service_id: str, version: int) -> dict[str, Any]:
        return self.request("PUT", f"/service/{service_id}/version/{version}/clone")

    def activate_version(self, service_id: str, version: int) -> dict[str, Any]:
        return self.request("PUT", f"/service/{service_id}/version/{version}/activate")

    def deactivate_version(self, service_id: str, version: int) -> dict[str, Any]:
        return self.request("PUT", f"/service/{service_id}/version/{version}/deactivate")

    def lock_version(self, service_id: str, version: int) -> dict[str, Any]:
        return self.request("PUT", f"/service/{service_id}/version/{version}/lock")

    # ------------------------------------------------------------------
    # Logging endpoints
    # ------------------------------------------------------------------

    @staticmethod
    def _logging_path(kind: str, service_id: str, version: int) -> str:
        return f"/service/{service_id}/version/{version}/logging/{kind}"

    def list_logging(self, kind: str, service_id: str, version: int) -> list[dict[str, Any]]:
        return self.request("GET", self._logging_path(kind, service_id, version)) or []

    def get_logging(self, kind: str, service_id: str, version: int, name: str) -> dict[str, Any]:
        return self.request("GET", f"{self._logging_path(kind, service_id, version)}/{name}")

    def create_logging(
        self, kind: str, service_id: str, version: int, fields: dict[str, Any]
    ) -> dict[str, Any]:
        return self.request("POST", self._logging_path(kind, service_id, version), form=fields)

    def update_logging(
        self, kind: str, service_id: str, version: int, name: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        path = f"{self._logging_path(kind, service_id, version)}/{name}"
        return self.request("PUT", path, form=fields)

    def delete_logging(self, kind: str, service_id: str, version: int, name: str) -> None:
        self.request("DELETE", f"{self._logging_path(kind, service_id, version)}/{name}")

    # ------------------------------------------------------------------
    # VCL snippets
    # ------------------------------------------------------------------

    @staticmethod
    def _snippet_path(service_id: str, version: int) -> str:
        return f"/service/{service_id}/version/{version}/snippet"

    def list_snippets(self, service_id: str, version: int) -> list[dict[str, Any]]:
        return self.request("GET", self._snippet_path(service_id, version)) or []

    def get_snippet(self, service_id: str, version: int, name: str) -> dict[str, Any]:
        return self.request("GET", f"{self._snippet_path(service_id, version)}/{name}")

    def get_dynamic_snippet(self, service_id: str, snippet_id: str) -> dict[str, Any]:
        return self.request("GET", f"/service/{service_id}/snippet/{snippet_id}")

    def create_snippet(
        self, service_id: str, version: int, fields: dict[str, Any]
    ) -> dict[str, Any]:
        return self.request("POST", self._snippet_path(service_id, version), form=fields)

    def update_snippet(
        self, service_id: str, version: int, name: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        path = f"{self._snippet_path(service_id, version)}/{name}"
        return self.request("PUT", path, form=fields)

    def update_dynamic_snippet(
        self, service_id: str, snippet_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        return self.request("PUT", f"/service/{service_id}/snippet/{snippet_id}", form=fields)

    def delete_snippet(self, service_id: str, version: int, name: str) -> None:
        self.request("DELETE", f"{self._snippet_path(service_id, version)}/{name}")
