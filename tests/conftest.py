"""Shared pytest fixtures and test helpers for cdnctl tests."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest
from click.testing import CliRunner, Result

from cdnctl.cli import cli
from cdnctl.infrastructure.api import APIClient
from cdnctl.services.telemetry import disable_telemetry

SERVICE_ID = "SU1Z0isxPaozGVKXdv0eY"
SERVICE_NAME = "my-site"

Req = httpx.Request
Form = dict[str, str]


def _json(status: int, body: Any) -> httpx.Response:
    return httpx.Response(status, json=body)


def _not_found(what: str) -> httpx.Response:
    return _json(404, {"msg": "Record not found", "detail": f"Cannot find {what}"})


@dataclass
class FakeCdnApi:
    """In-memory stand-in for the CDN REST API, served via MockTransport.

    Every request is recorded in ``calls`` as ``(method, path)`` so tests
    can assert which endpoints were (not) hit.
    """

    services: dict[str, dict[str, Any]] = field(default_factory=dict)
    versions: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    logging: dict[tuple[str, int, str], list[dict[str, Any]]] = field(default_factory=dict)
    snippets: dict[tuple[str, int], list[dict[str, Any]]] = field(default_factory=dict)
    dynamic: dict[tuple[str, str], dict[str, Any]] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    requests: list[httpx.Request] = field(default_factory=list)
    forms: list[dict[str, str]] = field(default_factory=list)
    failures: dict[tuple[str, str], httpx.Response] = field(default_factory=dict)

    # ── Setup ─────────────────────────────────────────────────────────

    def add_service(
        self,
        service_id: str = SERVICE_ID,
        name: str = SERVICE_NAME,
        versions: list[dict[str, Any]] | None = None,
    ) -> None:
        self.services[service_id] = {
            "id": service_id,
            "name": name,
            "type": "vcl",
            "comment": "",
            "customer_id": "cust123",
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-02-01T00:00:00Z",
        }
        self.versions[service_id] = [
            {"service_id": service_id, "comment": "", **v}
            for v in (
                versions
                if versions is not None
                else [
                    {"number": 1, "active": False, "locked": True},
                    {"number": 2, "active": True, "locked": True},
                    {"number": 3, "active": False, "locked": False},
                ]
            )
        ]

    def add_logging(self, kind: str, version: int, **attrs: Any) -> dict[str, Any]:
        item = {"service_id": SERVICE_ID, "service_version": version, **attrs}
        self.logging.setdefault((SERVICE_ID, version, kind), []).append(item)
        return item

    def add_snippet(self, version: int, **attrs: Any) -> dict[str, Any]:
        item = {
            "id": f"snip{len(self.snippets.get((SERVICE_ID, version), [])) + 1}",
            "service_id": SERVICE_ID,
            "service_version": str(version),
            "type": "recv",
            "priority": "100",
            "dynamic": "0",
            "content": "# vcl",
            **attrs,
        }
        self.snippets.setdefault((SERVICE_ID, version), []).append(item)
        return item

    def fail(self, method: str, path: str, status: int, msg: str = "Bad request") -> None:
        """Make the next ``method path`` request fail with *status*."""
        self.failures[(method, path)] = _json(status, {"msg": msg})

    # ── Inspection ────────────────────────────────────────────────────

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def called(self, method: str, path: str) -> bool:
        return (method, path) in self.calls

    def paths(self, method: str | None = None) -> list[str]:
        return [p for m, p in self.calls if method is None or m == method]

    # ── Routing ───────────────────────────────────────────────────────

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))
        self.requests.append(request)
        form = dict(parse_qsl(request.content.decode())) if request.content else {}
        if method in ("POST", "PUT"):
            self.forms.append(form)

        forced = self.failures.pop((method, path), None)
        if forced is not None:
            return forced

        for pattern, route_method, func in self._routes():
            if route_method != method:
                continue
            match = re.fullmatch(pattern, path)
            if match:
                return func(request, form, *match.groups())
        return _json(404, {"msg": "No route", "detail": f"{method} {path}"})

    def _routes(self) -> list[tuple[str, str, Callable[..., httpx.Response]]]:
        seg = r"([^/]+)"
        svc = rf"/service/{seg}"
        ver = rf"{svc}/version/(\d+)"
        return [
            (r"/service", "GET", self._list_services),
            (r"/service/search", "GET", self._search_service),
            (rf"{svc}/details", "GET", self._get_service),
            (rf"{svc}/version", "GET", self._list_versions),
            (ver, "GET", self._get_version),
            (rf"{ver}/clone", "PUT", self._clone_version),
            (rf"{ver}/(activate|deactivate|lock)", "PUT", self._version_action),
            (rf"{ver}/logging/{seg}", "GET", self._list_logging),
            (rf"{ver}/logging/{seg}", "POST", self._create_logging),
            (rf"{ver}/logging/{seg}/{seg}", "GET", self._get_logging),
            (rf"{ver}/logging/{seg}/{seg}", "PUT", self._update_logging),
            (rf"{ver}/logging/{seg}/{seg}", "DELETE", self._delete_logging),
            (rf"{ver}/snippet", "GET", self._list_snippets),
            (rf"{ver}/snippet", "POST", self._create_snippet),
            (rf"{ver}/snippet/{seg}", "GET", self._get_snippet),
            (rf"{ver}/snippet/{seg}", "PUT", self._update_snippet),
            (rf"{ver}/snippet/{seg}", "DELETE", self._delete_snippet),
            (rf"{svc}/snippet/{seg}", "GET", self._get_dynamic),
            (rf"{svc}/snippet/{seg}", "PUT", self._update_dynamic),
        ]

    def _service_versions(self, sid: str) -> list[dict[str, Any]] | None:
        return self.versions.get(sid)

    def _find_version(self, sid: str, number: str) -> dict[str, Any] | None:
        for v in self.versions.get(sid, []):
            if v["number"] == int(number):
                return v
        return None

    def _list_services(self, request: Req, form: Form) -> httpx.Response:
        items = []
        for sid, svc in self.services.items():
            active = [v["number"] for v in self.versions.get(sid, []) if v["active"]]
            items.append({**svc, "version": active[0] if active else None})
        return _json(200, items)

    def _search_service(self, request: Req, form: Form) -> httpx.Response:
        name = request.url.params.get("name")
        for sid, svc in self.services.items():
            if svc["name"] == name:
                return _json(200, {**svc, "versions": self.versions.get(sid, [])})
        return _not_found(f"service named {name!r}")

    def _get_service(self, request: Req, form: Form, sid: str) -> httpx.Response:
        if sid not in self.services:
            return _not_found(f"service {sid!r}")
        versions = self.versions.get(sid, [])
        active = [v["number"] for v in versions if v["active"]]
        return _json(
            200,
            {**self.services[sid], "version": active[0] if active else None, "versions": versions},
        )

    def _list_versions(self, request: Req, form: Form, sid: str) -> httpx.Response:
        versions = self._service_versions(sid)
        if versions is None:
            return _not_found(f"service {sid!r}")
        return _json(200, versions)

    def _get_version(
        self, request: Req, form: Form, sid: str, number: str
    ) -> httpx.Response:
        v = self._find_version(sid, number)
        if v is None:
            return _not_found(f"version {number}")
        return _json(200, v)

    def _clone_version(
        self, request: Req, form: Form, sid: str, number: str
    ) -> httpx.Response:
        source = self._find_version(sid, number)
        if source is None:
            return _not_found(f"version {number}")
        versions = self.versions[sid]
        clone = {
            **source,
            "number": max(v["number"] for v in versions) + 1,
            "active": False,
            "locked": False,
        }
        versions.append(clone)
        return _json(200, clone)

    def _version_action(
        self, request: Req, form: Form, sid: str, number: str, action: str
    ) -> httpx.Response:
        v = self._find_version(sid, number)
        if v is None:
            return _not_found(f"version {number}")
        if action == "activate":
            for other in self.versions[sid]:
                other["active"] = False
            v["active"] = True
            v["locked"] = True
        elif action == "deactivate":
            v["active"] = False
        else:
            v["locked"] = True
        return _json(200, v)

    def _list_logging(
        self, request: Req, form: Form, sid: str, number: str, kind: str
    ) -> httpx.Response:
        if self._find_version(sid, number) is None:
            return _not_found(f"version {number}")
        return _json(200, self.logging.get((sid, int(number), kind), []))

    def _create_logging(
        self, request: Req, form: Form, sid: str, number: str, kind: str
    ) -> httpx.Response:
        item = {"service_id": sid, "service_version": int(number), **form}
        self.logging.setdefault((sid, int(number), kind), []).append(item)
        return _json(200, item)

    def _logging_item(self, sid: str, number: str, kind: str, name: str) -> dict[str, Any] | None:
        for item in self.logging.get((sid, int(number), kind), []):
            if item.get("name") == name:
                return item
        return None

    def _get_logging(
        self, request: Req, form: Form, sid: str, number: str, kind: str, name: str
    ) -> httpx.Response:
        item = self._logging_item(sid, number, kind, name)
        return _json(200, item) if item is not None else _not_found(f"{kind} {name!r}")

    def _update_logging(
        self, request: Req, form: Form, sid: str, number: str, kind: str, name: str
    ) -> httpx.Response:
        item = self._logging_item(sid, number, kind, name)
        if item is None:
            return _not_found(f"{kind} {name!r}")
        item.update(form)
        return _json(200, item)

    def _delete_logging(
        self, request: Req, form: Form, sid: str, number: str, kind: str, name: str
    ) -> httpx.Response:
        item = self._logging_item(sid, number, kind, name)
        if item is None:
            return _not_found(f"{kind} {name!r}")
        self.logging[(sid, int(number), kind)].remove(item)
        return _json(200, {"status": "ok"})

    def _list_snippets(
        self, request: Req, form: Form, sid: str, number: str
    ) -> httpx.Response:
        return _json(200, self.snippets.get((sid, int(number)), []))

    def _create_snippet(
        self, request: Req, form: Form, sid: str, number: str
    ) -> httpx.Response:
        item = {
            "id": f"snip{len(self.snippets.get((sid, int(number)), [])) + 1}",
            "service_id": sid,
            "service_version": number,
            **form,
        }
        self.snippets.setdefault((sid, int(number)), []).append(item)
        return _json(200, item)

    def _snippet(self, sid: str, number: str, name: str) -> dict[str, Any] | None:
        for item in self.snippets.get((sid, int(number)), []):
            if item.get("name") == name:
                return item
        return None

    def _get_snippet(
        self, request: Req, form: Form, sid: str, number: str, name: str
    ) -> httpx.Response:
        item = self._snippet(sid, number, name)
        return _json(200, item) if item is not None else _not_found(f"snippet {name!r}")

    def _update_snippet(
        self, request: Req, form: Form, sid: str, number: str, name: str
    ) -> httpx.Response:
        item = self._snippet(sid, number, name)
        if item is None:
            return _not_found(f"snippet {name!r}")
        item.update(form)
        return _json(200, item)

    def _delete_snippet(
        self, request: Req, form: Form, sid: str, number: str, name: str
    ) -> httpx.Response:
        item = self._snippet(sid, number, name)
        if item is None:
            return _not_found(f"snippet {name!r}")
        self.snippets[(sid, int(number))].remove(item)
        return _json(200, {"status": "ok"})

    def _get_dynamic(
        self, request: Req, form: Form, sid: str, snippet_id: str
    ) -> httpx.Response:
        item = self.dynamic.get((sid, snippet_id))
        return _json(200, item) if item is not None else _not_found(f"snippet {snippet_id!r}")

    def _update_dynamic(
        self, request: Req, form: Form, sid: str, snippet_id: str
    ) -> httpx.Response:
        item = self.dynamic.get((sid, snippet_id))
        if item is None:
            return _not_found(f"snippet {snippet_id!r}")
        item.update(form)
        return _json(200, item)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Any, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run every test in an empty directory with no cdnctl env overrides.

    The CLI reconfigures root logging on each invocation; handlers are
    restored afterwards so they never point at a closed runner stream.
    """
    for key in list(os.environ):
        if key.startswith("CDNCTL_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    disable_telemetry()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_api() -> FakeCdnApi:
    """Fake API with one service: v1 locked, v2 active, v3 editable."""
    api = FakeCdnApi()
    api.add_service()
    return api


@pytest.fixture
def client(fake_api: FakeCdnApi) -> Generator[APIClient]:
    """APIClient wired to the fake API."""
    c = APIClient(token="test-token", endpoint="https://api.test", transport=fake_api.transport)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def invoke(cli_runner: CliRunner, fake_api: FakeCdnApi) -> Callable[..., Result]:
    """Run the CLI against the fake API: ``invoke("service", "list")``."""

    def run(*args: str) -> Result:
        return cli_runner.invoke(
            cli,
            ["--token", "test-token", "--endpoint", "https://api.test", *args],
            obj={"transport": fake_api.transport},
        )

    return run


def parse_json(result: Result) -> dict[str, Any]:
    """Decode a ``--json`` command's output, asserting it succeeded."""
    assert result.exit_code == 0, result.output
    return json.loads(result.output)
