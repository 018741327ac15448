"""Tests for ``cdnctl service-version ...``."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from click.testing import Result

from tests.conftest import SERVICE_ID, FakeCdnApi, parse_json

Invoke = Callable[..., Result]
BASE = f"/service/{SERVICE_ID}/version"


class TestServiceVersionCommands:
    def test_list(self, invoke: Invoke) -> None:
        result = invoke("service-version", "list", "-s", SERVICE_ID)
        assert result.exit_code == 0, result.output
        rows = [line.split() for line in result.output.splitlines()[1:]]
        assert [r[:3] for r in rows] == [
            ["1", "false", "true"],
            ["2", "true", "true"],
            ["3", "false", "false"],
        ]

    def test_list_verbose(self, invoke: Invoke) -> None:
        result = invoke("-v", "service-version", "list", "-s", SERVICE_ID)
        assert result.exit_code == 0, result.output
        assert "    Version 3/3" in result.output
        assert "        Locked: false" in result.output

    def test_clone(self, invoke: Invoke) -> None:
        result = invoke("service-version", "clone", "-s", SERVICE_ID, "--version", "active")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            f"SUCCESS: Cloned service {SERVICE_ID} version 2 to version 4"
        )

    def test_clone_json(self, invoke: Invoke) -> None:
        data = parse_json(
            invoke("service-version", "clone", "-s", SERVICE_ID, "--version", "1", "--json")
        )
        assert data["data"]["new_version"] == 4

    def test_activate(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        result = invoke("service-version", "activate", "-s", SERVICE_ID, "--version", "latest")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"SUCCESS: Activated service {SERVICE_ID} version 3"
        assert fake_api.called("PUT", f"{BASE}/3/activate")

    def test_activate_autoclone(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        result = invoke(
            "service-version", "activate", "-s", SERVICE_ID, "--version", "active", "--autoclone"
        )
        assert result.exit_code == 0, result.output
        assert "version 4" in result.output
        assert fake_api.called("PUT", f"{BASE}/4/activate")

    @pytest.mark.parametrize(
        ("action", "verb"), [("deactivate", "Deactivated"), ("lock", "Locked")]
    )
    def test_actions(self, invoke: Invoke, fake_api: FakeCdnApi, action: str, verb: str) -> None:
        result = invoke("service-version", action, "-s", SERVICE_ID, "--version", "2")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"SUCCESS: {verb} service {SERVICE_ID} version 2"
        assert fake_api.called("PUT", f"{BASE}/2/{action}")

    def test_lock_has_no_autoclone(self, invoke: Invoke) -> None:
        result = invoke(
            "service-version", "lock", "-s", SERVICE_ID, "--version", "2", "--autoclone"
        )
        assert result.exit_code == 2
