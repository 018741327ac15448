"""Tests for ``cdnctl vcl snippet ...``."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import Result

from cdnctl.services.snippet import (
    ERR_DYNAMIC_NEW_NAME,
    ERR_DYNAMIC_NO_ID,
    ERR_VERSIONED_NO_NAME,
    ERR_VERSIONED_SNIPPET_ID,
)
from tests.conftest import SERVICE_ID, FakeCdnApi, parse_json

Invoke = Callable[..., Result]
TARGET = ("-s", SERVICE_ID, "--version")


class TestCreate:
    def test_content_from_file(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        Path("ban.vcl").write_text("if (req.http.X-Ban) { error 403; }\n")
        result = invoke(
            "vcl", "snippet", "create", *TARGET, "3",
            "--name", "ban", "--type", "recv", "--content", "ban.vcl",
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        assert "SUCCESS: Created VCL snippet 'ban'" in result.output
        assert "priority: 100" in result.output
        form = fake_api.forms[-1]
        assert form["content"] == "if (req.http.X-Ban) { error 403; }\n"
        assert form["priority"] == "100"
        assert form["dynamic"] == "0"

    def test_literal_content(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        result = invoke(
            "vcl", "snippet", "create", *TARGET, "3",
            "--name", "x", "--type", "deliver", "--content", "# inline", "--dynamic", "-p", "5",
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        assert fake_api.forms[-1]["content"] == "# inline"
        assert fake_api.forms[-1]["dynamic"] == "1"
        assert fake_api.forms[-1]["priority"] == "5"

    def test_invalid_type(self, invoke: Invoke) -> None:
        result = invoke(
            "vcl", "snippet", "create", *TARGET, "3",
            "--name", "x", "--type", "nowhere", "--content", "x",
        )  # fmt: skip
        assert result.exit_code == 2


class TestReadCommands:
    def test_list(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.add_snippet(2, name="ban")
        result = invoke("vcl", "snippet", "list", *TARGET, "active")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].split() == ["SERVICE", "ID", "VERSION", "NAME", "DYNAMIC", "SNIPPET", "ID"]
        assert lines[1].split() == [SERVICE_ID, "2", "ban", "false", "snip1"]

    def test_list_verbose(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.add_snippet(2, name="ban")
        result = invoke("-v", "vcl", "snippet", "list", *TARGET, "active")
        assert result.exit_code == 0, result.output
        assert "Service Version: 2" in result.output
        assert "    Snippet 1/1" in result.output
        assert "        Priority: 100" in result.output

    def test_describe(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.add_snippet(3, name="ban", content="# ban body")
        result = invoke("vcl", "snippet", "describe", *TARGET, "3", "--name", "ban")
        assert result.exit_code == 0, result.output
        assert "Name: ban" in result.output
        assert "# ban body" in result.output

    def test_get_dynamic(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.dynamic[(SERVICE_ID, "dyn1")] = {"snippet_id": "dyn1", "content": "# live"}
        result = invoke(
            "vcl", "snippet", "get", *TARGET, "active", "--dynamic", "--snippet-id", "dyn1"
        )
        assert result.exit_code == 0, result.output
        assert "ID: dyn1" in result.output
        assert "# live" in result.output


class TestUpdate:
    @pytest.mark.parametrize(
        ("args", "message"),
        [
            (["--dynamic", "--snippet-id", "dyn1", "--new-name", "x"], ERR_DYNAMIC_NEW_NAME),
            (["--dynamic", "--content", "x"], ERR_DYNAMIC_NO_ID),
            (["--name", "ban", "--snippet-id", "dyn1"], ERR_VERSIONED_SNIPPET_ID),
            (["--content", "x"], ERR_VERSIONED_NO_NAME),
        ],
    )
    def test_argument_errors(
        self, invoke: Invoke, fake_api: FakeCdnApi, args: list[str], message: str
    ) -> None:
        result = invoke("vcl", "snippet", "update", *TARGET, "3", *args)
        assert result.exit_code == 1
        assert message in result.output
        assert fake_api.calls == []

    def test_versioned(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.add_snippet(3, name="ban")
        result = invoke(
            "vcl", "snippet", "update", *TARGET, "3",
            "--name", "ban", "--new-name", "ban-v2", "--priority", "0", "--type", "deliver",
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            "SUCCESS: Updated VCL snippet 'ban-v2' (previously: 'ban', "
            f"service: {SERVICE_ID}, version: 3, type: deliver, priority: 0)"
        )
        assert fake_api.forms[-1] == {"name": "ban-v2", "priority": "0", "type": "deliver"}

    def test_versioned_on_active_needs_autoclone(
        self, invoke: Invoke, fake_api: FakeCdnApi
    ) -> None:
        result = invoke("vcl", "snippet", "update", *TARGET, "active", "--name", "ban")
        assert result.exit_code == 1
        assert "service version 2 is not editable" in result.output

    def test_dynamic(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.dynamic[(SERVICE_ID, "dyn1")] = {"snippet_id": "dyn1", "service_id": SERVICE_ID}
        result = invoke(
            "vcl", "snippet", "update", *TARGET, "3",
            "--dynamic", "--snippet-id", "dyn1", "--content", "# new",
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            f"SUCCESS: Updated dynamic VCL snippet 'dyn1' (service: {SERVICE_ID})"
        )
        assert fake_api.forms[-1] == {"content": "# new"}

    def test_dynamic_json(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.dynamic[(SERVICE_ID, "dyn1")] = {"snippet_id": "dyn1", "service_id": SERVICE_ID}
        data = parse_json(
            invoke(
                "vcl", "snippet", "update", *TARGET, "3",
                "--dynamic", "--snippet-id", "dyn1", "--content", "# new", "--json",
            )  # fmt: skip
        )
        assert data["op"] == "update_dynamic_snippet"
        assert data["data"] == {"id": "dyn1", "service_id": SERVICE_ID}

    def test_dynamic_on_active_needs_autoclone(
        self, invoke: Invoke, fake_api: FakeCdnApi
    ) -> None:
        fake_api.dynamic[(SERVICE_ID, "dyn1")] = {"snippet_id": "dyn1", "service_id": SERVICE_ID}
        result = invoke(
            "vcl", "snippet", "update", *TARGET, "active",
            "--dynamic", "--snippet-id", "dyn1", "--content", "# new",
        )  # fmt: skip
        assert result.exit_code == 1
        assert "service version 2 is not editable" in result.output
        assert fake_api.paths("PUT") == []

    def test_dynamic_on_active_with_autoclone(
        self, invoke: Invoke, fake_api: FakeCdnApi
    ) -> None:
        fake_api.dynamic[(SERVICE_ID, "dyn1")] = {"snippet_id": "dyn1", "service_id": SERVICE_ID}
        result = invoke(
            "vcl", "snippet", "update", *TARGET, "active", "--autoclone",
            "--dynamic", "--snippet-id", "dyn1", "--content", "# new",
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        assert fake_api.paths("PUT") == [
            f"/service/{SERVICE_ID}/version/2/clone",
            f"/service/{SERVICE_ID}/snippet/dyn1",
        ]

    def test_no_dynamic_still_selects_dynamic_path(
        self, invoke: Invoke, fake_api: FakeCdnApi
    ) -> None:
        fake_api.dynamic[(SERVICE_ID, "dyn1")] = {"snippet_id": "dyn1", "service_id": SERVICE_ID}
        result = invoke(
            "vcl", "snippet", "update", *TARGET, "3",
            "--no-dynamic", "--snippet-id", "dyn1", "--content", "# new",
        )  # fmt: skip
        assert result.exit_code == 0, result.output
        assert "Updated dynamic VCL snippet 'dyn1'" in result.output
        assert fake_api.called("PUT", f"/service/{SERVICE_ID}/snippet/dyn1")


class TestDelete:
    def test_delete(self, invoke: Invoke, fake_api: FakeCdnApi) -> None:
        fake_api.add_snippet(3, name="ban")
        result = invoke("vcl", "snippet", "delete", *TARGET, "3", "--name", "ban")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            f"SUCCESS: Deleted VCL snippet 'ban' (service: {SERVICE_ID}, version: 3)"
        )
