"""Operation-specific Rich renderers for ServiceResult.

Each renderer draws on a buffered Rich Console; :func:`render_text`
turns the drawing into plain text.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.

List output has two shapes: a compact table by default and an indented
block per item under ``--verbose``.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cdnctl.domain.endpoints import get_backend
from cdnctl.output.console import render_text

if TYPE_CHECKING:
    from rich.console import Console

    from cdnctl.services.result import ServiceResult

_INDENT = "    "


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """

    def draw(console: Console) -> None:
        if not result.ok:
            _render_error(result, console, verbose=verbose)
            return
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)

    return render_text(draw)


# ── Helpers ───────────────────────────────────────────────────────────


def _line(console: Console, text: str, *, indent: int = 0) -> None:
    """Print one plain line; values are never parsed as Rich markup."""
    console.print(f"{_INDENT * indent}{text}", markup=False)


def _value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _success(console: Console, message: str) -> None:
    console.print(Text("SUCCESS: ", style="cdn.ok"), Text(message), sep="")


def _table(*headers: str) -> Table:
    table = Table(
        box=None,
        show_header=True,
        header_style="cdn.header",
        pad_edge=False,
        expand=False,
    )
    for header in headers:
        table.add_column(header, no_wrap=True)
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print resolution notes and the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=1)
        else:
            _line(console, f"{k}: {v}", indent=1)


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 1) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = _INDENT * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 1)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cdn.error")
    op = Text(f"  {result.op}", style="cdn.op")
    console.print(label, op, Text(" — "), Text(msg), sep="")

    if err is None:
        return
    if err.remediation:
        _line(console, f"hint: {err.remediation}", indent=1)
    if verbose:
        rest = err.context()
        if rest:
            console.print(Text("  detail:", style="dim"))
            for k, v in rest.items():
                _line(console, f"{k}: {v}", indent=1)


# ── Logging endpoints ─────────────────────────────────────────────────


def _render_logging_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    items: list[dict[str, Any]] = d.get("items", [])

    if not verbose:
        table = _table("SERVICE", "VERSION", "NAME")
        for item in items:
            table.add_row(
                _value(item.get("service_id")),
                _value(item.get("service_version")),
                _value(item.get("name")),
            )
        console.print(table)
        return

    backend = get_backend(d["kind"])
    _line(console, f"Version: {d.get('version')}")
    total = len(items)
    for i, item in enumerate(items, start=1):
        _line(console, f"{backend.label} {i}/{total}", indent=1)
        _line(console, f"Service ID: {_value(item.get('service_id'))}", indent=2)
        _line(console, f"Version: {_value(item.get('service_version'))}", indent=2)
        _line(console, f"Name: {_value(item.get('name'))}", indent=2)
        for field in backend.all_fields:
            _line(console, f"{field.label}: {_value(item.get(field.key))}", indent=2)
    console.print()


def _render_logging_describe(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    item: dict[str, Any] = d.get("item") or {}
    backend = get_backend(d["kind"])

    if not verbose:
        _line(console, f"Service ID: {_value(item.get('service_id', d.get('service_id')))}")
    _line(console, f"Version: {_value(item.get('service_version', d.get('version')))}")
    _line(console, f"Name: {_value(item.get('name', d.get('name')))}")
    for field in backend.all_fields:
        _line(console, f"{field.label}: {_value(item.get(field.key))}")


def _logging_ref(d: dict[str, Any]) -> str:
    return f"service: {d.get('service_id')}, version: {d.get('version')}"


def _render_logging_create(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(console, f"Created {d['label']} logging endpoint '{d['name']}' ({_logging_ref(d)})")


def _render_logging_update(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(
        console,
        f"Updated {d['label']} logging endpoint '{d['name']}' "
        f"(previously: '{d['previous_name']}', {_logging_ref(d)})",
    )


def _render_logging_delete(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(console, f"Deleted {d['label']} logging endpoint '{d['name']}' ({_logging_ref(d)})")


# ── VCL snippets ──────────────────────────────────────────────────────

_SNIPPET_FIELDS = (
    ("ID", "id"),
    ("Name", "name"),
    ("Dynamic", "dynamic"),
    ("Type", "type"),
    ("Priority", "priority"),
    ("Created at", "created_at"),
    ("Updated at", "updated_at"),
)


def _render_snippet_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    items: list[dict[str, Any]] = d.get("items", [])

    if not verbose:
        table = _table("SERVICE ID", "VERSION", "NAME", "DYNAMIC", "SNIPPET ID")
        for item in items:
            table.add_row(
                _value(item.get("service_id")),
                _value(item.get("service_version")),
                _value(item.get("name")),
                _value(item.get("dynamic")),
                _value(item.get("id")),
            )
        console.print(table)
        return

    _line(console, f"Service ID: {d.get('service_id')}")
    _line(console, f"Service Version: {d.get('version')}")
    total = len(items)
    for i, item in enumerate(items, start=1):
        _line(console, f"Snippet {i}/{total}", indent=1)
        for label, key in _SNIPPET_FIELDS:
            _line(console, f"{label}: {_value(item.get(key))}", indent=2)
    console.print()


def _render_snippet_describe(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _line(console, f"Service ID: {_value(d.get('service_id'))}")
    if not d.get("dynamic"):
        _line(console, f"Service Version: {_value(d.get('service_version'))}")
    for label, key in _SNIPPET_FIELDS:
        if key in d:
            _line(console, f"{label}: {_value(d.get(key))}")
    _line(console, f"Content: \n{_value(d.get('content'))}")


def _render_snippet_create(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(
        console,
        f"Created VCL snippet '{d['name']}' (service: {d['service_id']}, "
        f"version: {d['version']}, dynamic: {_value(d.get('dynamic'))}, "
        f"snippet ID: {d.get('id')}, type: {d.get('type')}, priority: {d.get('priority')})",
    )


def _render_snippet_update(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(
        console,
        f"Updated VCL snippet '{d['name']}' (previously: '{d['previous_name']}', "
        f"service: {d['service_id']}, version: {d['version']}, type: {d['type']}, "
        f"priority: {d['priority']})",
    )


def _render_dynamic_snippet_update(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(console, f"Updated dynamic VCL snippet '{d['id']}' (service: {d['service_id']})")


def _render_snippet_delete(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(
        console,
        f"Deleted VCL snippet '{d['name']}' (service: {d['service_id']}, version: {d['version']})",
    )


# ── Services and versions ─────────────────────────────────────────────


def _render_service_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _table("NAME", "ID", "TYPE", "ACTIVE VERSION", "LAST EDITED (UTC)")
    for item in result.data.get("items", []):
        table.add_row(
            _value(item.get("name")),
            _value(item.get("id")),
            _value(item.get("type")),
            _value(item.get("version")),
            _value(item.get("updated_at")),
        )
    console.print(table)


def _render_service_detail(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _line(console, f"ID: {_value(d.get('id'))}")
    _line(console, f"Name: {_value(d.get('name'))}")
    _line(console, f"Type: {_value(d.get('type'))}")
    if d.get("comment"):
        _line(console, f"Comment: {d['comment']}")
    _line(console, f"Customer ID: {_value(d.get('customer_id'))}")
    _line(console, f"Created (UTC): {_value(d.get('created_at'))}")
    _line(console, f"Last edited (UTC): {_value(d.get('updated_at'))}")
    _line(console, f"Active version: {_value(d.get('version'))}")
    versions = d.get("versions") or []
    _line(console, f"Versions: {len(versions)}")
    for i, v in enumerate(versions, start=1):
        _line(console, f"Version {i}/{len(versions)}", indent=1)
        _line(console, f"Number: {_value(v.get('number'))}", indent=2)
        _line(console, f"Active: {_value(v.get('active'))}", indent=2)
        _line(console, f"Locked: {_value(v.get('locked'))}", indent=2)
        if verbose:
            _line(console, f"Comment: {_value(v.get('comment'))}", indent=2)
            _line(console, f"Last edited (UTC): {_value(v.get('updated_at'))}", indent=2)


def _render_version_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not verbose:
        table = _table("NUMBER", "ACTIVE", "LOCKED", "LAST EDITED (UTC)")
        for v in items:
            table.add_row(
                _value(v.get("number")),
                _value(v.get("active")),
                _value(v.get("locked")),
                _value(v.get("updated_at")),
            )
        console.print(table)
        return

    _line(console, f"Versions: {len(items)}")
    for i, v in enumerate(items, start=1):
        _line(console, f"Version {i}/{len(items)}", indent=1)
        for label, key in (
            ("Number", "number"),
            ("Comment", "comment"),
            ("Service ID", "service_id"),
            ("Active", "active"),
            ("Locked", "locked"),
            ("Deployed", "deployed"),
            ("Staging", "staging"),
            ("Testing", "testing"),
            ("Created (UTC)", "created_at"),
            ("Last edited (UTC)", "updated_at"),
        ):
            _line(console, f"{label}: {_value(v.get(key))}", indent=2)
    console.print()


def _render_version_clone(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _success(
        console,
        f"Cloned service {d['service_id']} version {d['version']} to version {d['new_version']}",
    )


def _version_action_renderer(verb: str) -> Any:
    def render(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
        d = result.data
        _success(console, f"{verb} service {d['service_id']} version {d['version']}")

    return render


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    console.print(Text("OK", style="cdn.ok"), Text(f"  {result.op}", style="cdn.op"), sep="")
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        _line(console, f"{key}: {value}", indent=1)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Logging endpoints
    "list_logging": _render_logging_list,
    "describe_logging": _render_logging_describe,
    "create_logging": _render_logging_create,
    "update_logging": _render_logging_update,
    "delete_logging": _render_logging_delete,
    # VCL snippets
    "list_snippets": _render_snippet_list,
    "describe_snippet": _render_snippet_describe,
    "create_snippet": _render_snippet_create,
    "update_snippet": _render_snippet_update,
    "update_dynamic_snippet": _render_dynamic_snippet_update,
    "delete_snippet": _render_snippet_delete,
    # Services
    "list_services": _render_service_list,
    "describe_service": _render_service_detail,
    "search_service": _render_service_detail,
    # Versions
    "list_versions": _render_version_list,
    "clone_version": _render_version_clone,
    "activate_version": _version_action_renderer("Activated"),
    "deactivate_version": _version_action_renderer("Deactivated"),
    "lock_version": _version_action_renderer("Locked"),
}
