"""Output mode selection.

The CLI renders ServiceResult for humans (tables and text blocks via Rich)
or machines (``--json``).  The formatter picks the mode; renderers do the
human formatting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from cdnctl.output.renderers import render_result

if TYPE_CHECKING:
    from cdnctl.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output flags for a single invocation."""

    model_config = {"frozen": True}

    json_output: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON mode serializes the whole result envelope; field order is fixed by
    the model so identical results always produce identical output.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    return render_result(result, verbose=settings.verbose)
