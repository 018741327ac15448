"""Off-screen Rich rendering.

Renderers draw onto a Console whose file is an in-memory buffer and hand
back plain text; ``AppContext.emit`` decides where that text goes.  Rich
strips ANSI codes by itself when stdout is not a terminal, so CliRunner
and piped output see plain text.
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

# Wide enough that ID and name columns never wrap.
RENDER_WIDTH = 200

STYLES = Theme(
    {
        "cdn.ok": "bold green",
        "cdn.error": "bold red",
        "cdn.op": "bold cyan",
        "cdn.header": "bold",
    }
)


def buffered_console(buffer: StringIO, *, width: int = RENDER_WIDTH) -> Console:
    return Console(file=buffer, theme=STYLES, highlight=False, width=width)


def render_text(draw: Callable[[Console], None], *, width: int = RENDER_WIDTH) -> str:
    """Run *draw* against a buffered Console and return what it printed.

    Trailing blank lines are dropped; ``click.echo`` adds the final newline.
    """
    buffer = StringIO()
    draw(buffered_console(buffer, width=width))
    return buffer.getvalue().rstrip("\n")
