"""Rich Console factory and theme for ratelock output.

Consoles render into a StringIO buffer so ``format_result() -> str`` stays
a plain function. Rich turns colour off by itself when the output is not a
terminal (CliRunner, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RATELOCK_THEME = Theme(
    {
        "rl.ok": "bold green",
        "rl.error": "bold red",
        "rl.warning": "bold yellow",
        "rl.op": "bold cyan",
        "rl.key": "dim",
        "rl.combo": "bold blue",
        "rl.rate": "bold magenta",
        "rl.path": "dim",
        "rl.notice": "italic cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=RATELOCK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def create_stderr_console() -> Console:
    """Console for live notifications, written straight to stderr."""
    return Console(stderr=True, theme=RATELOCK_THEME, highlight=False)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
