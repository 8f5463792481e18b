"""Rich Console factory and theme for payctl output.

Consoles render into a StringIO buffer so formatters can return plain
strings. Rich drops color codes by itself when not attached to a TTY.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PAY_THEME = Theme(
    {
        "pay.ok": "bold green",
        "pay.pending": "bold yellow",
        "pay.error": "bold red",
        "pay.op": "bold cyan",
        "pay.key": "dim",
        "pay.code": "bold magenta",
        "pay.account": "bold blue",
        "pay.amount": "bold",
        "pay.debit": "red",
        "pay.credit": "green",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "successful": "pay.ok",
    "pending": "pay.pending",
    "failed": "pay.error",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Console writing to an in-memory buffer."""
    return Console(
        file=StringIO(),
        theme=PAY_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Theme style for a transaction status (empty for unknown values)."""
    return _STATUS_STYLES.get(status, "")
