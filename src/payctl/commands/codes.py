"""Command: list the status-code taxonomy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from payctl.commands._base import PayCommand

if TYPE_CHECKING:
    from payctl.commands._context import AppContext


@click.command(
    cls=PayCommand,
    examples="""\
  payctl codes
  payctl -q codes
  payctl --json codes""",
)
@click.pass_obj
def codes(app: AppContext) -> None:
    """List every status code with its category and message."""
    app.emit(app.service.codes())
