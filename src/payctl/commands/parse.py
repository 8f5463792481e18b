"""Command: show how an instruction is parsed, without settling it."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from payctl.commands._base import PayCommand

if TYPE_CHECKING:
    from payctl.commands._context import AppContext


@click.command(
    cls=PayCommand,
    examples="""\
  payctl --json parse "credit 20 gbp to account acc.b for debit from account acc.a"
  payctl parse "DEBIT 500 NGN FROM ACCOUNT A1 FOR CREDIT TO ACCOUNT B2 ON 2025-01-01"
  payctl --json parse "CREDIT 5 USD TO ACCOUNT B2 FOR DEBIT FROM ACCOUNT A1\"""",
)
@click.argument("instruction")
@click.pass_obj
def parse(app: AppContext, instruction: str) -> None:
    """Parse INSTRUCTION and print the extracted fields."""
    app.emit(app.service.parse(instruction))
