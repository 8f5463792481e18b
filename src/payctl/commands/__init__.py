"""Subcommand modules for payctl.

register_commands() imports lazily so ``payctl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every standalone command to the root group."""
    from payctl.commands.codes import codes
    from payctl.commands.parse import parse
    from payctl.commands.process import process

    cli.add_command(process)
    cli.add_command(parse)
    cli.add_command(codes)
