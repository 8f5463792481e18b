"""Command: run an instruction through the full pipeline."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

import click
import structlog

from payctl.commands._base import PayCommand

if TYPE_CHECKING:
    from payctl.commands._context import AppContext

log = structlog.get_logger(__name__)

_OP = "process_instruction"


def _load_json(handle: IO[str], param_hint: str) -> Any:
    try:
        return json.load(handle)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint=param_hint) from exc


def build_payload(
    instruction: str | None,
    accounts_file: IO[str] | None,
    payload_file: IO[str] | None,
) -> dict[str, Any]:
    """Assemble ``{"instruction", "accounts"}`` from CLI inputs.

    ``--payload`` supplies both keys; a positional INSTRUCTION or
    ``--accounts`` file replaces the matching key. An ``--accounts`` file
    may hold a bare list or an object with an ``accounts`` key.
    """
    if accounts_file is None and payload_file is None:
        raise click.UsageError("Provide --accounts FILE or --payload FILE.")

    payload: dict[str, Any] = {}
    if payload_file is not None:
        loaded = _load_json(payload_file, "--payload")
        if not isinstance(loaded, dict):
            raise click.BadParameter("expected a JSON object", param_hint="--payload")
        payload.update(loaded)

    if accounts_file is not None:
        loaded = _load_json(accounts_file, "--accounts")
        if isinstance(loaded, dict) and "accounts" in loaded:
            loaded = loaded["accounts"]
        payload["accounts"] = loaded

    if instruction is not None:
        payload["instruction"] = instruction
    return payload


@click.command(
    cls=PayCommand,
    examples="""\
  payctl process "DEBIT 500 NGN FROM ACCOUNT A1 FOR CREDIT TO ACCOUNT B2" --accounts accounts.json
  payctl process "CREDIT 100 USD TO ACCOUNT x-1 FOR DEBIT FROM ACCOUNT y-2 ON 2030-01-01" --accounts -
  payctl --json process --payload request.json
  payctl -q process --payload request.json""",
)
@click.argument("instruction", required=False)
@click.option(
    "--accounts",
    "accounts_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="JSON account snapshot ('-' for stdin).",
)
@click.option(
    "--payload",
    "payload_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="JSON request body with instruction and accounts ('-' for stdin).",
)
@click.pass_obj
def process(
    app: AppContext,
    instruction: str | None,
    accounts_file: IO[str] | None,
    payload_file: IO[str] | None,
) -> None:
    """Parse, validate, and settle a payment instruction.

    Exit status: 0 when settled or scheduled, 1 when rejected, 3 on an
    internal error.
    """
    payload = build_payload(instruction, accounts_file, payload_file)
    try:
        result = app.service.process(payload)
    except Exception:
        log.exception("instruction.transport_error")
        app.emit_internal_error(_OP)
        return
    app.emit(result)
