"""Operation-specific Rich renderers for ServiceResult.

Renderers are picked by ``result.op`` in :func:`render_result`; unknown
ops fall back to a key-value dump. Rejected instructions still carry
their response payload, so the transaction renderer handles both
outcomes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from payctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from payctl.services.result import ServiceResult

_TRANSACTION_FIELDS = ("type", "amount", "currency", "debit_account", "credit_account", "execute_by")


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* to a styled string via Rich."""
    console = create_console()
    renderer = _OP_RENDERERS.get(result.op, _render_generic)
    renderer(result, console, verbose=verbose)
    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per result; code listings print one code per line."""
    if not result.ok:
        if result.error is None:
            return f"ERROR: {result.op} — Unknown error"
        return f"ERROR: {result.op} — {result.error.code} {result.error.message}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("code", "")) for item in items if isinstance(item, dict))

    code = result.data.get("status_code")
    return f"OK: {result.op} ({code})" if code else f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    status = str(result.data.get("status", "ok" if result.ok else "failed"))
    label_style = style_for_status(status) or ("pay.ok" if result.ok else "pay.error")
    label = Text("OK" if result.ok else "ERROR", style=label_style)
    op = Text(f"  {result.op}", style="pay.op")
    line = Text.assemble(label, op)
    if result.error is not None:
        line.append(" — ")
        line.append(result.error.code, style="pay.code")
        line.append(f" {result.error.message}")
    console.print(line)


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="pay.key")
    if value is None:
        v = Text("—", style="dim")
    elif key.endswith("_account"):
        v = Text(str(value), style="pay.account")
    elif key == "status_code":
        v = Text(str(value), style="pay.code")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _accounts_table(accounts: list[dict[str, Any]], debit_id: str | None) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Account", style="pay.account", no_wrap=True)
    table.add_column("Currency")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right", style="pay.amount")
    table.add_column("Change", justify="right")

    for account in accounts:
        before = int(account.get("balance_before", 0))
        after = int(account.get("balance", 0))
        delta = after - before
        if delta:
            change = Text(f"{delta:+d}", style="pay.debit" if delta < 0 else "pay.credit")
        else:
            change = Text("0", style="dim")
        marker = " (debit)" if account.get("id") == debit_id else ""
        table.add_row(
            f"{account.get('id', '')}{marker}",
            str(account.get("currency", "")),
            str(before),
            str(after),
            change,
        )
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Lifecycle trail and telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, indent=4)
        elif key == "lifecycle" and isinstance(value, list):
            console.print(f"    lifecycle: {' → '.join(str(v) for v in value)}")
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = float(span.get("duration_ms", 0.0))
    style = "yellow" if duration > 10 else "dim"
    line = f"{' ' * indent}[{style}]{duration:>9.3f}ms[/{style}]  {span.get('name', '?')}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Per-op renderers ─────────────────────────────────────────────────


def _render_transaction(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "status", data.get("status"))
    if result.ok:
        _field(console, "status_code", data.get("status_code"))
        _field(console, "status_reason", data.get("status_reason"))
    for key in _TRANSACTION_FIELDS:
        if verbose or data.get(key) is not None:
            _field(console, key, data.get(key))

    accounts = data.get("accounts") or []
    if accounts:
        console.print()
        console.print(_accounts_table(accounts, data.get("debit_account")))


def _render_parsed(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    if not result.ok:
        return
    for key in _TRANSACTION_FIELDS:
        _field(console, key, result.data.get(key))
    if verbose:
        _field(console, "tokens", " ".join(result.data.get("tokens", [])))


def _render_codes(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Code", style="pay.code", no_wrap=True)
    table.add_column("Category")
    table.add_column("Message")
    for item in result.data.get("items", []):
        table.add_row(str(item["code"]), str(item["category"]), str(item["message"]))
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "process_instruction": _render_transaction,
    "parse_instruction": _render_parsed,
    "list_codes": _render_codes,
}
