"""Settlement: apply a validated instruction now, or defer it.

An instruction is due when it has no execution date, or when that date
is on or before today's UTC calendar date. Time of day never matters.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, date, datetime

from payctl.domain.codes import STATUS_MESSAGES, StatusCode, TransactionStatus
from payctl.domain.models import Account, AccountView, ParsedFields, SettlementResult
from payctl.domain.rules import leading_integer, parse_execution_date


def utc_today() -> date:
    return datetime.now(UTC).date()


def is_due(execute_by: str | None, *, today: date | None = None) -> bool:
    """Whether an instruction with *execute_by* settles immediately."""
    if not execute_by:
        return True
    target = parse_execution_date(execute_by)
    if target is None:
        raise ValueError(f"Invalid execution date: {execute_by!r}")
    return target <= (today or utc_today())


def involved_accounts(
    accounts: Sequence[Account],
    debit_id: str,
    credit_id: str,
) -> list[AccountView]:
    """Unchanged views of the accounts named by the instruction, in snapshot order."""
    return [
        AccountView.unchanged(account)
        for account in accounts
        if account.id in (debit_id, credit_id)
    ]


def _apply(account: Account, debit_id: str, credit_id: str, amount: int) -> AccountView:
    view = AccountView.unchanged(account)
    if account.id == debit_id:
        return view.model_copy(update={"balance": account.balance - amount})
    if account.id == credit_id:
        return view.model_copy(update={"balance": account.balance + amount})
    return view


def settle(
    fields: ParsedFields,
    accounts: Sequence[Account],
    *,
    today: date | None = None,
) -> SettlementResult:
    """Settle validated *fields* against the *accounts* snapshot.

    The snapshot is never modified; returned views are new objects.
    """
    debit_id, credit_id = fields.debit_account, fields.credit_account

    if not is_due(fields.execute_by, today=today):
        return SettlementResult(
            status=TransactionStatus.PENDING,
            status_reason=STATUS_MESSAGES[StatusCode.AP02],
            status_code=StatusCode.AP02,
            accounts=involved_accounts(accounts, debit_id, credit_id),
        )

    amount = leading_integer(fields.amount) or 0
    moved = [_apply(account, debit_id, credit_id, amount) for account in accounts]
    return SettlementResult(
        status=TransactionStatus.SUCCESSFUL,
        status_reason=STATUS_MESSAGES[StatusCode.AP00],
        status_code=StatusCode.AP00,
        accounts=[view for view in moved if view.id in (debit_id, credit_id)],
    )
