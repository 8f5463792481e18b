"""Builders for the outward :class:`TransactionResponse`."""

from __future__ import annotations

from collections.abc import Sequence

from payctl.domain.codes import (
    INTERNAL_ERROR_REASON,
    STATUS_MESSAGES,
    StatusCode,
    TransactionStatus,
)
from payctl.domain.models import (
    Account,
    ParsedFields,
    SettlementResult,
    TransactionResponse,
    ValidationOutcome,
)
from payctl.domain.rules import leading_integer
from payctl.domain.settlement import involved_accounts


def parse_failure(code: StatusCode, reason: str | None = None) -> TransactionResponse:
    """No instruction fields could be trusted: everything is null."""
    return TransactionResponse(
        status=TransactionStatus.FAILED,
        status_reason=reason or STATUS_MESSAGES[code],
        status_code=code,
    )


def internal_failure() -> TransactionResponse:
    """Fixed payload for faults outside the pipeline's own error handling."""
    return parse_failure(StatusCode.SY03, INTERNAL_ERROR_REASON)


def validation_failure(
    fields: ParsedFields,
    outcome: ValidationOutcome,
    accounts: Sequence[Account],
) -> TransactionResponse:
    """Echo the parsed fields with the snapshot's view of the involved accounts."""
    code = outcome.error_code or StatusCode.SY03
    return TransactionResponse(
        type=fields.type,
        amount=leading_integer(fields.amount),
        currency=fields.currency.upper() or None,
        debit_account=fields.debit_account,
        credit_account=fields.credit_account,
        execute_by=fields.execute_by,
        status=TransactionStatus.FAILED,
        status_reason=outcome.error_message or STATUS_MESSAGES[code],
        status_code=code,
        accounts=involved_accounts(accounts, fields.debit_account, fields.credit_account),
    )


def settled(fields: ParsedFields, result: SettlementResult) -> TransactionResponse:
    return TransactionResponse(
        type=fields.type,
        amount=leading_integer(fields.amount),
        currency=fields.currency.upper(),
        debit_account=fields.debit_account,
        credit_account=fields.credit_account,
        execute_by=fields.execute_by,
        status=result.status,
        status_reason=result.status_reason,
        status_code=result.status_code,
        accounts=list(result.accounts),
    )
