"""Business-rule cascade over parsed instruction fields.

Rules run in a fixed order and stop at the first failure; the failing
rule's code is the one reported. The order is part of the contract:
CU02 looks only at the instruction currency and runs before account
lookup, while CU01 compares account currencies after it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import date

from payctl.domain.codes import DEFAULT_CURRENCIES, StatusCode, status_message
from payctl.domain.models import Account, ParsedFields, ValidationOutcome

ACCOUNT_ID_PATTERN = re.compile(r"[A-Za-z0-9.@-]+")

MIN_YEAR = 1000
MAX_YEAR = 9999


def leading_integer(raw: str | None) -> int | None:
    """Integer value of the leading digit run of *raw*, if any.

    An optional sign is honoured and anything after the digits is ignored.

    Examples:
        >>> leading_integer("500")
        500
        >>> leading_integer("10.5")
        10
        >>> leading_integer("-3")
        -3
        >>> leading_integer("abc") is None
        True
    """
    if not raw:
        return None
    sign = ""
    body = raw
    if body[0] in "+-":
        sign, body = body[0], body[1:]
    digits = ""
    for char in body:
        if not ("0" <= char <= "9"):
            break
        digits += char
    if not digits:
        return None
    return int(sign + digits)


def parse_amount(raw: str | None) -> int | None:
    """Integer value of an amount token when it is above zero.

    Only the leading digit run counts, so trailing text is ignored.

    Examples:
        >>> parse_amount("100ABC")
        100
        >>> parse_amount("0") is None
        True
    """
    value = leading_integer(raw)
    if value is None or value <= 0:
        return None
    return value


def is_valid_account_id(account_id: str | None) -> bool:
    """Letters, digits, hyphen, period, and at-sign only; never empty."""
    if not account_id:
        return False
    return ACCOUNT_ID_PATTERN.fullmatch(account_id) is not None


def parse_execution_date(value: str | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` calendar date, or return None.

    Examples:
        >>> parse_execution_date("2024-02-29")
        datetime.date(2024, 2, 29)
        >>> parse_execution_date("2023-02-29") is None
        True
        >>> parse_execution_date("2024-2-29") is None
        True
    """
    if not value or len(value) != 10 or value[4] != "-" or value[7] != "-":
        return None
    parts = value.split("-")
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    year, month, day = (int(p) for p in parts)
    if not MIN_YEAR <= year <= MAX_YEAR or not 1 <= month <= 12:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date(value: str | None) -> bool:
    return parse_execution_date(value) is not None


def find_account(accounts: Sequence[Account], account_id: str) -> Account | None:
    """First account whose ID matches exactly (case-sensitive)."""
    for account in accounts:
        if account.id == account_id:
            return account
    return None


def _fail(code: StatusCode, currencies: Iterable[str] | None = None) -> ValidationOutcome:
    return ValidationOutcome(
        valid=False,
        error_code=code,
        error_message=status_message(code, currencies=currencies),
    )


def validate_business_rules(
    fields: ParsedFields,
    accounts: Sequence[Account],
    *,
    supported_currencies: Iterable[str] = DEFAULT_CURRENCIES,
) -> ValidationOutcome:
    """Apply AM01, CU02, AC04, AC02, AC03, CU01, AC01, DT01 in that order."""
    currencies = tuple(c.upper() for c in supported_currencies)

    amount = parse_amount(fields.amount)
    if amount is None or "." in fields.amount:
        return _fail(StatusCode.AM01)

    currency = fields.currency.upper()
    if currency not in currencies:
        return _fail(StatusCode.CU02, currencies)

    if not is_valid_account_id(fields.debit_account) or not is_valid_account_id(
        fields.credit_account
    ):
        return _fail(StatusCode.AC04)

    if fields.debit_account == fields.credit_account:
        return _fail(StatusCode.AC02)

    debit = find_account(accounts, fields.debit_account)
    credit = find_account(accounts, fields.credit_account)
    if debit is None or credit is None:
        return _fail(StatusCode.AC03)

    if debit.currency.upper() != credit.currency.upper() or debit.currency.upper() != currency:
        return _fail(StatusCode.CU01)

    if debit.balance < amount:
        return _fail(StatusCode.AC01)

    if fields.execute_by and not is_valid_date(fields.execute_by):
        return _fail(StatusCode.DT01)

    return ValidationOutcome(valid=True)
