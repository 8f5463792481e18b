"""Status codes, transaction statuses, and instruction types.

The code taxonomy is closed: every outcome the pipeline can produce maps
to exactly one entry in :data:`STATUS_MESSAGES`.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class InstructionType(StrEnum):
    """Leading keyword of an instruction sentence."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionStatus(StrEnum):
    """Outward status of a processed instruction."""

    SUCCESSFUL = "successful"
    PENDING = "pending"
    FAILED = "failed"


class StatusCode(StrEnum):
    """Machine-matchable outcome codes."""

    # --- syntax ---
    SY01 = "SY01"
    SY02 = "SY02"
    SY03 = "SY03"
    # --- validation ---
    AM01 = "AM01"
    CU02 = "CU02"
    CU01 = "CU01"
    AC04 = "AC04"
    AC02 = "AC02"
    AC03 = "AC03"
    AC01 = "AC01"
    DT01 = "DT01"
    # --- success ---
    AP00 = "AP00"
    AP02 = "AP02"


class CodeCategory(StrEnum):
    SYNTAX = "syntax"
    VALIDATION = "validation"
    SUCCESS = "success"


DEFAULT_CURRENCIES: tuple[str, ...] = ("NGN", "USD", "GBP", "GHS")

STATUS_MESSAGES: dict[StatusCode, str] = {
    StatusCode.SY01: "Missing required keyword",
    StatusCode.SY02: "Invalid keyword order",
    StatusCode.SY03: "Malformed instruction: unable to parse keywords",
    StatusCode.AM01: "Amount must be a positive integer",
    StatusCode.CU02: "Unsupported currency. Only NGN, USD, GBP, and GHS are supported",
    StatusCode.CU01: "Account currency mismatch",
    StatusCode.AC04: "Invalid account ID format",
    StatusCode.AC02: "Debit and credit accounts cannot be the same",
    StatusCode.AC03: "Account not found",
    StatusCode.AC01: "Insufficient funds in debit account",
    StatusCode.DT01: "Invalid date format",
    StatusCode.AP00: "Transaction executed successfully",
    StatusCode.AP02: "Transaction scheduled for future execution",
}

_CATEGORY_PREFIXES: dict[str, CodeCategory] = {
    "SY": CodeCategory.SYNTAX,
    "AP": CodeCategory.SUCCESS,
}

# Reason used by the transport when the pipeline itself blows up.
INTERNAL_ERROR_REASON = "Internal server error"


def category_of(code: StatusCode) -> CodeCategory:
    """Return the category a status code belongs to."""
    return _CATEGORY_PREFIXES.get(code[:2], CodeCategory.VALIDATION)


def describe_currencies(currencies: Iterable[str]) -> str:
    """Render a currency list the way the CU02 message phrases it.

    Examples:
        >>> describe_currencies(["NGN", "USD", "GBP", "GHS"])
        'NGN, USD, GBP, and GHS'
        >>> describe_currencies(["USD"])
        'USD'
    """
    items = list(currencies)
    if len(items) <= 1:
        return "".join(items)
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def status_message(code: StatusCode, *, currencies: Iterable[str] | None = None) -> str:
    """Look up the fixed message for *code*.

    The CU02 message names the supported currencies; when a non-default
    set is configured the message is rebuilt from it.
    """
    if code is StatusCode.CU02 and currencies is not None:
        listed = tuple(currencies)
        if listed != DEFAULT_CURRENCIES:
            verb = "is" if len(listed) == 1 else "are"
            return f"Unsupported currency. Only {describe_currencies(listed)} {verb} supported"
    return STATUS_MESSAGES[code]
