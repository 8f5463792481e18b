"""Instruction, account, and response models.

Every model is frozen. The pipeline never edits a caller's ``Account``;
balance changes produce new :class:`AccountView` instances instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field, StrictInt

from payctl.domain.codes import (
    STATUS_MESSAGES,
    InstructionType,
    StatusCode,
    TransactionStatus,
)

# --- Inputs ---


class Account(BaseModel):
    """One record of the caller-supplied account snapshot."""

    model_config = {"frozen": True, "extra": "ignore"}

    id: str
    balance: StrictInt
    currency: str


class InstructionRequest(BaseModel):
    """Validated payload at the pipeline boundary."""

    model_config = {"frozen": True}

    instruction: str = Field(min_length=1)
    accounts: list[Account]


# --- Parser output ---


class ParsedFields(BaseModel):
    """Fields recovered from a recognized instruction.

    ``amount`` and ``currency`` are the raw tokens; they are not checked
    until business-rule validation.
    """

    model_config = {"frozen": True}

    type: InstructionType
    amount: str
    currency: str
    debit_account: str
    credit_account: str
    execute_by: str | None = None


@dataclass(frozen=True)
class ParseOutcome:
    """Result of running the grammar over a token sequence."""

    ok: bool
    fields: ParsedFields | None = None
    error_code: StatusCode | None = None

    @property
    def error_message(self) -> str | None:
        if self.error_code is None:
            return None
        return STATUS_MESSAGES[self.error_code]

    @classmethod
    def success(cls, fields: ParsedFields) -> ParseOutcome:
        return cls(ok=True, fields=fields)

    @classmethod
    def failure(cls, code: StatusCode) -> ParseOutcome:
        return cls(ok=False, error_code=code)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of the business-rule cascade. Only the first failure is kept."""

    valid: bool
    error_code: StatusCode | None = None
    error_message: str | None = None


# --- Outputs ---


class AccountView(BaseModel):
    """An involved account as it appears in a response."""

    model_config = {"frozen": True}

    id: str
    balance: int
    currency: str
    balance_before: int

    @classmethod
    def unchanged(cls, account: Account) -> AccountView:
        """View of *account* with no balance movement applied."""
        return cls(
            id=account.id,
            balance=account.balance,
            currency=account.currency.upper(),
            balance_before=account.balance,
        )


class SettlementResult(BaseModel):
    """Executor output for a validated instruction."""

    model_config = {"frozen": True}

    status: TransactionStatus
    status_reason: str
    status_code: StatusCode
    accounts: list[AccountView] = Field(default_factory=list)


class TransactionResponse(BaseModel):
    """The canonical outward result of processing one instruction.

    Always fully populated: fields that could not be derived are ``None``.
    """

    model_config = {"frozen": True}

    type: InstructionType | None = None
    amount: int | None = None
    currency: str | None = None
    debit_account: str | None = None
    credit_account: str | None = None
    execute_by: str | None = None
    status: TransactionStatus
    status_reason: str
    status_code: StatusCode
    accounts: list[AccountView] = Field(default_factory=list)
