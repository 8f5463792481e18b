"""ServiceResult and ServiceError — what every payctl service returns.

The CLI renders this type; callers embedding payctl can use it directly
or reach for the bare :class:`~payctl.domain.models.TransactionResponse`
through :func:`payctl.services.instruction.process_instruction`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Failure details: a status code from the taxonomy plus its message."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False only when the instruction was rejected.
        op: Operation name (``"process_instruction"``, ``"parse_instruction"``...).
        data: Operation payload, present on failure too.
        warnings: Non-fatal observations.
        error: Set when ``ok`` is False.
        meta: Lifecycle trail and, in verbose mode, telemetry spans.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
