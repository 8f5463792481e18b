"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here and ``payctl.toml`` only holds
overrides. An empty file (or none at all) is a complete configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from payctl.domain.codes import DEFAULT_CURRENCIES
from payctl.domain.tokens import MIN_INSTRUCTION_TOKENS


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    supported_currencies: tuple[str, ...] = DEFAULT_CURRENCIES
    min_instruction_tokens: int = Field(default=MIN_INSTRUCTION_TOKENS, ge=1)

    @field_validator("supported_currencies")
    @classmethod
    def _upper_unique(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        seen: list[str] = []
        for code in value:
            upper = code.strip().upper()
            if upper and upper not in seen:
                seen.append(upper)
        if not seen:
            raise ValueError("supported_currencies must name at least one currency")
        return tuple(seen)
