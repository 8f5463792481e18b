"""Keyword-anchored grammar for DEBIT and CREDIT instructions.

Two sentence forms are recognized::

    DEBIT  <amount> <currency> FROM ACCOUNT <debit>  FOR CREDIT TO   ACCOUNT <credit> [ON <date>]
    CREDIT <amount> <currency> TO   ACCOUNT <credit> FOR DEBIT  FROM ACCOUNT <debit>  [ON <date>]

Each form is a table of anchors. An anchor is searched from the index of
the anchor it names in ``after`` (or from the top), so a keyword that
appears out of place is still *found*. Recognition then runs in two
phases: presence (every anchor resolved, else SY01) and ordering
(resolved indices strictly increasing, else SY02). Amount and currency
have no anchor of their own and always sit at token positions 1 and 2.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from payctl.domain.codes import InstructionType, StatusCode
from payctl.domain.models import ParsedFields, ParseOutcome
from payctl.domain.tokens import (
    MIN_INSTRUCTION_TOKENS,
    NOT_FOUND,
    NormalizedInstruction,
    extract_account_id,
    find_keyword,
    normalize,
)

logger = logging.getLogger(__name__)

AMOUNT_POSITION = 1
CURRENCY_POSITION = 2
DATE_KEYWORD = "ON"


@dataclass(frozen=True)
class Anchor:
    """A mandatory keyword and the anchor its search starts from."""

    slot: str
    keyword: str
    after: str | None = None


@dataclass(frozen=True)
class Grammar:
    """Anchor table for one sentence form, in required order.

    The anchors named ``debit_account`` and ``credit_account`` are the
    ``ACCOUNT`` keywords whose following token is the account ID.
    """

    leading: InstructionType
    anchors: tuple[Anchor, ...]

    def locate(self, tokens: Sequence[str]) -> dict[str, int]:
        """Resolve every anchor to a token index (or ``NOT_FOUND``)."""
        positions: dict[str, int] = {}
        for anchor in self.anchors:
            start = positions[anchor.after] if anchor.after else 0
            positions[anchor.slot] = find_keyword(tokens, anchor.keyword, start)
        return positions

    @property
    def pattern(self) -> str:
        """Human-readable sentence template."""
        words = [str(self.leading), "<amount>", "<currency>"]
        for anchor in self.anchors:
            words.append(anchor.keyword)
            if anchor.slot.endswith("_account"):
                words.append(f"<{anchor.slot}>")
        words.append(f"[{DATE_KEYWORD} <date>]")
        return " ".join(words)


DEBIT_GRAMMAR = Grammar(
    leading=InstructionType.DEBIT,
    anchors=(
        Anchor("from", "FROM"),
        Anchor("debit_account", "ACCOUNT", after="from"),
        Anchor("for", "FOR"),
        Anchor("credit", "CREDIT", after="for"),
        Anchor("to", "TO", after="credit"),
        Anchor("credit_account", "ACCOUNT", after="to"),
    ),
)

CREDIT_GRAMMAR = Grammar(
    leading=InstructionType.CREDIT,
    anchors=(
        Anchor("to", "TO"),
        Anchor("credit_account", "ACCOUNT", after="to"),
        Anchor("for", "FOR"),
        Anchor("debit", "DEBIT", after="for"),
        Anchor("from", "FROM", after="debit"),
        Anchor("debit_account", "ACCOUNT", after="from"),
    ),
)

GRAMMARS: dict[str, Grammar] = {
    str(DEBIT_GRAMMAR.leading): DEBIT_GRAMMAR,
    str(CREDIT_GRAMMAR.leading): CREDIT_GRAMMAR,
}


def _in_order(indices: Sequence[int]) -> bool:
    return all(left < right for left, right in zip(indices, indices[1:], strict=False))


def recognize(grammar: Grammar, instruction: NormalizedInstruction, original: str) -> ParseOutcome:
    """Run one grammar over a normalized instruction.

    *original* is the caller's text, used to recover account IDs with
    their case intact.
    """
    tokens = instruction.tokens
    try:
        positions = grammar.locate(tokens)
        ordered = [positions[anchor.slot] for anchor in grammar.anchors]

        if NOT_FOUND in ordered:
            return ParseOutcome.failure(StatusCode.SY01)
        if not _in_order(ordered):
            return ParseOutcome.failure(StatusCode.SY02)

        debit_account = extract_account_id(original, positions["debit_account"] + 1, tokens)
        credit_account = extract_account_id(original, positions["credit_account"] + 1, tokens)

        execute_by: str | None = None
        on_index = find_keyword(tokens, DATE_KEYWORD, ordered[-1])
        if on_index != NOT_FOUND and on_index + 1 < len(tokens):
            execute_by = tokens[on_index + 1]

        fields = ParsedFields(
            type=grammar.leading,
            amount=tokens[AMOUNT_POSITION],
            currency=tokens[CURRENCY_POSITION],
            debit_account=debit_account,
            credit_account=credit_account,
            execute_by=execute_by,
        )
    except Exception:
        logger.debug("Grammar %s failed unexpectedly", grammar.leading, exc_info=True)
        return ParseOutcome.failure(StatusCode.SY03)
    return ParseOutcome.success(fields)


def parse_normalized(
    instruction: NormalizedInstruction,
    original: str,
    *,
    min_tokens: int = MIN_INSTRUCTION_TOKENS,
) -> ParseOutcome:
    """Dispatch a normalized instruction to the grammar named by its first token."""
    if len(instruction) < min_tokens:
        return ParseOutcome.failure(StatusCode.SY03)
    grammar = GRAMMARS.get(instruction.tokens[0])
    if grammar is None:
        return ParseOutcome.failure(StatusCode.SY01)
    return recognize(grammar, instruction, original)


def parse_instruction(raw: Any, *, min_tokens: int = MIN_INSTRUCTION_TOKENS) -> ParseOutcome:
    """Normalize and parse *raw* in one step."""
    normalized = normalize(raw)
    if normalized is None:
        return ParseOutcome.failure(StatusCode.SY03)
    return parse_normalized(normalized, raw, min_tokens=min_tokens)
