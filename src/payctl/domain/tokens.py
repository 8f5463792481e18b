"""Instruction normalization and keyword lookup.

Matching happens on an upper-cased token sequence, while account IDs are
case-sensitive, so the case-preserving text is kept next to the tokens.
Both come from the same whitespace split, so positions line up.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

NOT_FOUND = -1

# Shorter instructions are rejected before any grammar attempt.
MIN_INSTRUCTION_TOKENS = 8


@dataclass(frozen=True)
class NormalizedInstruction:
    """Whitespace-collapsed instruction text plus its upper-cased tokens."""

    text: str
    tokens: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.tokens)


def collapse_whitespace(raw: str) -> str:
    """Trim *raw* and squeeze every whitespace run to a single space.

    Examples:
        >>> collapse_whitespace("  DEBIT   100\\tNGN ")
        'DEBIT 100 NGN'
    """
    return " ".join(raw.split())


def normalize(raw: Any) -> NormalizedInstruction | None:
    """Normalize a raw instruction.

    Returns None when *raw* is not a string or holds nothing but
    whitespace. Re-normalizing ``result.text`` yields the same tokens.
    """
    if not isinstance(raw, str):
        return None
    text = collapse_whitespace(raw)
    if not text:
        return None
    tokens = tuple(part.upper() for part in text.split(" "))
    return NormalizedInstruction(text=text, tokens=tokens)


def find_keyword(tokens: Sequence[str], keyword: str, start: int = 0) -> int:
    """Index of the first *keyword* at or after *start*, else ``NOT_FOUND``.

    A negative *start* (an unresolved earlier anchor) scans from the top.
    """
    for index in range(max(start, 0), len(tokens)):
        if tokens[index] == keyword:
            return index
    return NOT_FOUND


def extract_account_id(text: str, position: int, tokens: Sequence[str]) -> str:
    """Recover the case-preserving token at *position*.

    *text* is the original (or already collapsed) instruction. Falls back
    to the matching upper-cased token, and to ``""`` past the end.
    """
    original = collapse_whitespace(text).split(" ")
    if 0 <= position < len(original):
        return original[position]
    if 0 <= position < len(tokens):
        return tokens[position]
    return ""
