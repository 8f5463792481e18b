"""Tests for the DEBIT/CREDIT keyword grammar."""

import pytest

from payctl.domain.codes import InstructionType, StatusCode
from payctl.domain.grammar import (
    CREDIT_GRAMMAR,
    DEBIT_GRAMMAR,
    GRAMMARS,
    Grammar,
    parse_instruction,
    parse_normalized,
    recognize,
)
from payctl.domain.tokens import NOT_FOUND, normalize

DEBIT = "DEBIT 500 NGN FROM ACCOUNT A1 FOR CREDIT TO ACCOUNT B2"
CREDIT = "CREDIT 100 USD TO ACCOUNT x-1 FOR DEBIT FROM ACCOUNT y.2"


class TestDebitForm:
    def test_fields(self) -> None:
        outcome = parse_instruction(DEBIT)
        assert outcome.ok
        assert outcome.fields is not None
        assert outcome.fields.type == InstructionType.DEBIT
        assert outcome.fields.amount == "500"
        assert outcome.fields.currency == "NGN"
        assert outcome.fields.debit_account == "A1"
        assert outcome.fields.credit_account == "B2"
        assert outcome.fields.execute_by is None

    def test_with_date(self) -> None:
        outcome = parse_instruction(f"{DEBIT} ON 2025-01-01")
        assert outcome.fields is not None
        assert outcome.fields.execute_by == "2025-01-01"

    def test_lowercase_keywords(self) -> None:
        outcome = parse_instruction("debit 5 gbp from account one for credit to account two")
        assert outcome.ok
        assert outcome.fields is not None
        assert outcome.fields.currency == "GBP"
        assert outcome.fields.debit_account == "one"
        assert outcome.fields.credit_account == "two"

    def test_account_case_preserved(self) -> None:
        outcome = parse_instruction("DEBIT 5 NGN FROM ACCOUNT acc@Bank.ng FOR CREDIT TO ACCOUNT Zz-9")
        assert outcome.fields is not None
        assert outcome.fields.debit_account == "acc@Bank.ng"
        assert outcome.fields.credit_account == "Zz-9"

    def test_extra_whitespace(self) -> None:
        outcome = parse_instruction("  DEBIT  500\tNGN FROM ACCOUNT   A1 FOR CREDIT TO ACCOUNT  b2  ")
        assert outcome.fields is not None
        assert outcome.fields.credit_account == "b2"

    def test_missing_trailing_account_is_empty(self) -> None:
        outcome = parse_instruction("DEBIT 500 NGN FROM ACCOUNT A1 FOR CREDIT TO ACCOUNT")
        assert outcome.ok
        assert outcome.fields is not None
        assert outcome.fields.credit_account == ""

    def test_on_without_date(self) -> None:
        outcome = parse_instruction(f"{DEBIT} ON")
        assert outcome.fields is not None
        assert outcome.fields.execute_by is None

    def test_amount_and_currency_are_raw(self) -> None:
        outcome = parse_instruction("DEBIT 10.5 xyz FROM ACCOUNT A FOR CREDIT TO ACCOUNT B")
        assert outcome.fields is not None
        assert outcome.fields.amount == "10.5"
        assert outcome.fields.currency == "XYZ"


class TestCreditForm:
    def test_fields(self) -> None:
        outcome = parse_instruction(CREDIT)
        assert outcome.ok
        assert outcome.fields is not None
        assert outcome.fields.type == InstructionType.CREDIT
        assert outcome.fields.credit_account == "x-1"
        assert outcome.fields.debit_account == "y.2"

    def test_with_date(self) -> None:
        outcome = parse_instruction(f"{CREDIT} on 2030-12-31")
        assert outcome.fields is not None
        assert outcome.fields.execute_by == "2030-12-31"


class TestMissingKeywords:
    @pytest.mark.parametrize(
        "instruction",
        [
            "DEBIT 500 NGN ACCOUNT A1 FOR CREDIT TO ACCOUNT B2 X",
            "DEBIT 500 NGN FROM ACCOUNT A1 CREDIT TO ACCOUNT B2",
            "DEBIT 500 NGN FROM ACCOUNT A1 FOR TO ACCOUNT B2 X",
            "DEBIT 500 NGN FROM ACCOUNT A1 FOR CREDIT ACCOUNT B2 X",
            "DEBIT 500 NGN FROM ACCOUNT A1 FOR CREDIT TO B2 X",
        ],
    )
    def test_each_debit_anchor(self, instruction: str) -> None:
        assert parse_instruction(instruction).error_code == StatusCode.SY01

    @pytest.mark.parametrize(
        "instruction",
        [
            "CREDIT 1 USD ACCOUNT X FOR DEBIT FROM ACCOUNT Y Z",
            "CREDIT 1 USD TO ACCOUNT X DEBIT FROM ACCOUNT Y",
            "CREDIT 1 USD TO ACCOUNT X FOR DEBIT ACCOUNT Y Z",
        ],
    )
    def test_credit_anchors(self, instruction: str) -> None:
        assert parse_instruction(instruction).error_code == StatusCode.SY01

    def test_unknown_leading_keyword(self) -> None:
        outcome = parse_instruction("PAY 100 NGN FROM ACCOUNT A1 FOR CREDIT TO ACCOUNT B2")
        assert not outcome.ok
        assert outcome.error_code == StatusCode.SY01
        assert outcome.fields is None


class TestKeywordOrder:
    def test_debit_for_before_from(self) -> None:
        outcome = parse_instruction("DEBIT 500 NGN FOR CREDIT TO ACCOUNT B2 FROM ACCOUNT A1")
        assert outcome.error_code == StatusCode.SY02

    def test_credit_for_before_to(self) -> None:
        outcome = parse_instruction("CREDIT 5 USD FOR DEBIT FROM ACCOUNT Y TO ACCOUNT X")
        assert outcome.error_code == StatusCode.SY02

    def test_account_keyword_found_late(self) -> None:
        # FROM lacks its ACCOUNT, so the search lands on the credit-side ACCOUNT.
        outcome = parse_instruction("DEBIT 500 NGN FROM A1 FOR CREDIT TO ACCOUNT B2 X")
        assert outcome.error_code == StatusCode.SY02

    def test_error_message(self) -> None:
        outcome = parse_instruction("DEBIT 500 NGN FOR CREDIT TO ACCOUNT B2 FROM ACCOUNT A1")
        assert outcome.error_message == "Invalid keyword order"


class TestMalformed:
    @pytest.mark.parametrize("raw", [None, "", "   ", 123, "DEBIT 500 NGN FROM ACCOUNT A1 FOR"])
    def test_sy03(self, raw: object) -> None:
        assert parse_instruction(raw).error_code == StatusCode.SY03

    def test_min_tokens_is_configurable(self) -> None:
        assert parse_instruction("PAY 1 2", min_tokens=3).error_code == StatusCode.SY01

    def test_recognizer_fault_maps_to_sy03(self) -> None:
        # An empty anchor table never resolves the account slots.
        normalized = normalize("DEBIT FROM")
        assert normalized is not None
        outcome = recognize(Grammar(InstructionType.DEBIT, ()), normalized, "x")
        assert outcome.error_code == StatusCode.SY03


class TestGrammarTables:
    def test_registry(self) -> None:
        assert GRAMMARS == {"DEBIT": DEBIT_GRAMMAR, "CREDIT": CREDIT_GRAMMAR}

    def test_debit_pattern(self) -> None:
        assert DEBIT_GRAMMAR.pattern == (
            "DEBIT <amount> <currency> FROM ACCOUNT <debit_account> "
            "FOR CREDIT TO ACCOUNT <credit_account> [ON <date>]"
        )

    def test_credit_pattern(self) -> None:
        assert CREDIT_GRAMMAR.pattern.startswith("CREDIT <amount> <currency> TO ACCOUNT <credit_account>")

    def test_locate_reports_missing(self) -> None:
        positions = DEBIT_GRAMMAR.locate(("DEBIT", "1", "NGN"))
        assert set(positions.values()) == {NOT_FOUND}

    def test_parse_normalized_uses_original_text(self) -> None:
        normalized = normalize(CREDIT)
        assert normalized is not None
        outcome = parse_normalized(normalized, CREDIT)
        assert outcome.fields is not None
        assert outcome.fields.credit_account == "x-1"
