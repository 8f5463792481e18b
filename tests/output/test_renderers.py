"""Tests for operation-specific Rich renderers."""

from typing import Any

from payctl.output.renderers import render_quiet, render_result
from payctl.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _transaction(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": "DEBIT",
        "amount": 500,
        "currency": "NGN",
        "debit_account": "A1",
        "credit_account": "B2",
        "execute_by": None,
        "status": "successful",
        "status_reason": "Transaction executed successfully",
        "status_code": "AP00",
        "accounts": [
            {"id": "A1", "balance": 500, "currency": "NGN", "balance_before": 1000},
            {"id": "B2", "balance": 700, "currency": "NGN", "balance_before": 200},
        ],
    }
    data.update(overrides)
    return data


def _processed(**overrides: Any) -> ServiceResult:
    return ServiceResult(ok=True, op="process_instruction", data=_transaction(**overrides))


def _rejected(code: str, message: str, **overrides: Any) -> ServiceResult:
    data = _transaction(status="failed", status_code=code, status_reason=message, **overrides)
    return ServiceResult(
        ok=False,
        op="process_instruction",
        data=data,
        error=ServiceError(code=code, message=message),
    )


# ── process_instruction ──────────────────────────────────────────────


class TestTransactionRenderer:
    def test_successful(self) -> None:
        output = render_result(_processed())
        assert output.startswith("OK")
        assert "process_instruction" in output
        assert "AP00" in output
        assert "Transaction executed successfully" in output
        assert "A1 (debit)" in output
        assert "-500" in output
        assert "+500" in output

    def test_table_headers(self) -> None:
        output = render_result(_processed())
        for header in ("Account", "Currency", "Before", "After", "Change"):
            assert header in output

    def test_pending_shows_no_movement(self) -> None:
        result = _processed(
            status="pending",
            status_code="AP02",
            status_reason="Transaction scheduled for future execution",
            execute_by="2099-01-01",
            accounts=[
                {"id": "A1", "balance": 1000, "currency": "NGN", "balance_before": 1000},
            ],
        )
        output = render_result(result)
        assert "AP02" in output
        assert "2099-01-01" in output
        assert "+500" not in output
        assert "-500" not in output

    def test_rejected(self) -> None:
        output = render_result(_rejected("AC01", "Insufficient funds in debit account"))
        assert output.startswith("ERROR")
        assert "AC01" in output
        assert "Insufficient funds in debit account" in output

    def test_syntax_failure_has_no_table(self) -> None:
        result = _rejected(
            "SY01",
            "Missing required keyword",
            type=None,
            amount=None,
            currency=None,
            debit_account=None,
            credit_account=None,
            accounts=[],
        )
        output = render_result(result)
        assert "SY01" in output
        assert "Account" not in output
        assert "debit_account" not in output

    def test_verbose_lists_null_fields(self) -> None:
        output = render_result(_processed(), verbose=True)
        assert "execute_by" in output


# ── parse_instruction / list_codes ───────────────────────────────────


class TestParsedRenderer:
    def test_fields(self) -> None:
        result = ServiceResult(
            ok=True,
            op="parse_instruction",
            data={
                "type": "CREDIT",
                "amount": "10",
                "currency": "USD",
                "debit_account": "y",
                "credit_account": "x",
                "execute_by": None,
                "tokens": ["CREDIT", "10", "USD"],
            },
        )
        output = render_result(result)
        assert "parse_instruction" in output
        assert "CREDIT" in output
        assert "credit_account: x" in output
        assert "tokens" not in output
        assert "tokens: CREDIT 10 USD" in render_result(result, verbose=True)

    def test_failure(self) -> None:
        result = ServiceResult(
            ok=False,
            op="parse_instruction",
            data={"status_code": "SY02"},
            error=ServiceError(code="SY02", message="Invalid keyword order"),
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "Invalid keyword order" in output


class TestCodesRenderer:
    def test_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_codes",
            data={
                "items": [
                    {"code": "SY01", "category": "syntax", "message": "Missing required keyword"},
                    {"code": "AP00", "category": "success", "message": "Done"},
                ],
                "count": 2,
            },
        )
        output = render_result(result)
        assert "Code" in output
        assert "SY01" in output
        assert "Missing required keyword" in output
        assert "success" in output


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = render_result(ServiceResult(ok=True, op="mystery", data={"answer": 42}))
        assert "mystery" in output
        assert "answer: 42" in output


# ── Verbose meta ─────────────────────────────────────────────────────


class TestMeta:
    def test_lifecycle_and_spans(self) -> None:
        result = _processed().model_copy(
            update={
                "meta": {
                    "lifecycle": ["received", "normalized", "parsed", "validated", "settled"],
                    "telemetry": {
                        "name": "InstructionService.process",
                        "duration_ms": 1.5,
                        "children": [
                            {"name": "parse", "duration_ms": 0.2, "annotations": {"code": "ok"}},
                        ],
                    },
                }
            }
        )
        output = render_result(result, verbose=True)
        assert "received → normalized → parsed → validated → settled" in output
        assert "InstructionService.process" in output
        assert "parse" in output
        assert "code=ok" in output

    def test_meta_hidden_without_verbose(self) -> None:
        result = _processed().model_copy(update={"meta": {"lifecycle": ["received"]}})
        assert "lifecycle" not in render_result(result)


# ── Quiet ────────────────────────────────────────────────────────────


class TestRenderQuiet:
    def test_ok_with_code(self) -> None:
        assert render_quiet(_processed()) == "OK: process_instruction (AP00)"

    def test_ok_without_code(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="parse_instruction")) == (
            "OK: parse_instruction"
        )

    def test_error(self) -> None:
        assert render_quiet(_rejected("AC03", "Account not found")) == (
            "ERROR: process_instruction — AC03 Account not found"
        )

    def test_error_without_details(self) -> None:
        assert render_quiet(ServiceResult(ok=False, op="x")) == "ERROR: x — Unknown error"

    def test_code_listing(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_codes",
            data={"items": [{"code": "SY01"}, {"code": "AP00"}], "count": 2},
        )
        assert render_quiet(result) == "SY01\nAP00"
