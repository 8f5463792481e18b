"""Instruction pipeline — the core entry point and its service wrapper.

Pipeline: NORMALIZE → PARSE → VALIDATE → SETTLE → RESPOND

Every stage hands back an outcome object instead of raising; the first
failing stage decides the response. :func:`process_instruction` never
raises: anything unexpected becomes a ``failed`` response with SY03.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

import structlog
from pydantic import ValidationError

from payctl.config.models import LedgerConfig
from payctl.domain.codes import StatusCode, TransactionStatus, category_of, status_message
from payctl.domain.grammar import parse_normalized
from payctl.domain.lifecycle import InstructionLifecycle, InstructionState
from payctl.domain.models import InstructionRequest, TransactionResponse
from payctl.domain.responses import parse_failure, settled, validation_failure
from payctl.domain.rules import validate_business_rules
from payctl.domain.settlement import settle
from payctl.domain.tokens import normalize
from payctl.services.result import ServiceError, ServiceResult
from payctl.services.telemetry import trace_span, traced

log = structlog.get_logger(__name__)


def _coerce_request(payload: Any) -> InstructionRequest | None:
    """Validate the raw payload, or return None when it is unusable.

    Mirrors the transport contract: no payload, no ``accounts``, or an
    empty ``instruction`` is rejected before parsing.
    """
    if not isinstance(payload, Mapping):
        return None
    instruction = payload.get("instruction")
    accounts = payload.get("accounts")
    if not instruction or accounts is None:
        return None
    try:
        return InstructionRequest.model_validate({"instruction": instruction, "accounts": accounts})
    except ValidationError as exc:
        log.debug("instruction.payload_rejected", errors=exc.error_count())
        return None


def _run(
    payload: Any,
    config: LedgerConfig,
    today: date | None,
    lifecycle: InstructionLifecycle,
) -> TransactionResponse:
    request = _coerce_request(payload)
    if request is None:
        lifecycle.advance(InstructionState.SYNTAX_FAILED)
        return parse_failure(StatusCode.SY03)

    # ── NORMALIZE ────────────────────────────────────────────
    with trace_span("normalize") as span:
        normalized = normalize(request.instruction)
        if span is not None:
            span.annotate("tokens", len(normalized) if normalized else 0)
    if normalized is None:
        lifecycle.advance(InstructionState.SYNTAX_FAILED)
        return parse_failure(StatusCode.SY03)
    lifecycle.advance(InstructionState.NORMALIZED)

    # ── PARSE ────────────────────────────────────────────────
    with trace_span("parse") as span:
        parsed = parse_normalized(
            normalized,
            request.instruction,
            min_tokens=config.min_instruction_tokens,
        )
        if span is not None:
            span.annotate("code", str(parsed.error_code or "ok"))
    if not parsed.ok or parsed.fields is None:
        lifecycle.advance(InstructionState.SYNTAX_FAILED)
        return parse_failure(parsed.error_code or StatusCode.SY03)
    lifecycle.advance(InstructionState.PARSED)
    fields = parsed.fields

    # ── VALIDATE ─────────────────────────────────────────────
    with trace_span("validate") as span:
        verdict = validate_business_rules(
            fields,
            request.accounts,
            supported_currencies=config.supported_currencies,
        )
        if span is not None:
            span.annotate("code", str(verdict.error_code or "ok"))
    if not verdict.valid:
        lifecycle.advance(InstructionState.RULE_FAILED)
        return validation_failure(fields, verdict, request.accounts)
    lifecycle.advance(InstructionState.VALIDATED)

    # ── SETTLE ───────────────────────────────────────────────
    with trace_span("settle") as span:
        result = settle(fields, request.accounts, today=today)
        if span is not None:
            span.annotate("code", str(result.status_code))
    if result.status is TransactionStatus.PENDING:
        lifecycle.advance(InstructionState.PENDING)
    else:
        lifecycle.advance(InstructionState.SETTLED)

    # ── RESPOND ──────────────────────────────────────────────
    return settled(fields, result)


def run_pipeline(
    payload: Any,
    *,
    config: LedgerConfig | None = None,
    today: date | None = None,
) -> tuple[TransactionResponse, InstructionLifecycle]:
    """Process *payload* and also return the lifecycle it went through."""
    lifecycle = InstructionLifecycle()
    try:
        response = _run(payload, config or LedgerConfig(), today, lifecycle)
    except Exception:
        log.exception("instruction.unexpected_error", state=str(lifecycle.state))
        response = parse_failure(StatusCode.SY03)

    log.info(
        "instruction.processed",
        type=str(response.type) if response.type else None,
        status=str(response.status),
        status_code=str(response.status_code),
        lifecycle=lifecycle.trail,
    )
    return response, lifecycle


def process_instruction(
    payload: Any,
    *,
    config: LedgerConfig | None = None,
    today: date | None = None,
) -> TransactionResponse:
    """Turn ``{"instruction": ..., "accounts": [...]}`` into a response.

    *today* overrides the current UTC date used to decide whether a
    dated instruction is already due.
    """
    response, _ = run_pipeline(payload, config=config, today=today)
    return response


class InstructionService:
    """Service-layer wrapper that reports pipeline outcomes as ServiceResult.

    Usage::

        svc = InstructionService(settings.ledger)
        result = svc.process({"instruction": "...", "accounts": [...]})
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self._config = config or LedgerConfig()

    @traced
    def process(self, payload: Any, *, today: date | None = None) -> ServiceResult:
        """Run the full pipeline; ``ok`` is True for successful and pending."""
        op = "process_instruction"
        response, lifecycle = run_pipeline(payload, config=self._config, today=today)

        error = None
        if response.status is TransactionStatus.FAILED:
            error = ServiceError(code=str(response.status_code), message=response.status_reason)
        return ServiceResult(
            ok=error is None,
            op=op,
            data=response.model_dump(mode="json"),
            error=error,
            meta={"lifecycle": lifecycle.trail},
        )

    @traced
    def parse(self, instruction: str) -> ServiceResult:
        """Normalize and parse *instruction* without validating or settling."""
        op = "parse_instruction"
        lifecycle = InstructionLifecycle()

        with trace_span("normalize"):
            normalized = normalize(instruction)
        if normalized is None:
            lifecycle.advance(InstructionState.SYNTAX_FAILED)
            return _syntax_error(op, StatusCode.SY03, lifecycle)
        lifecycle.advance(InstructionState.NORMALIZED)

        with trace_span("parse"):
            parsed = parse_normalized(
                normalized,
                instruction,
                min_tokens=self._config.min_instruction_tokens,
            )
        if not parsed.ok or parsed.fields is None:
            lifecycle.advance(InstructionState.SYNTAX_FAILED)
            return _syntax_error(op, parsed.error_code or StatusCode.SY03, lifecycle)
        lifecycle.advance(InstructionState.PARSED)

        return ServiceResult(
            ok=True,
            op=op,
            data={**parsed.fields.model_dump(mode="json"), "tokens": list(normalized.tokens)},
            meta={"lifecycle": lifecycle.trail},
        )

    def codes(self) -> ServiceResult:
        """The status-code taxonomy, with messages for the configured currencies."""
        items = [
            {
                "code": str(code),
                "category": str(category_of(code)),
                "message": status_message(code, currencies=self._config.supported_currencies),
            }
            for code in StatusCode
        ]
        return ServiceResult(ok=True, op="list_codes", data={"items": items, "count": len(items)})


def _syntax_error(op: str, code: StatusCode, lifecycle: InstructionLifecycle) -> ServiceResult:
    response = parse_failure(code)
    return ServiceResult(
        ok=False,
        op=op,
        data={"status_code": str(code)},
        error=ServiceError(code=str(code), message=response.status_reason),
        meta={"lifecycle": lifecycle.trail},
    )
