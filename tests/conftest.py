"""Shared pytest fixtures for payctl tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from payctl.services.telemetry import _active_span, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def accounts() -> list[dict[str, Any]]:
    """Two NGN accounts plus an unrelated USD account."""
    return [
        {"id": "A1", "balance": 1000, "currency": "NGN"},
        {"id": "B2", "balance": 200, "currency": "ngn"},
        {"id": "C3", "balance": 50, "currency": "USD"},
    ]


@pytest.fixture
def accounts_file(tmp_path: Path, accounts: list[dict[str, Any]]) -> Path:
    """The ``accounts`` fixture written to a JSON file."""
    path = tmp_path / "accounts.json"
    path.write_text(json.dumps(accounts), encoding="utf-8")
    return path


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory with no payctl env overrides.

    Keeps config discovery from picking up a ``payctl.toml`` that happens
    to sit above the checkout.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PAYCTL_CONFIG", raising=False)
    for name in ("PAYCTL_VERBOSE", "PAYCTL_QUIET", "PAYCTL_JSON_OUTPUT", "PAYCTL_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / "payctl.toml").write_text("", encoding="utf-8")


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``--verbose`` flips a context var; keep it from leaking between tests."""
    yield
    disable_telemetry()
    _active_span.set(None)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI runs install a stderr handler; drop it once the runner's stream is gone."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pay = logging.getLogger("payctl")
    pay_level = pay.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pay.setLevel(pay_level)
    structlog.reset_defaults()
