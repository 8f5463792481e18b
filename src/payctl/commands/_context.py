"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns logging/telemetry setup and result emission,
which is where instruction outcomes become exit codes:

* successful / pending  → stdout, exit 0
* failed (rejected)     → stderr, exit 1
* internal error        → stderr, exit 3, fixed SY03 payload
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from payctl.config.logging import configure_logging
from payctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from payctl.config.settings import PaySettings
    from payctl.services.instruction import InstructionService
    from payctl.services.result import ServiceResult

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_INTERNAL = 3


class AppContext:
    """Shared state flowing through Click's command hierarchy."""

    def __init__(self, settings: PaySettings) -> None:
        self.settings = settings
        self._service: InstructionService | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from payctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def service(self) -> InstructionService:
        """Instruction service bound to the configured ledger section."""
        if self._service is None:
            from payctl.services.instruction import InstructionService

            self._service = InstructionService(self.settings.ledger)
        return self._service

    def emit(self, result: ServiceResult, *, failure_exit: int = EXIT_REJECTED) -> None:
        """Write *result* and exit non-zero when it is a failure."""
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            return
        click.echo(output, err=True)
        raise SystemExit(failure_exit)

    def emit_internal_error(self, op: str) -> None:
        """Emit the fixed fallback payload for an unexpected failure."""
        from payctl.domain.responses import internal_failure
        from payctl.services.result import ServiceError, ServiceResult

        response = internal_failure()
        result = ServiceResult(
            ok=False,
            op=op,
            data=response.model_dump(mode="json"),
            error=ServiceError(code=str(response.status_code), message=response.status_reason),
        )
        self.emit(result, failure_exit=EXIT_INTERNAL)
