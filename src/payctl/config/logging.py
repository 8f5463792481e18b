"""structlog setup for payctl.

All log output goes to stderr so stdout stays reserved for results:
- console lines (colored only on a TTY) by default
- one JSON object per line with ``--log-json``

structlog events and plain stdlib records share one processor chain, so
third-party log lines come out in the same shape.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "payctl"


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def build_formatter(*, log_json: bool) -> structlog.stdlib.ProcessorFormatter:
    """stdlib formatter that renders records as console text or JSON."""
    final: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        final += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return structlog.stdlib.ProcessorFormatter(foreign_pre_chain=_pre_chain(), processors=final)


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog through stdlib logging and install a stderr handler.

    The ``payctl`` logger runs at DEBUG with *verbose*, WARNING otherwise.
    The root logger stays at WARNING either way.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(log_json=log_json))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
