"""structlog setup for the parambind CLI.

Library modules only call ``logging.getLogger(__name__)``; nothing in the
library installs handlers. The CLI calls :func:`configure_logging` once
per invocation, after which stdlib records are rendered by structlog
(console lines, or JSON with ``--log-json``) on stderr.

Values passed through ``extra=`` become event keys, so the binder's
recovery record carries ``field``, ``key``, ``default_mode`` and ``code``
as separate JSON fields.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog
from structlog.types import Processor

PACKAGE_LOGGER = "parambind"


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool, stream: TextIO) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route parambind's log records through structlog.

    Args:
        verbose: Let ``parambind.*`` DEBUG records through (plan
            compilation, default-mode recoveries, preload counts).
        log_json: Render JSON lines instead of console lines.
        stream: Destination, ``sys.stderr`` by default.
    """
    stream = stream or sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json, stream),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
