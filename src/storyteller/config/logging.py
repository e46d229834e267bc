"""structlog setup for the ``storyteller`` logger tree.

The engine is embedded in a host application, so configuration only
touches the ``storyteller`` logger: one handler is attached there and
propagation to the root logger is switched off. The host's own logging
setup is left alone.

Two output modes:
- Human (default): console lines, colored when the stream is a TTY
- JSON (log_json=True): one JSON object per line

Modules keep logging through ``logging.getLogger(__name__)``; records
pass through the same structlog processor chain as structlog loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "storyteller"
_HANDLER_NAME = "storyteller-structlog"

# Dependencies that log at DEBUG while resolving relative dates.
_QUIET_LOGGERS: tuple[str, ...] = ("dateparser", "tzlocal")


def _renderer(log_json: bool, stream: TextIO) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Route ``storyteller`` log records through structlog.

    Calling again replaces the handler installed by the previous call.

    Args:
        verbose: Emit DEBUG records. When False, only WARNING and above.
        log_json: Render JSON lines instead of console lines.
        stream: Output stream; stderr at call time when omitted.

    Returns:
        The installed handler.
    """
    out = stream if stream is not None else sys.stderr

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json, out),
            ],
        )
    )

    story_logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in story_logger.handlers if h.get_name() == _HANDLER_NAME]:
        story_logger.removeHandler(existing)
    story_logger.addHandler(handler)
    story_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    story_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
