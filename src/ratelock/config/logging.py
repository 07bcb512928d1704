"""structlog configuration for ratelock.

All modules log through stdlib ``logging.getLogger(__name__)``; structlog's
ProcessorFormatter renders both those records and native structlog events.

Two output modes:
- Human (default): colored console lines on stderr
- JSON (--log-json): one JSON object per line on stderr

Guard and scheduler callbacks run under :func:`element_context`, so every
record emitted while handling one media element carries its ``element``
field without threading it through each call.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import structlog

# Third-party loggers that stay at WARNING even in verbose mode.
_QUIET_LOGGERS = ("sqlalchemy", "pluggy")


def _build_renderer(log_json: bool, stream: TextIO) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog processors and route output to *stream*.

    Args:
        verbose: DEBUG for the ``ratelock`` logger tree; WARNING otherwise.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Destination (defaults to ``sys.stderr`` at call time).

    Calling this repeatedly replaces the root handler instead of stacking.
    """
    out = stream if stream is not None else sys.stderr

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _build_renderer(log_json, out),
        ],
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("ratelock").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def element_context(element_id: str) -> Iterator[None]:
    """Bind ``element=<element_id>`` onto every log record in the block."""
    with structlog.contextvars.bound_contextvars(element=element_id):
        yield
