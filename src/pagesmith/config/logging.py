"""structlog configuration for pagesmith.

Everything goes to stderr so stdout stays clean for results (and for
``pagesmith -q generate | xargs ...`` pipelines). Services log through
``structlog.get_logger``; the plugin package logs through stdlib
``logging``. Both end up on one handler formatted by structlog's
``ProcessorFormatter``:

- console renderer by default, colored only on a TTY
- one JSON object per line with ``--log-json``; parser crash
  tracebacks are rendered as structured dicts
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "pagesmith"

# Third-party loggers capped at WARNING even under --verbose.
_NOISY_LIBRARIES = ("markdown_it", "pluggy")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _render_chain(log_json: bool, stream: TextIO) -> list[structlog.types.Processor]:
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=stream.isatty())]


def build_handler(*, log_json: bool = False, stream: TextIO | None = None) -> logging.Handler:
    """Return a stream handler rendering both structlog and stdlib records."""
    stream = stream or sys.stderr
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_render_chain(log_json, stream),
        ],
    )
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all pagesmith logging through a single stderr handler.

    Args:
        verbose: ``pagesmith.*`` loggers emit DEBUG; otherwise WARNING and up.
        log_json: Render JSON lines instead of the console format.
    """
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(build_handler(log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
