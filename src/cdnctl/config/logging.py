"""structlog setup for cdnctl.

Everything logs to stderr through one root handler so stdout stays free
for command output.  ``--log-json`` switches the renderer to JSON lines;
otherwise a console renderer is used (colored only on a TTY).

Stdlib loggers (httpx, our own ``logging.getLogger`` users) are routed
through the same processor chain via ``ProcessorFormatter``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.types import Processor

REDACTED = "***"

# Matched against lower-cased event keys.
SECRET_KEYS = frozenset({"token", "api_token", "api_key", "password", "secret_key", "fastly-key"})

# Third-party loggers that chat at INFO on every request.
QUIET_LOGGERS = ("httpx", "httpcore")


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential values so tokens never reach a log line."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]


def _build_handler(shared: list[Processor], *, log_json: bool) -> logging.Handler:
    renderer: Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set levels.

    ``verbose`` lowers the ``cdnctl`` logger to DEBUG; everything else
    stays at WARNING.  Safe to call repeatedly: the root handler is
    replaced, never stacked.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers = [_build_handler(shared, log_json=log_json)]
    root.setLevel(logging.WARNING)

    logging.getLogger("cdnctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
