"""structlog configuration for warden.

All diagnostics go to stderr so plugin output on stdout stays pipeable.

- Human (default): ``HH:MM:SS [level] [plugin] message``, colored on a tty
- JSON (--log-json): one object per line with ``plugin`` as a field
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

WARDEN_LOGGER = "warden"

# Third-party loggers capped at WARNING even in verbose mode.
NOISY_LOGGERS: tuple[str, ...] = ("watchdog",)


def warden_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Level of the ``warden`` logger: verbose beats quiet."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def prefix_plugin(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Fold the ``plugin`` field into the message for the console renderer.

    Messages from warden itself carry no prefix.
    """
    plugin = event_dict.pop("plugin", None)
    if plugin and plugin != WARDEN_LOGGER:
        event_dict["event"] = f"[{plugin}] {event_dict.get('event', '')}"
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Calling it again replaces the handler instead of adding another.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso" if log_json else "%H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    render_chain: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        render_chain.append(structlog.processors.JSONRenderer())
    else:
        render_chain += [
            prefix_plugin,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processors=render_chain)
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(WARDEN_LOGGER).setLevel(warden_level(verbose=verbose, quiet=quiet))
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
