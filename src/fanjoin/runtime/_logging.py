"""Structured logging for the join runtime.

Coordinator loggers wrap stdlib loggers, so an application that never
configures logging sees nothing: debug events (``join.started``,
``join.closed``) are dropped by level, and the error events
(``join.duplicate_report``, ``join.continuation_failed``) follow stdlib's
own fallback to stderr. configure_logging() installs structlog's
ProcessorFormatter on the root logger to render everything as JSON or
console text. Hooks observe each event dict that passes the level filter.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
]

type LogHook = Callable[[dict[str, Any]], None]

_log_hooks: list[LogHook] = []


def _notify_hooks(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor handing a copy of each event to the registered hooks."""
    for hook in list(_log_hooks):
        try:
            hook(event_dict.copy())
        except Exception:  # noqa: BLE001
            sys.stderr.write(f'fanjoin: log hook {hook!r} failed\n')
    return event_dict


def _enrichers() -> list[Any]:
    """Processors that run for fanjoin events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _notify_hooks,
    ]


def _event_chain() -> list[Any]:
    """Full chain for fanjoin's own loggers, ending in the stdlib hand-off."""
    return [
        structlog.stdlib.filter_by_level,
        *_enrichers(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def configure_logging(level: str = 'INFO', *, json_output: bool = True) -> None:
    """Render join events and other stdlib records through one stderr handler.

    Replaces the root logger's handlers. Called by init() when a log level
    is given; applications with their own logging setup can skip it and
    attach a structlog ProcessorFormatter themselves.

    Args:
        level: Root logging level ("DEBUG" shows join.started/join.closed).
        json_output: JSON lines if True, coloured console text otherwise.
    """
    structlog.configure(
        processors=_event_chain(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_enrichers(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger over the stdlib logger called name.

    The processor chain is bound here rather than taken from structlog's
    global configuration, so events obey stdlib levels whether or not
    configure_logging() has run.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_event_chain(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def add_log_hook(hook: LogHook) -> None:
    """Register a hook receiving each event, e.g. to count join.duplicate_report."""
    _log_hooks.append(hook)


def remove_log_hook(hook: LogHook) -> None:
    """Unregister a hook; unknown hooks are ignored."""
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    _log_hooks.clear()
