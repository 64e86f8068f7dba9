"""Runtime configuration: RuntimeConfig and initialization."""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass

import psutil

from fanjoin.runtime._logging import configure_logging

__all__ = [
    'RuntimeConfig',
    'get_config',
    'init',
]

_WORKERS_ENV = 'FANJOIN_BACKGROUND_WORKERS'
_MIN_WORKERS = 1
_MAX_WORKERS = 256


@dataclass(frozen=True)
class RuntimeConfig:
    """Process-level settings for fanjoin.

    None of these are read by a combine call directly. They size the shared
    background context and set up logging.

    Attributes:
        log_level: Logging level (e.g. "DEBUG"). None leaves logging alone.
        json_logs: Render logs as JSON (True) or console text (False).
        background_workers: Thread count of the default background context.
    """

    log_level: str | None = None
    json_logs: bool = True
    background_workers: int = 4


_config: RuntimeConfig | None = None


def _clamp(workers: int) -> int:
    return max(_MIN_WORKERS, min(_MAX_WORKERS, workers))


def _detect_container_cpu_limit() -> int | None:
    """Read a cgroup v2 CPU quota, if the process runs under one."""
    try:
        with pathlib.Path('/sys/fs/cgroup/cpu.max').open() as f:
            content = f.read().strip()
    except (FileNotFoundError, PermissionError):
        return None
    try:
        quota, period = content.split()
        if quota == 'max':
            return None
        return max(1, int(quota) // int(period))
    except ValueError:
        return None


def _detect_background_workers() -> int:
    """Pick a default worker count.

    Priority:
    1. FANJOIN_BACKGROUND_WORKERS environment variable
    2. Logical CPU count, capped by any container CPU quota
    3. 4
    """
    raw = os.environ.get(_WORKERS_ENV, '').strip()
    if raw:
        try:
            return _clamp(int(raw))
        except ValueError:
            logging.warning("Invalid %s value '%s', detecting from CPUs", _WORKERS_ENV, raw)

    cores = psutil.cpu_count(logical=True) or 4
    limit = _detect_container_cpu_limit()
    if limit is not None:
        cores = min(cores, limit)
    return _clamp(cores)


def init(
    log_level: str | None = None,
    *,
    json_logs: bool = True,
    background_workers: int | None = None,
) -> RuntimeConfig:
    """Initialize fanjoin's process-level configuration.

    Calling init() is optional; combine() works without it.

    Args:
        log_level: Logging level ("DEBUG", "INFO", ...). None = leave logging alone.
        json_logs: JSON (True) or console (False) log rendering.
        background_workers: Threads for the default background context.
            Auto-detected if None.

    Returns:
        The RuntimeConfig that was set.

    Example:
        ```python
        from fanjoin.runtime import init

        init(log_level='DEBUG', background_workers=8)
        ```
    """
    global _config  # noqa: PLW0603

    workers = _detect_background_workers() if background_workers is None else _clamp(background_workers)
    _config = RuntimeConfig(
        log_level=log_level,
        json_logs=json_logs,
        background_workers=workers,
    )

    if log_level is not None:
        configure_logging(log_level, json_output=json_logs)

    return _config


def get_config() -> RuntimeConfig:
    """Return the configuration set by init().

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _config is None:
        msg = 'fanjoin runtime not initialized. Call fanjoin.runtime.init() first.'
        raise RuntimeError(msg)
    return _config


def _resolved_background_workers() -> int:
    if _config is not None:
        return _config.background_workers
    return _detect_background_workers()
