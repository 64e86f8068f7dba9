"""
fanjoin.runtime: the concurrency-bearing half of fanjoin.

Provides the join coordinator (combine, combine_all, combine_outcomes),
execution contexts for continuation delivery, and process-level
configuration and logging.
"""

from fanjoin.runtime._config import RuntimeConfig, get_config, init
from fanjoin.runtime._logging import add_log_hook, clear_log_hooks, configure_logging, get_logger, remove_log_hook
from fanjoin.runtime.contexts import BackgroundContext, ExecutionContext, InlineContext, LoopContext, default_context
from fanjoin.runtime.join import (
    JoinHandle,
    JoinState,
    Launcher,
    Reporter,
    combine,
    combine_all,
    combine_outcomes,
)

__all__ = [
    # Contexts
    'BackgroundContext',
    'ExecutionContext',
    'InlineContext',
    # Join
    'JoinHandle',
    'JoinState',
    'Launcher',
    'LoopContext',
    'Reporter',
    # Config
    'RuntimeConfig',
    # Logging
    'add_log_hook',
    'clear_log_hooks',
    'combine',
    'combine_all',
    'combine_outcomes',
    'configure_logging',
    'default_context',
    'get_config',
    'get_logger',
    'init',
    'remove_log_hook',
]
