"""fanjoin: fan out callback-style operations, join their results once.

Flat imports (preferred):
    from fanjoin import combine, combine_outcomes, combined_success, Ok, Err

Submodule imports:
    from fanjoin.result import Ok, Err, Outcome
    from fanjoin.aggregate import combined_success, collect
    from fanjoin.runtime import combine, InlineContext, init
"""

# Outcome
from fanjoin.result import Err, Ok, Outcome

# Aggregation
from fanjoin.aggregate import collect, combined_success

# Errors
from fanjoin.errors import DuplicateReport, DuplicateReportError, Timeout, TimeoutError

# Runtime
from fanjoin.runtime import (
    BackgroundContext,
    ExecutionContext,
    InlineContext,
    JoinHandle,
    Launcher,
    LoopContext,
    Reporter,
    RuntimeConfig,
    combine,
    combine_all,
    combine_outcomes,
    default_context,
    get_config,
    init,
)

__all__ = [
    'BackgroundContext',
    'DuplicateReport',
    'DuplicateReportError',
    'Err',
    'ExecutionContext',
    'InlineContext',
    'JoinHandle',
    'Launcher',
    'LoopContext',
    'Ok',
    'Outcome',
    'Reporter',
    'RuntimeConfig',
    'Timeout',
    'TimeoutError',
    'collect',
    'combine',
    'combine_all',
    'combine_outcomes',
    'combined_success',
    'default_context',
    'get_config',
    'init',
]
