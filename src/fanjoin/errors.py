"""Join error types: dual struct+exception for Outcome and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'DuplicateReport',
    'DuplicateReportError',
    'Timeout',
    'TimeoutError',
]


# --- Contract violations ---


class DuplicateReport(msgspec.Struct, frozen=True, gc=False):
    """A launcher reported more than once - struct variant."""

    index: int
    arity: int

    def to_exception(self) -> DuplicateReportError:
        """Convert to exception for raise-based code."""
        return DuplicateReportError(self.index, self.arity)


class DuplicateReportError(Exception):
    """A launcher reported more than once - exception variant.

    This is a programming error in the launcher: every launcher must call
    its reporter exactly once. The first reported value is kept and the
    join's continuation is never delivered a second time.
    """

    def __init__(self, index: int, arity: int) -> None:
        self.index = index
        self.arity = arity
        super().__init__(f'Launcher {index} of {arity} reported more than once')

    def to_struct(self) -> DuplicateReport:
        """Convert to struct for Outcome-based code."""
        return DuplicateReport(self.index, self.arity)


# --- Waiting ---


class Timeout(msgspec.Struct, frozen=True, gc=False):
    """JoinHandle.wait gave up - struct variant for Outcome[T, Timeout].

    pending is how many launchers had still not reported when the wait ended.
    """

    seconds: float
    operation: str = 'join'
    pending: int = 0

    def to_exception(self) -> TimeoutError:
        """Convert to exception for raise-based code."""
        return TimeoutError(self.seconds, self.operation, pending=self.pending)


class TimeoutError(Exception):  # noqa: A001 - intentionally shadows builtin
    """JoinHandle.wait gave up - exception variant.

    Only the wait stopped. The join itself keeps its slots and still
    delivers the continuation if the outstanding launchers report later.
    """

    def __init__(self, seconds: float, operation: str = 'join', *, pending: int = 0) -> None:
        self.seconds = seconds
        self.operation = operation
        self.pending = pending
        msg = f'{operation}: gave up waiting after {seconds}s'
        if pending:
            msg = f'{msg} ({pending} report(s) outstanding)'
        super().__init__(msg)

    def to_struct(self) -> Timeout:
        """Convert to struct for Outcome-based code."""
        return Timeout(self.seconds, self.operation, self.pending)
