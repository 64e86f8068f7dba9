"""Join coordinator: launch N callback-style operations, deliver all results once.

Each launcher is a callable that takes a single-fire reporter and arranges
for it to be called exactly once with the operation's result, from any
thread or loop. The coordinator invokes every launcher in order, waits for
all reporters to fire, then submits the continuation to an execution
context with the results in launcher order, whatever order they arrived in.

Example:
    ```python
    def load_profile(report):
        api.get('/profile', on_done=report)

    def load_balance(report):
        api.get('/balance', on_done=report)

    combine(
        load_profile,
        load_balance,
        completion=lambda profile, balance: render(profile, balance),
    )
    ```
"""

from __future__ import annotations

import builtins
import functools
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, overload

import aiologic
import anyio

from fanjoin.aggregate import collect
from fanjoin.errors import DuplicateReportError, TimeoutError
from fanjoin.runtime._logging import get_logger
from fanjoin.runtime.contexts import default_context

if TYPE_CHECKING:
    from fanjoin.result import Outcome
    from fanjoin.runtime.contexts import ExecutionContext

__all__ = [
    'JoinHandle',
    'JoinState',
    'Launcher',
    'Reporter',
    'combine',
    'combine_all',
    'combine_outcomes',
]

logger = get_logger(__name__)

type Reporter[T] = Callable[[T], None]
type Launcher[T] = Callable[[Reporter[T]], None]

_UNSET: Any = object()


class JoinState:
    """Per-call bookkeeping: one slot per launcher and an outstanding count.

    All mutation happens under one aiologic.Lock, so reports may arrive
    concurrently from threads and event loops. Exactly one report, the one
    that brings the outstanding count to zero, closes the join.
    """

    __slots__ = ('_lock', '_remaining', '_slots', 'arity')

    def __init__(self, arity: int) -> None:
        self.arity = arity
        self._slots: list[Any] = [_UNSET] * arity
        self._remaining = arity
        self._lock = aiologic.Lock()

    @property
    def remaining(self) -> int:
        return self._remaining

    def report(self, index: int, value: Any) -> bool:
        """Store value in slot index and count it down.

        Returns:
            True only for the report that closed the join.

        Raises:
            DuplicateReportError: If slot index was already reported.
        """
        with self._lock:
            if self._slots[index] is not _UNSET:
                raise DuplicateReportError(index, self.arity)
            self._slots[index] = value
            self._remaining -= 1
            return self._remaining == 0

    def values(self) -> tuple[Any, ...]:
        """Return all slot values in launcher order.

        Raises:
            RuntimeError: If some launcher has not reported yet.
        """
        with self._lock:
            if self._remaining:
                msg = f'Join still waiting on {self._remaining} of {self.arity} reports'
                raise RuntimeError(msg)
            return tuple(self._slots)


class JoinHandle[T]:
    """Observer for one combine call.

    The handle cannot deliver early or cancel anything; it only reports
    progress and lets code wait, blocking or async, for the continuation
    to have run.

    Attributes:
        _state: The call's JoinState.
        _delivered: Set once the continuation has returned or raised.
        _values: The joined values, once the join has closed.
    """

    __slots__ = ('_delivered', '_state', '_values')

    def __init__(self, state: JoinState) -> None:
        self._state = state
        self._delivered = aiologic.Event()
        self._values: T | None = None

    @property
    def arity(self) -> int:
        return self._state.arity

    @property
    def pending(self) -> int:
        """Number of launchers that have not reported yet."""
        return self._state.remaining

    def done(self) -> bool:
        """True once the continuation has run."""
        return self._delivered.is_set()

    def values(self) -> T:
        """Return the joined values without blocking.

        Raises:
            RuntimeError: If the continuation has not run yet.
        """
        if not self.done():
            msg = 'Join not yet delivered. Use wait() or await the handle first.'
            raise RuntimeError(msg)
        return self._values  # type: ignore[return-value]

    def wait(self, timeout: float | None = None) -> T:
        """Block the calling thread until the continuation has run.

        Do not call this on the thread or loop the continuation is delivered
        to; it would wait on itself.

        Raises:
            TimeoutError: If timeout seconds pass first. The join carries on.
        """
        if not self._delivered.wait(timeout):
            raise TimeoutError(timeout or 0.0, pending=self.pending)
        return self._values  # type: ignore[return-value]

    async def wait_async(self, timeout: float | None = None) -> T:
        """Await until the continuation has run.

        Raises:
            TimeoutError: If timeout seconds pass first. The join carries on.
        """
        if timeout is None:
            await self._delivered
            return self._values  # type: ignore[return-value]
        try:
            with anyio.fail_after(timeout):
                await self._delivered
        except builtins.TimeoutError as exc:
            raise TimeoutError(timeout, pending=self.pending) from exc
        return self._values  # type: ignore[return-value]

    def __await__(self) -> Any:
        return self.wait_async().__await__()

    def __repr__(self) -> str:
        state = 'delivered' if self.done() else f'pending={self.pending}'
        return f'<JoinHandle arity={self.arity} {state}>'

    def _close(self, values: T) -> None:
        self._values = values

    def _deliver(self, continuation: Callable[[T], object], values: T) -> None:
        try:
            continuation(values)
        except Exception:
            logger.exception('join.continuation_failed', arity=self.arity)
            raise
        finally:
            self._delivered.set()


def _reporter(state: JoinState, index: int, on_close: Callable[[], None]) -> Reporter[Any]:
    def report(value: Any) -> None:
        try:
            closed = state.report(index, value)
        except DuplicateReportError as exc:
            logger.error('join.duplicate_report', index=exc.index, arity=exc.arity)
            raise
        if closed:
            on_close()

    return report


def _start[T](
    launchers: Iterable[Launcher[Any]],
    continuation: Callable[[tuple[Any, ...]], object],
    context: ExecutionContext | None,
) -> JoinHandle[T]:
    launcher_list = list(launchers)
    if not launcher_list:
        msg = 'combine() requires at least one launcher'
        raise ValueError(msg)

    target = default_context() if context is None else context
    state = JoinState(len(launcher_list))
    handle: JoinHandle[Any] = JoinHandle(state)

    def close() -> None:
        values = state.values()
        handle._close(values)
        logger.debug('join.closed', arity=state.arity)
        target.submit(functools.partial(handle._deliver, continuation, values))

    logger.debug('join.started', arity=state.arity, context=repr(target))
    for index, launcher in enumerate(launcher_list):
        launcher(_reporter(state, index, close))
    return handle


@overload
def combine[A, B](
    a: Launcher[A],
    b: Launcher[B],
    /,
    *,
    completion: Callable[[A, B], object],
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[A, B]]: ...


@overload
def combine[A, B, C](
    a: Launcher[A],
    b: Launcher[B],
    c: Launcher[C],
    /,
    *,
    completion: Callable[[A, B, C], object],
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[A, B, C]]: ...


@overload
def combine[A, B, C, D](
    a: Launcher[A],
    b: Launcher[B],
    c: Launcher[C],
    d: Launcher[D],
    /,
    *,
    completion: Callable[[A, B, C, D], object],
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[A, B, C, D]]: ...


@overload
def combine(
    *launchers: Launcher[Any],
    completion: Callable[..., object],
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[Any, ...]]: ...


def combine(
    *launchers: Launcher[Any],
    completion: Callable[..., object],
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[Any, ...]]:
    """Run launchers independently; call completion once with all results.

    Every launcher is invoked exactly once, synchronously and in order.
    completion(*values) is submitted to context after the last reporter
    fires, with values in launcher order.

    Args:
        *launchers: Callables taking a single-fire reporter.
        completion: Receives one positional argument per launcher.
        context: Where completion runs. None means default_context().

    Returns:
        JoinHandle for observing or waiting on the call.

    Raises:
        ValueError: If no launchers are given.

    Note:
        A launcher that never reports stalls this call forever. A launcher
        that reports twice gets DuplicateReportError raised from its second
        report; completion still runs only once.
    """
    return _start(launchers, lambda values: completion(*values), context)


def combine_all[T](
    launchers: Iterable[Launcher[T]],
    completion: Callable[[tuple[T, ...]], object],
    *,
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[T, ...]]:
    """Dynamic-length combine: completion receives one tuple of all results.

    Example:
        ```python
        combine_all(
            [partial(fetch, url) for url in urls],
            lambda pages: index(pages),
        )
        ```
    """
    return _start(launchers, completion, context)


def combine_outcomes[E](
    *launchers: Launcher[Outcome[Any, E]],
    completion: Callable[[Outcome[tuple[Any, ...], E]], object],
    context: ExecutionContext | None = None,
) -> JoinHandle[tuple[Outcome[Any, E], ...]]:
    """Combine Outcome-reporting launchers and aggregate their results.

    completion receives Ok(tuple of values) if every launcher reported Ok,
    otherwise the first Err in launcher order. The handle still exposes the
    raw per-launcher outcomes.
    """
    return _start(launchers, lambda values: completion(collect(values)), context)
