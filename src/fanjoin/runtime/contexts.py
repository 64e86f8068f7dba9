"""Execution contexts: where a join's continuation runs.

A context is anything with ``submit(fn)`` that runs ``fn`` later, or right
away. The coordinator never schedules the launched operations themselves;
contexts only decide where the final continuation is delivered.

Contexts:
    - BackgroundContext: a thread pool (the default, for user-initiated work)
    - InlineContext: the thread whose report closed the join
    - LoopContext: an asyncio event loop, for code that must run on the loop
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from types import TracebackType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import aiologic

from fanjoin.runtime._config import _resolved_background_workers

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'BackgroundContext',
    'ExecutionContext',
    'InlineContext',
    'LoopContext',
    'default_context',
]


@runtime_checkable
class ExecutionContext(Protocol):
    """Protocol for continuation delivery targets."""

    def submit(self, fn: Callable[[], object]) -> None:
        """Run fn exactly once, now or later, somewhere.

        Args:
            fn: Zero-argument callable to run.
        """
        ...


class BackgroundContext:
    """Runs continuations on a lazily created thread pool.

    Attributes:
        _max_workers: Pool size; resolved from the runtime config when None.
        _name: Thread name prefix.
        _executor: The pool, created on first submit().
    """

    __slots__ = ('_executor', '_lock', '_max_workers', '_name')

    def __init__(self, max_workers: int | None = None, *, name: str = 'fanjoin') -> None:
        self._max_workers = max_workers
        self._name = name
        self._executor: ThreadPoolExecutor | None = None
        self._lock = aiologic.Lock()

    @property
    def max_workers(self) -> int:
        if self._max_workers is None:
            return _resolved_background_workers()
        return self._max_workers

    def submit(self, fn: Callable[[], object]) -> None:
        # Lookup and hand-off share the lock so shutdown() cannot retire the
        # pool in between.
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=self._name,
                )
            self._executor.submit(fn)

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop the pool; a later submit() starts a fresh one.

        Args:
            wait: Block until queued continuations have run.
        """
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> BackgroundContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)

    def __repr__(self) -> str:
        return f'BackgroundContext(max_workers={self._max_workers!r}, name={self._name!r})'


class InlineContext:
    """Runs continuations synchronously on the reporting thread.

    If every launcher reports synchronously, the continuation runs before
    combine() returns.
    """

    __slots__ = ()

    def submit(self, fn: Callable[[], object]) -> None:
        fn()

    def __repr__(self) -> str:
        return 'InlineContext()'


class LoopContext:
    """Hands continuations to an asyncio event loop.

    Safe to submit from any thread. With loop=None the running loop is
    captured at construction, so build it from inside the loop.
    """

    __slots__ = ('_loop',)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def submit(self, fn: Callable[[], object]) -> None:
        self._loop.call_soon_threadsafe(fn)

    def __repr__(self) -> str:
        return f'LoopContext(loop={self._loop!r})'


_default: BackgroundContext | None = None
_default_lock = aiologic.Lock()


def default_context() -> BackgroundContext:
    """Return the shared background context used when context=None."""
    global _default  # noqa: PLW0603

    if _default is not None:
        return _default
    with _default_lock:
        if _default is None:
            _default = BackgroundContext(name='fanjoin-default')
        return _default
