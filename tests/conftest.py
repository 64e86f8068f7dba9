"""Pytest configuration and shared fixtures for fanjoin tests."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

import pytest

from fanjoin import BackgroundContext, InlineContext

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from fanjoin import Launcher


@pytest.fixture
def inline() -> InlineContext:
    """Context that delivers on the reporting thread."""
    return InlineContext()


@pytest.fixture
def background() -> Generator[BackgroundContext]:
    """A private thread-pool context, shut down after the test."""
    ctx = BackgroundContext(max_workers=2, name='fanjoin-test')
    yield ctx
    ctx.shutdown(wait=True)


@pytest.fixture
def delayed() -> Generator[Callable[[Any, float], Launcher[Any]]]:
    """Factory for launchers that report value from a timer thread after delay seconds."""
    timers: list[threading.Timer] = []

    def make(value: Any, delay: float) -> Launcher[Any]:
        def launcher(report: Callable[[Any], None]) -> None:
            timer = threading.Timer(delay, report, args=(value,))
            timers.append(timer)
            timer.start()

        return launcher

    yield make
    for timer in timers:
        timer.cancel()


@pytest.fixture
def never() -> Launcher[Any]:
    """A launcher that never reports."""

    def launcher(report: Callable[[Any], None]) -> None:
        return None

    return launcher
