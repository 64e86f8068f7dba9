"""All-or-nothing reduction of per-operation outcomes.

The aggregator is a pure function: it never looks at timing, never logs and
never raises for a failed operand. Failures are data, and the first one in
supplied order wins.

Example:
    ```python
    combined_success(Ok('profile'), Ok('balance'))
    # Ok(value=('profile', 'balance'))

    combined_success(Ok('profile'), Err(ApiError()), Err(Other()))
    # Err(error=ApiError())
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import overload

from fanjoin.result import Err, Ok, Outcome, ensure_outcome

__all__ = ['collect', 'combined_success']


@overload
def combined_success[A, E](a: Outcome[A, E], /) -> Outcome[tuple[A], E]: ...


@overload
def combined_success[A, B, E](a: Outcome[A, E], b: Outcome[B, E], /) -> Outcome[tuple[A, B], E]: ...


@overload
def combined_success[A, B, C, E](
    a: Outcome[A, E],
    b: Outcome[B, E],
    c: Outcome[C, E],
    /,
) -> Outcome[tuple[A, B, C], E]: ...


@overload
def combined_success[A, B, C, D, E](
    a: Outcome[A, E],
    b: Outcome[B, E],
    c: Outcome[C, E],
    d: Outcome[D, E],
    /,
) -> Outcome[tuple[A, B, C, D], E]: ...


@overload
def combined_success[E](*outcomes: Outcome[object, E]) -> Outcome[tuple[object, ...], E]: ...


def combined_success(*outcomes: Outcome[object, object]) -> Outcome[tuple[object, ...], object]:
    """Combine the success values of fixed-position outcomes into one tuple.

    Scans operands left to right. The first Err is returned as-is and later
    operands are not inspected. If every operand is Ok, returns Ok of a tuple
    holding their values in operand order.

    Args:
        *outcomes: One or more Ok/Err values sharing an error type.

    Returns:
        Ok(tuple) if all operands succeeded, otherwise the first Err.

    Raises:
        ValueError: If called with no operands.
        TypeError: If an inspected operand is not Ok or Err.

    Examples:
        >>> combined_success(Ok('A'), Ok('B'), Ok('C'), Ok('D'))
        Ok(value=('A', 'B', 'C', 'D'))
        >>> combined_success(Err('E1'), Err('E2'))
        Err(error='E1')
    """
    if not outcomes:
        msg = 'combined_success() requires at least one outcome'
        raise ValueError(msg)
    return collect(outcomes)


def collect[T, E](outcomes: Iterable[Outcome[T, E]]) -> Outcome[tuple[T, ...], E]:
    """Collect a dynamic-length iterable of outcomes into one outcome.

    Same short-circuit rule as combined_success; the iterable is consumed
    lazily and not advanced past the first Err. An empty iterable gives
    Ok(()).

    Examples:
        >>> collect([Ok(1), Ok(2), Ok(3)])
        Ok(value=(1, 2, 3))
        >>> collect(iter([Ok(1), Err('fail'), Ok(3)]))
        Err(error='fail')
    """
    values: list[T] = []
    for position, outcome in enumerate(outcomes):
        checked = ensure_outcome(outcome, position)
        if isinstance(checked, Err):
            return checked  # type: ignore[return-value]
        values.append(checked.value)  # type: ignore[arg-type]
    return Ok(tuple(values))
