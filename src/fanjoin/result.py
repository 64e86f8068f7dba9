"""Outcome type: Ok[T] | Err[E], the per-operation result the aggregator reduces."""

from __future__ import annotations

from collections.abc import Callable
from typing import NoReturn, TypeIs

import msgspec

__all__ = ['Err', 'Ok', 'Outcome', 'ensure_outcome']


class Ok[T](msgspec.Struct, frozen=True, gc=False):
    """Success variant of Outcome carrying a value of type T.

    Examples:
        >>> Ok(42).unwrap()
        42
        >>> Ok(2).map(lambda x: x * 2)
        Ok(value=4)
    """

    value: T

    def is_ok(self) -> TypeIs[Ok[T]]:
        """Return True; narrows the outcome to Ok[T]."""
        return True

    def is_err(self) -> TypeIs[Err[object]]:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:  # noqa: ARG002
        return self.value

    def expect(self, _msg: str) -> T:
        return self.value

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply f to the carried value."""
        return Ok(f(self.value))

    def map_err[F](self, _f: Callable[[object], F]) -> Ok[T]:
        return self

    def and_then[U, E](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Chain an outcome-returning step onto the carried value."""
        return f(self.value)

    def zip[U, E](self, other: Ok[U] | Err[E]) -> Ok[tuple[T, U]] | Err[E]:
        """Pair two outcomes, keeping the first failure.

        Both Ok gives Ok((self.value, other.value)); otherwise other.
        """
        if isinstance(other, Ok):
            return Ok((self.value, other.value))
        return other

    def ok(self) -> T:
        """Return the success payload."""
        return self.value

    def err(self) -> None:
        return None


class Err[E](msgspec.Struct, frozen=True, gc=False):
    """Failure variant of Outcome carrying an error of type E.

    Examples:
        >>> Err('boom').is_err()
        True
        >>> Err('boom').unwrap_or(0)
        0
    """

    error: E

    def is_ok(self) -> TypeIs[Ok[object]]:
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        """Return True; narrows the outcome to Err[E]."""
        return True

    def unwrap(self) -> NoReturn:
        """Raise, since a failure has no success value.

        Raises:
            RuntimeError: Always.
        """
        msg = f'Called unwrap on Err: {self.error!r}'
        raise RuntimeError(msg)

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_or_else[T](self, f: Callable[[], T]) -> T:
        return f()

    def expect(self, msg: str) -> NoReturn:
        """Raise with a caller-supplied message.

        Raises:
            RuntimeError: Always.
        """
        full = f'{msg}: {self.error!r}'
        raise RuntimeError(full)

    def map[T, U](self, _f: Callable[[T], U]) -> Err[E]:
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Apply f to the carried error."""
        return Err(f(self.error))

    def and_then[T, U](self, _f: Callable[[T], Ok[U] | Err[E]]) -> Err[E]:
        return self

    def zip[U](self, _other: Ok[U] | Err[E]) -> Err[E]:
        # The left operand fails first; the right one is never inspected.
        return self

    def ok(self) -> None:
        return None

    def err(self) -> E:
        """Return the failure payload."""
        return self.error


type Outcome[T, E = Exception] = Ok[T] | Err[E]


def ensure_outcome(value: object, position: int) -> Ok[object] | Err[object]:
    """Return value unchanged if it is an Outcome, else raise TypeError.

    Args:
        value: Candidate outcome.
        position: Zero-based operand index, used in the error message.
    """
    if isinstance(value, Ok | Err):
        return value
    msg = f'operand {position} is not an Ok/Err outcome: {value!r}'
    raise TypeError(msg)
