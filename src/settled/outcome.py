"""Settled outcomes of a unit of work: Success / Failure.

An Outcome is what a unit of work turns into once it has settled. It holds
exactly one of a value or a failure cause, never both and never neither, and
it never raises on its own: the caller decides whether to re-raise, degrade
to a default, or inspect the cause.

Example:
    ```python
    from settled import Failure, Success, capture

    async def main():
        outcome = await capture(fetch_user, 42)
        match outcome:
            case Success(user):
                print(user.name)
            case Failure(cause):
                print(f'lookup failed: {cause}')
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeGuard

from settled.errors import CancelledError, UnwrapError

__all__ = [
    'Failure',
    'Outcome',
    'Success',
    'is_failure',
    'is_success',
    'partition',
]


@dataclass(slots=True, frozen=True)
class Success[V]:
    """A unit of work that settled with a value.

    The value is always present, including ``None`` for work that returns
    nothing.

    Attributes:
        value: The settled value, unchanged (identity preserved).
    """

    value: V
    __match_args__ = ('value',)

    @property
    def cause(self) -> None:
        """Always None for Success."""
        return None

    def is_success(self) -> bool:
        """Return True, indicating the work settled with a value."""
        return True

    def is_failure(self) -> bool:
        """Return False, indicating the work did not raise."""
        return False

    def is_cancelled(self) -> bool:
        """Return False; a Success was never cancelled."""
        return False

    def map[U](self, f: Callable[[V], U]) -> Success[U]:
        """Transform the value using a function.

        Args:
            f: A callable that takes the value and returns a new value.

        Returns:
            Success[U]: A new Success containing the transformed value.
        """
        return Success(f(self.value))

    def map_cause(self, f: Callable[[BaseException], BaseException]) -> Success[V]:
        """Transform the cause (no-op for Success)."""
        return self

    def unwrap(self) -> V:
        """Return the value."""
        return self.value

    def unwrap_or(self, default: V) -> V:
        """Return the value; the default is unused for Success."""
        return self.value

    def unwrap_or_else(self, f: Callable[[BaseException], V]) -> V:
        """Return the value; f is not called for Success."""
        return self.value

    def expect(self, msg: str) -> V:
        """Return the value; msg is unused for Success."""
        return self.value

    def unwrap_cause(self) -> BaseException:
        """Unwrap the cause (always raises for Success).

        Raises:
            UnwrapError: Always raised for Success instances.
        """
        raise UnwrapError(f'called unwrap_cause() on Success({self.value!r})')

    def __repr__(self) -> str:
        """Return a string representation of the Success instance."""
        return f'Success({self.value!r})'


@dataclass(slots=True, frozen=True)
class Failure:
    """A unit of work that settled by raising.

    Construction failures (the factory itself raised), execution failures
    and cancellations all land here; inspect the cause's type to tell them
    apart where that matters.

    Attributes:
        cause: The exception that was raised, unchanged.
    """

    cause: BaseException
    __match_args__ = ('cause',)

    @property
    def value(self) -> None:
        """Always None for Failure."""
        return None

    def is_success(self) -> bool:
        """Return False, indicating the work did not settle with a value."""
        return False

    def is_failure(self) -> bool:
        """Return True, indicating the work raised."""
        return True

    def is_cancelled(self) -> bool:
        """Return True if the cause is a cancellation.

        Returns:
            bool: True for CancelledError causes, False for ordinary failures.
        """
        return isinstance(self.cause, CancelledError)

    def map[U](self, f: Callable[[Any], U]) -> Failure:
        """Transform the value (no-op for Failure)."""
        return self

    def map_cause(self, f: Callable[[BaseException], BaseException]) -> Failure:
        """Transform the cause using a function.

        Args:
            f: A callable that takes the cause and returns a new exception.

        Returns:
            Failure: A new Failure containing the transformed cause.
        """
        return Failure(f(self.cause))

    def unwrap(self) -> Any:
        """Re-raise the original cause.

        Raises:
            BaseException: Always raises the contained cause.
        """
        raise self.cause

    def unwrap_or[U](self, default: U) -> U:
        """Return the default."""
        return default

    def unwrap_or_else[U](self, f: Callable[[BaseException], U]) -> U:
        """Compute a replacement value from the cause.

        Args:
            f: A callable that takes the cause and returns a value.

        Returns:
            The result of applying f to the cause.
        """
        return f(self.cause)

    def expect(self, msg: str) -> Any:
        """Raise UnwrapError with a custom message, chained from the cause.

        Raises:
            UnwrapError: Always raised for Failure instances.
        """
        raise UnwrapError(f'{msg}: {self.cause}') from self.cause

    def unwrap_cause(self) -> BaseException:
        """Return the cause."""
        return self.cause

    def __repr__(self) -> str:
        """Return a string representation of the Failure instance."""
        return f'Failure({self.cause!r})'


type Outcome[V] = Success[V] | Failure


def is_success[V](o: Outcome[V]) -> TypeGuard[Success[V]]:
    """Type guard for the Success variant."""
    return isinstance(o, Success)


def is_failure[V](o: Outcome[V]) -> TypeGuard[Failure]:
    """Type guard for the Failure variant."""
    return isinstance(o, Failure)


def partition[V](outcomes: Iterable[Outcome[V]]) -> tuple[list[V], list[BaseException]]:
    """Separate outcomes into values and causes, each in input order.

    Args:
        outcomes: An iterable of Outcome instances.

    Returns:
        tuple[list[V], list[BaseException]]: A tuple of (values, causes).
    """
    values: list[V] = []
    causes: list[BaseException] = []
    for o in outcomes:
        if isinstance(o, Success):
            values.append(o.value)
        else:
            causes.append(o.cause)
    return values, causes
