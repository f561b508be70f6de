"""Error types: dual struct+exception for Outcome and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'Cancelled',
    'CancelledError',
    'Unwrap',
    'UnwrapError',
]


# --- Cancellation Errors ---


class Cancelled(msgspec.Struct, frozen=True, gc=False):
    """Work was cancelled - struct variant for serializable failure records."""

    reason: str | None = None

    def to_exception(self) -> CancelledError:
        """Convert to exception for raise-based code."""
        return CancelledError(self.reason)


class CancelledError(Exception):
    """Work was cancelled - exception variant.

    An ``Exception`` subclass, unlike ``asyncio.CancelledError``: capture()
    stores it as an ordinary Failure cause.
    """

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason or 'Operation cancelled')

    def to_struct(self) -> Cancelled:
        """Convert to struct for Outcome-based code."""
        return Cancelled(self.reason)


# --- Unwrap Errors ---


class Unwrap(msgspec.Struct, frozen=True, gc=False):
    """An outcome was unwrapped into the wrong variant - struct variant."""

    message: str

    def to_exception(self) -> UnwrapError:
        """Convert to exception for raise-based code."""
        return UnwrapError(self.message)


class UnwrapError(Exception):
    """An outcome was unwrapped into the wrong variant - exception variant."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_struct(self) -> Unwrap:
        """Convert to struct for Outcome-based code."""
        return Unwrap(self.message)
