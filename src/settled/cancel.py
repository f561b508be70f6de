"""Cooperative cancellation: CancelToken and the cancellable delay()."""

from __future__ import annotations

import threading

import aiologic
import anyio

from settled.errors import CancelledError

__all__ = [
    'CancelToken',
    'delay',
]


class CancelToken:
    """Passable handle that signals a cooperative cancellation request.

    A token is signaled at most once; the first reason wins. Signaling is
    thread-safe, so a token can be cancelled from a worker thread or from
    another event loop, and awaited or polled from anywhere.

    Cancellation is only ever observed at suspension points (``await
    token.wait()``, ``delay()``, the dispatch point of ``capture_sync``) or
    where the work polls ``raise_if_cancelled()``. It surfaces as a
    ``CancelledError``, an ordinary exception.

    Example:
        ```python
        token = CancelToken()

        async def poll(url: str) -> bytes:
            while True:
                if body := await fetch(url):
                    return body
                await delay(1.0, token)

        outcome = await capture(poll, url)
        ```
    """

    __slots__ = ('_cancelled', '_event', '_lock', '_reason')

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None
        self._lock = threading.Lock()
        self._event: aiologic.Event = aiologic.Event()

    @classmethod
    def cancelled_token(cls, reason: str | None = None) -> CancelToken:
        """Create a token that is already signaled."""
        token = cls()
        token.cancel(reason)
        return token

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation. Later calls are no-ops.

        Args:
            reason: Optional reason carried by the resulting CancelledError.
        """
        with self._lock:
            if self._cancelled:
                return
            self._reason = reason
            self._cancelled = True
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._cancelled

    @property
    def reason(self) -> str | None:
        """The reason passed to the first cancel() call."""
        return self._reason

    def to_error(self) -> CancelledError:
        """Build the CancelledError describing this token's cancellation."""
        return CancelledError(self._reason)

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if the token has been signaled.

        Meant for synchronous work running on a worker thread, which has no
        suspension points of its own.

        Raises:
            CancelledError: If cancel() has been called.
        """
        if self._cancelled:
            raise self.to_error()

    async def wait(self) -> None:
        """Suspend until the token is signaled."""
        await self._event

    def __repr__(self) -> str:
        state = f'cancelled, reason={self._reason!r}' if self._cancelled else 'pending'
        return f'CancelToken({state})'


async def delay(seconds: float | None = None, token: CancelToken | None = None) -> None:
    """Sleep, giving up early with CancelledError if the token fires.

    Args:
        seconds: How long to sleep. None sleeps until the token fires.
        token: Optional cancellation token.

    Raises:
        CancelledError: If the token is, or becomes, signaled before the
            sleep ends.
    """
    if token is None:
        if seconds is None:
            await anyio.sleep_forever()
        else:
            await anyio.sleep(seconds)
        return

    token.raise_if_cancelled()
    with anyio.move_on_after(seconds):
        await token.wait()
    token.raise_if_cancelled()
