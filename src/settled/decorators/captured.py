"""@captured and @captured_sync decorators."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

import wrapt

from settled.capture import capture, capture_sync
from settled.outcome import Outcome

__all__ = ['captured', 'captured_sync']

P = ParamSpec('P')
T = TypeVar('T')


def captured[**P, T](func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[Outcome[T]]]:
    """Decorator that makes an async function return an Outcome.

    Every call goes through capture(), so exceptions raised by the function
    (including while building its coroutine) come back as Failure.

    Example:
        ```python
        @captured
        async def fetch(url: str) -> bytes:
            return await http_get(url)

        outcome = await fetch('https://example.com')
        ```
    """

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Outcome[T]:
        return await capture(lambda: wrapped(*args, **kwargs))

    return wrapper(func)


def captured_sync[**P, T](func: Callable[P, T]) -> Callable[..., Awaitable[Outcome[T]]]:
    """Decorator that runs a blocking function on a worker thread.

    The decorated function becomes awaitable and returns an Outcome. A
    ``token=`` keyword argument is consumed by the decorator and passed to
    capture_sync() as the cancellation token.

    Example:
        ```python
        @captured_sync
        def checksum(path: str) -> str:
            return hashlib.sha256(Path(path).read_bytes()).hexdigest()

        outcome = await checksum('data.bin', token=token)
        ```
    """

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Outcome[T]:
        token = kwargs.pop('token', None)
        return await capture_sync(lambda: wrapped(*args, **kwargs), token=token)

    return wrapper(func)
