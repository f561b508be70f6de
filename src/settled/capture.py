"""Outcome capture: turn a unit of work that may raise into a settled Outcome.

``capture`` awaits an async unit of work; ``capture_sync`` lifts a blocking
function onto a worker thread first. Both always return an Outcome for
failures raised by the work, including construction failures and
cancellation.

Example:
    ```python
    from settled import capture, capture_sync

    async def main():
        user = await capture(fetch_user, 42)
        digest = await capture_sync(hash_file, path)
        if user.is_failure():
            log.warning('no user', cause=user.cause)
    ```
"""

from __future__ import annotations

import asyncio
import functools
import math
from collections.abc import Awaitable, Callable
from typing import Any

import anyio
from anyio.lowlevel import RunVar

from settled._config import get_config, is_initialized
from settled._logging import emit, get_logger
from settled.cancel import CancelToken
from settled.errors import CancelledError
from settled.outcome import Failure, Outcome, Success

__all__ = [
    'capture',
    'capture_sync',
]

logger = get_logger(__name__)


def _describe(work: Callable[..., Any]) -> str:
    return getattr(work, '__qualname__', None) or repr(work)


def _caller_cancelled() -> bool:
    """Whether the task running capture() is itself being cancelled.

    A native cancellation is only a property of the awaited work when
    nothing enclosing the caller asked for it.
    """
    if anyio.current_effective_deadline() == -math.inf:
        return True
    if anyio.get_cancelled_exc_class() is asyncio.CancelledError:
        task = asyncio.current_task()
        return task is not None and task.cancelling() > 0
    return False


async def capture[V](work: Callable[..., Awaitable[V]], *args: Any) -> Outcome[V]:
    """Run a unit of work to completion and return its Outcome.

    ``work(*args)`` is called exactly once, synchronously, so a factory that
    raises before producing an awaitable is captured the same way as work
    that raises while running.

    Native scheduler cancellation raised by the work itself (for example by
    awaiting a task somebody else cancelled) becomes a
    ``Failure(CancelledError)`` chained from the original exception. When the
    caller's own scope is being cancelled the cancellation keeps
    propagating, since it does not belong to the work.

    Args:
        work: Callable returning an awaitable (coroutine function, function
            returning a Task or Future, ...).
        *args: Positional arguments for work.

    Returns:
        Success(value) if the work settled with a value, Failure(cause) if
        it raised.

    Example:
        ```python
        async def get_int(i: int) -> int:
            return i

        assert await capture(get_int, 2) == Success(2)
        ```
    """
    try:
        value = await work(*args)
    except Exception as exc:
        emit(logger, 'debug', 'outcome.failure_captured', work=_describe(work), error=repr(exc))
        return Failure(exc)
    except anyio.get_cancelled_exc_class() as exc:
        if _caller_cancelled():
            raise
        error = CancelledError('Awaited work was cancelled')
        error.__cause__ = exc
        emit(logger, 'debug', 'outcome.failure_captured', work=_describe(work), error=repr(error))
        return Failure(error)
    return Success(value)


_worker_limiter_var: RunVar[anyio.CapacityLimiter] = RunVar('settled_worker_limiter')


def _worker_limiter() -> anyio.CapacityLimiter | None:
    """Return this event loop's settled limiter, sized by init(max_workers=...).

    The loop's default thread limiter is shared with every other
    ``to_thread.run_sync`` caller and is never touched.
    """
    if not is_initialized():
        return None
    max_workers = get_config().max_workers
    if max_workers is None:
        return None
    limiter = _worker_limiter_var.get(None)
    if limiter is None:
        limiter = anyio.CapacityLimiter(max_workers)
        _worker_limiter_var.set(limiter)
    elif limiter.total_tokens != max_workers:
        limiter.total_tokens = max_workers
    return limiter


async def capture_sync[V](
    fn: Callable[..., V],
    *args: Any,
    token: CancelToken | None = None,
    limiter: anyio.CapacityLimiter | None = None,
) -> Outcome[V]:
    """Run a blocking function on a worker thread and return its Outcome.

    The event loop stays free while ``fn`` runs. If ``token`` fires first the
    caller stops waiting and gets ``Failure(CancelledError)``; the thread is
    abandoned rather than killed, so ``fn`` should poll
    ``token.raise_if_cancelled()`` if it must stop early. A token that is
    already signaled yields the failure without dispatching ``fn`` at all.

    Args:
        fn: Synchronous callable, may raise.
        *args: Positional arguments for fn.
        token: Optional cancellation token.
        limiter: Capacity limiter for worker threads. Defaults to a per-loop
            limiter with ``init(max_workers=...)`` tokens, or to the event
            loop's default limiter when settled is not initialized.

    Returns:
        Success(value) if fn returned, Failure(cause) if it raised or the
        token fired.

    Example:
        ```python
        def parse(path: str) -> dict:
            with open(path) as f:
                return json.load(f)

        outcome = await capture_sync(parse, 'config.json')
        config = outcome.unwrap_or({})
        ```
    """
    if token is not None and token.cancelled:
        return Failure(token.to_error())

    if limiter is None:
        limiter = _worker_limiter()

    emit(logger, 'debug', 'worker.dispatch', work=_describe(fn))
    if token is None:
        return await capture(functools.partial(anyio.to_thread.run_sync, fn, *args, limiter=limiter))

    outcome: Outcome[V] | None = None

    async with anyio.create_task_group() as tg:

        async def _dispatch() -> None:
            nonlocal outcome
            outcome = await capture(
                functools.partial(anyio.to_thread.run_sync, fn, *args, abandon_on_cancel=True, limiter=limiter)
            )
            tg.cancel_scope.cancel()

        async def _watch() -> None:
            await token.wait()
            tg.cancel_scope.cancel()

        tg.start_soon(_watch)
        tg.start_soon(_dispatch)

    if outcome is None:
        emit(logger, 'debug', 'worker.abandoned', work=_describe(fn), reason=token.reason)
        return Failure(token.to_error())
    return outcome
