"""Multi-way join: await several units of work together, positionally.

``join`` lets every awaitable settle before deciding what to raise, so
failures wrapped by ``capture`` (which never raise) come back as Outcomes in
their slot while unwrapped failures are re-raised, first-only or aggregated.

Example:
    ```python
    count, profile = await join(
        get_count(),
        capture(fetch_profile, user_id),
        on_error=OnError.AGGREGATE,
    )
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import anyio

from settled.capture import capture
from settled.outcome import Outcome

__all__ = [
    'OnError',
    'join',
    'settle_all',
]


class OnError(Enum):
    """What join() raises when some awaitables failed."""

    FIRST = 'first'
    AGGREGATE = 'aggregate'


_PENDING: Any = object()


async def join(
    *awaitables: Awaitable[Any],
    on_error: OnError | str = OnError.FIRST,
) -> tuple[Any, ...]:
    """Await all awaitables concurrently and return their values in order.

    Every awaitable runs to completion even if another one fails; the
    result tuple follows call-site order, not completion order.

    Args:
        *awaitables: Coroutines, tasks or any other awaitables.
        on_error: FIRST re-raises the failure at the lowest position;
            AGGREGATE raises one ExceptionGroup holding every failure in
            positional order.

    Returns:
        Tuple of settled values, one per awaitable.

    Raises:
        Exception: The first failure (OnError.FIRST).
        ExceptionGroup: All failures (OnError.AGGREGATE).
        ValueError: on_error names no OnError member. Coroutines passed in
            are closed unawaited.
    """
    try:
        mode = OnError(on_error.lower()) if isinstance(on_error, str) else on_error
    except ValueError:
        for aw in awaitables:
            if inspect.iscoroutine(aw):
                aw.close()
        raise
    values: list[Any] = [_PENDING] * len(awaitables)
    errors: list[Exception | None] = [None] * len(awaitables)

    async def _slot(index: int, aw: Awaitable[Any]) -> None:
        try:
            values[index] = await aw
        except Exception as exc:
            errors[index] = exc

    async with anyio.create_task_group() as tg:
        for index, aw in enumerate(awaitables):
            tg.start_soon(_slot, index, aw)

    failures = [e for e in errors if e is not None]
    if failures:
        if mode is OnError.AGGREGATE:
            msg = f'{len(failures)} of {len(awaitables)} awaitables failed'
            raise ExceptionGroup(msg, failures)
        raise failures[0]
    return tuple(values)


async def settle_all[V](*factories: Callable[[], Awaitable[V]]) -> list[Outcome[V]]:
    """Capture every factory concurrently and return all Outcomes in order.

    Never raises for failures of the work itself.

    Args:
        *factories: Zero-argument callables returning awaitables.

    Returns:
        List of Outcomes, one per factory, in argument order.
    """
    return list(await join(*(capture(factory) for factory in factories)))
