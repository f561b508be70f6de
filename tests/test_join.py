"""Tests for join() and settle_all()."""

from __future__ import annotations

import inspect

import anyio
import pytest
from work import fail_int, get_int, wait_endlessly_for_int

from settled import CancelToken, OnError, Success, capture, capture_sync, join, settle_all


async def delayed(value: int, seconds: float) -> int:
    await anyio.sleep(seconds)
    return value


async def delayed_failure(message: str, seconds: float) -> int:
    await anyio.sleep(seconds)
    raise ValueError(message)


class TestJoin:
    """Tests for join()."""

    async def test_preserves_call_site_order(self) -> None:
        results = await join(delayed(1, 0.03), delayed(2, 0.0), delayed(3, 0.01))
        assert results == (1, 2, 3)

    async def test_empty(self) -> None:
        assert await join() == ()

    async def test_captured_failures_do_not_raise(self) -> None:
        """Captured failures and cancellations come back as Outcomes."""
        token = CancelToken.cancelled_token()

        output1, output2, output3, output4 = await join(
            get_int(1),
            capture(fail_int, 2),
            capture(wait_endlessly_for_int, 3, token),
            get_int(4),
        )

        assert output1 == 1
        assert output4 == 4
        assert str(output2.cause) == 'Could not get int 2.'
        assert output3.is_cancelled()

    async def test_captured_successes(self) -> None:
        output1, output2, output3, output4 = await join(
            get_int(1),
            capture(get_int, 2),
            capture(get_int, 3),
            get_int(4),
        )

        assert (output1, output4) == (1, 4)
        assert output2 == Success(2)
        assert output3 == Success(3)

    async def test_all_captured_cancellations(self) -> None:
        token = CancelToken.cancelled_token()

        output1, output2, output3, output4 = await join(
            get_int(1),
            capture(wait_endlessly_for_int, 2, token),
            capture(wait_endlessly_for_int, 3, token),
            get_int(4),
        )

        assert output1 == 1
        assert output2.is_failure()
        assert output3.is_failure()
        assert output4 == 4

    async def test_aggregate_lists_only_unwrapped_failures(self) -> None:
        token = CancelToken.cancelled_token()

        with pytest.raises(ExceptionGroup) as exc_info:
            await join(
                fail_int(1),
                capture(wait_endlessly_for_int, 2, token),
                capture(fail_int, 3),
                fail_int(4),
                on_error=OnError.AGGREGATE,
            )

        messages = [str(e) for e in exc_info.value.exceptions]
        assert len(messages) == 2
        assert 'Could not get int 1.' in messages
        assert 'Could not get int 4.' in messages

    async def test_first_raises_lowest_position(self) -> None:
        """FIRST picks by position, not by completion order."""
        with pytest.raises(ValueError, match='slow'):
            await join(delayed_failure('slow', 0.03), delayed_failure('fast', 0.0))

    async def test_every_awaitable_settles_before_raising(self) -> None:
        finished: list[int] = []

        async def record(value: int) -> int:
            await anyio.sleep(0.02)
            finished.append(value)
            return value

        with pytest.raises(ValueError):
            await join(delayed_failure('early', 0.0), record(1), record(2))
        assert sorted(finished) == [1, 2]

    async def test_on_error_accepts_string(self) -> None:
        with pytest.raises(ExceptionGroup):
            await join(fail_int(1), on_error='aggregate')

    async def test_unknown_mode_closes_coroutines(self) -> None:
        first, second = get_int(1), delayed(2, 0.0)
        with pytest.raises(ValueError, match='sometimes'):
            await join(first, second, on_error='sometimes')
        assert inspect.getcoroutinestate(first) == inspect.CORO_CLOSED
        assert inspect.getcoroutinestate(second) == inspect.CORO_CLOSED

    async def test_mixes_sync_captures(self) -> None:
        def synchronously_return(value: int) -> int:
            return value

        def synchronously_throw(value: int) -> int:
            msg = f'Task {value} threw.'
            raise RuntimeError(msg)

        output1, output2, output3 = await join(
            get_int(1),
            capture_sync(synchronously_return, 2),
            capture_sync(synchronously_throw, 3),
        )

        assert output1 == 1
        assert output2 == Success(2)
        assert str(output3.cause) == 'Task 3 threw.'


class TestSettleAll:
    """Tests for settle_all()."""

    async def test_returns_outcomes_in_order(self) -> None:
        outcomes = await settle_all(
            lambda: delayed(1, 0.02),
            lambda: fail_int(2),
            lambda: get_int(3),
        )
        assert outcomes[0] == Success(1)
        assert str(outcomes[1].cause) == 'Could not get int 2.'
        assert outcomes[2] == Success(3)

    async def test_empty(self) -> None:
        assert await settle_all() == []
