"""Tests for the throttle primitive."""

import asyncio

from span_rules.throttle import Throttle


async def test_first_call_runs_immediately() -> None:
    """Calls outside a throttle window run synchronously."""
    calls: list[int] = []
    throttle = Throttle(func=calls.append, interval=0.05)

    throttle(1)

    assert calls == [1]
    assert not throttle.pending


async def test_burst_collapses_to_trailing_call() -> None:
    """Calls inside the window collapse into one call with the last arguments."""
    calls: list[int] = []
    throttle = Throttle(func=calls.append, interval=0.05)

    for value in range(4):
        throttle(value)

    assert calls == [0]
    assert throttle.pending
    await asyncio.sleep(0.1)
    assert calls == [0, 3]


async def test_cancel_drops_trailing_call() -> None:
    """Cancelled trailing calls never run."""
    calls: list[int] = []
    throttle = Throttle(func=calls.append, interval=0.05)

    throttle(1)
    throttle(2)
    throttle.cancel()
    await asyncio.sleep(0.1)

    assert calls == [1]


async def test_calls_after_trailing_call_are_throttled_again() -> None:
    """A call right after a trailing call waits for the next window."""
    calls: list[int] = []
    throttle = Throttle(func=calls.append, interval=0.2)

    throttle(1)
    throttle(2)
    await asyncio.sleep(0.25)
    throttle(3)

    assert calls == [1, 2]
    assert throttle.pending
    await asyncio.sleep(0.3)
    assert calls == [1, 2, 3]
