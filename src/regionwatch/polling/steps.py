"""
Step Functions
==============

Suspension primitives that set the cadence of enter/leave polling.

A step function is any zero-argument callable returning an awaitable.
The poller awaits it once between two containment checks.

Provided:
    - fixed_delay: Sleep a fixed number of seconds (the default cadence)
    - TickSignal: Resume on the next externally driven tick (e.g. per frame)

Example:
    ticker = TickSignal()
    region = PrimitiveRegion(frame, size, ShapeKind.BOX, step_function=ticker.wait)

    # In the simulation loop
    while running:
        advance_world()
        ticker.tick()
        await asyncio.sleep(0)
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional


logger = logging.getLogger(__name__)


StepFunction = Callable[[], Awaitable[Any]]


def fixed_delay(seconds: float) -> StepFunction:
    """
    Build a step function that sleeps for a fixed duration.

    Args:
        seconds: Delay per step. Must be > 0.

    Returns:
        Async callable suitable as a region step function
    """
    if seconds <= 0:
        raise ValueError("seconds must be > 0")

    async def step() -> None:
        await asyncio.sleep(seconds)

    step.__qualname__ = f"fixed_delay({seconds})"
    return step


class TickSignal:
    """
    Step function driven by an external tick.

    Every call to wait() suspends until the next tick(). All waiters
    suspended at tick time are released together.

    Attributes:
        tick_count: Number of ticks emitted so far
        waiting: Whether at least one waiter is suspended
    """

    def __init__(self) -> None:
        """Initialize a tick signal with no waiters."""
        self._waiter: Optional[asyncio.Future] = None
        self._tick_count: int = 0

    @property
    def tick_count(self) -> int:
        """Number of ticks emitted so far."""
        return self._tick_count

    @property
    def waiting(self) -> bool:
        """Whether a waiter is currently suspended."""
        return self._waiter is not None and not self._waiter.done()

    async def wait(self) -> int:
        """
        Suspend until the next tick.

        Returns:
            The tick count at wake-up
        """
        if self._waiter is None or self._waiter.done():
            self._waiter = asyncio.get_running_loop().create_future()
        # Shield so one cancelled waiter doesn't cancel the shared future
        return await asyncio.shield(self._waiter)

    def tick(self) -> int:
        """
        Emit a tick, releasing every suspended waiter.

        Returns:
            The new tick count
        """
        self._tick_count += 1
        waiter, self._waiter = self._waiter, None
        if waiter is not None and not waiter.done():
            waiter.set_result(self._tick_count)
        return self._tick_count
