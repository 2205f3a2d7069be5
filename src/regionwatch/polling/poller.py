"""
Poller
======

Shared wait protocol behind enter/leave detection.

A pending wait repeatedly evaluates a containment condition and suspends
on a step function between evaluations:

    1. Record start time (when the wait is created)
    2. If the condition holds -> resolve (no suspension before the first check)
    3. Otherwise await the step function
    4. If cancellation was requested -> stop silently
    5. If a timeout was given and has elapsed -> reject with RegionTimeoutError
    6. Repeat from 2

Design Rules:
    - Strict alternation: check, suspend, check, ...
    - Cancellation is cooperative and only observed after a step completes
    - A cancelled wait NEVER settles. Awaiting it after cancel() blocks forever.
    - Timeouts are measured on a monotonic clock and only checked after a step

Example:
    wait = region.entered_region(player, timeout=5.0)
    try:
        await wait
    except RegionTimeoutError:
        logger.info("Player never arrived")
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Coroutine, Optional, Set

import numpy as np

from regionwatch.config import settings
from regionwatch.errors import RegionTimeoutError
from regionwatch.models.geometry import as_point
from regionwatch.polling.steps import StepFunction


logger = logging.getLogger(__name__)


Clock = Callable[[], float]

# Strong references to driver tasks so they are not garbage collected mid-poll
_driver_tasks: Set[asyncio.Task] = set()


class PollerMetrics:
    """Counters for poller observability."""

    __slots__ = (
        "started",
        "resolved",
        "timed_out",
        "cancelled",
        "active",
    )

    def __init__(self) -> None:
        self.started: int = 0
        self.resolved: int = 0
        self.timed_out: int = 0
        self.cancelled: int = 0
        self.active: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "started": self.started,
            "resolved": self.resolved,
            "timed_out": self.timed_out,
            "cancelled": self.cancelled,
            "active": self.active,
        }


poller_metrics = PollerMetrics()


class CancellationToken:
    """
    Advisory cancellation flag shared between a wait and its poll loop.

    Attributes:
        cancelled: Whether cancel() has been called
    """

    def __init__(self) -> None:
        self._cancelled: bool = False
        self._event: asyncio.Event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        self._event.set()

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        await self._event.wait()


def resolve_timeout(timeout: Optional[float]) -> Optional[float]:
    """
    Apply the configured default and validate a timeout.

    Args:
        timeout: Seconds, or None to use settings.polling.default_timeout_seconds

    Returns:
        Effective timeout (None = wait forever)
    """
    if timeout is None:
        timeout = settings.polling.default_timeout_seconds
    if timeout is not None and timeout < 0:
        raise ValueError("timeout must be >= 0")
    return timeout


def sample_position(tracked: Any) -> np.ndarray:
    """Read the current position of a tracked point source."""
    return as_point(tracked.position)


async def poll_until(
    condition: Callable[[], bool],
    step: StepFunction,
    token: CancellationToken,
    timeout: Optional[float] = None,
    started_at: Optional[float] = None,
    clock: Clock = time.monotonic,
    label: Optional[str] = None,
) -> bool:
    """
    Poll `condition` until it holds.

    Args:
        condition: Zero-argument predicate evaluated once per iteration
        step: Step function awaited between evaluations
        token: Cancellation token checked after each step
        timeout: Seconds allowed since `started_at` (None = no limit)
        started_at: Start time on `clock` (defaults to now)
        clock: Monotonic time source
        label: Description used in logs and errors

    Returns:
        True once the condition held, False if the wait was abandoned

    Raises:
        RegionTimeoutError: If `timeout` elapsed before the condition held
    """
    if started_at is None:
        started_at = clock()

    poller_metrics.started += 1
    poller_metrics.active += 1
    iterations = 0
    try:
        while not condition():
            await step()
            iterations += 1

            if token.cancelled:
                poller_metrics.cancelled += 1
                logger.debug(f"{label or 'wait'} abandoned after {iterations} steps")
                return False

            elapsed = clock() - started_at
            if timeout is not None and elapsed > timeout:
                poller_metrics.timed_out += 1
                logger.warning(
                    f"{label or 'wait'} timed out after {elapsed:.3f}s "
                    f"({iterations} steps)"
                )
                raise RegionTimeoutError(timeout, elapsed, label)

        poller_metrics.resolved += 1
        logger.debug(f"{label or 'wait'} satisfied after {iterations} steps")
        return True
    finally:
        poller_metrics.active -= 1


class PendingWait:
    """
    One in-flight enter/leave operation.

    Awaiting a PendingWait resolves to None when the awaited transition is
    observed, or raises when it fails (e.g. RegionTimeoutError).

    Must be created while an asyncio event loop is running.

    Attributes:
        label: Description of the wait (for logs and errors)
        timeout: Effective timeout in seconds, or None
        started_at: Creation time on `clock`
        token: Cancellation token observed by the driver

    Warning:
        cancel() abandons the wait. It never resolves nor rejects afterwards,
        so do not await a cancelled wait expecting it to finish.
    """

    def __init__(
        self,
        label: str,
        timeout: Optional[float] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """
        Initialize a pending wait.

        Args:
            label: Description of the wait
            timeout: Effective timeout in seconds (None = no limit)
            clock: Monotonic time source
        """
        self.label = label
        self.timeout = timeout
        self.clock = clock
        self.started_at: float = clock()
        self.token = CancellationToken()
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._future.add_done_callback(self._on_future_done)
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def resolved(cls, label: str) -> "PendingWait":
        """Build a wait that is already satisfied."""
        wait = cls(label)
        wait._future.set_result(None)
        return wait

    @classmethod
    def rejected(cls, label: str, error: BaseException) -> "PendingWait":
        """Build a wait that has already failed with `error`."""
        wait = cls(label)
        wait._future.set_exception(error)
        return wait

    @property
    def future(self) -> asyncio.Future:
        """Future settled by the driver."""
        return self._future

    @property
    def done(self) -> bool:
        """Whether the wait resolved or rejected."""
        return self._future.done()

    @property
    def cancelled(self) -> bool:
        """Whether the wait was abandoned."""
        return self.token.cancelled

    @property
    def elapsed(self) -> float:
        """Seconds since the wait was created."""
        return self.clock() - self.started_at

    def start(self, driver: Coroutine[Any, Any, bool]) -> "PendingWait":
        """
        Schedule the coroutine that decides this wait's outcome.

        The driver returns True to resolve, False to abandon, or raises
        to reject.
        """
        self._task = asyncio.ensure_future(self._drive(driver))
        _driver_tasks.add(self._task)
        self._task.add_done_callback(_driver_tasks.discard)
        return self

    def cancel(self) -> bool:
        """
        Abandon the wait at its next suspension boundary.

        Returns:
            True if cancellation was requested, False if already settled
            or already cancelled
        """
        if self._future.done() or self.token.cancelled:
            return False
        logger.debug(f"Cancelling {self.label}")
        self.token.cancel()
        return True

    async def _drive(self, driver: Awaitable[bool]) -> None:
        try:
            satisfied = await driver
        except Exception as e:
            if not self._future.done() and not self.token.cancelled:
                self._future.set_exception(e)
            return

        # A driver may finish after cancel() was accepted; the wait stays unsettled
        if satisfied and not self._future.done() and not self.token.cancelled:
            self._future.set_result(None)

    def _on_future_done(self, future: asyncio.Future) -> None:
        # An awaiting task was cancelled (e.g. asyncio.wait_for); stop polling too
        if future.cancelled():
            self.token.cancel()

    def __await__(self):
        return self._future.__await__()

    def __repr__(self) -> str:
        if self.token.cancelled:
            status = "cancelled"
        elif self._future.done():
            status = "done"
        else:
            status = "pending"
        return f"PendingWait({self.label!r}, {status})"


def watch_transition(
    predicate: Callable[[np.ndarray], bool],
    tracked: Any,
    want_inside: bool,
    step: StepFunction,
    timeout: Optional[float] = None,
    label: str = "region wait",
) -> PendingWait:
    """
    Start a pending wait for a containment predicate to reach `want_inside`.

    Args:
        predicate: Containment test taking a world-space point
        tracked: Point source exposing `position`, sampled once per check
        want_inside: True to wait for entry, False to wait for exit
        step: Step function awaited between checks
        timeout: Seconds, or None for the configured default
        label: Description used in logs and errors

    Returns:
        The started PendingWait
    """
    wait = PendingWait(label, resolve_timeout(timeout))

    def condition() -> bool:
        return predicate(sample_position(tracked)) == want_inside

    logger.debug(f"Starting {label} (timeout={wait.timeout})")
    return wait.start(
        poll_until(
            condition,
            step,
            wait.token,
            timeout=wait.timeout,
            started_at=wait.started_at,
            clock=wait.clock,
            label=label,
        )
    )
