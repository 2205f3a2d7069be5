"""
Test Configuration
==================

Pytest fixtures and test helpers for regionwatch.
"""

import asyncio

import numpy as np
import pytest

from regionwatch.polling.poller import poller_metrics


class MovingPoint:
    """Point source moved explicitly by the test."""

    def __init__(self, position):
        self.position = np.array(position, dtype=np.float64)

    def move(self, delta):
        self.position = self.position + np.asarray(delta, dtype=np.float64)


class TickedPoint:
    """Point source moving at constant velocity, one step per tick."""

    def __init__(self, ticker, start, velocity):
        self.ticker = ticker
        self.start = np.array(start, dtype=np.float64)
        self.velocity = np.array(velocity, dtype=np.float64)

    @property
    def position(self):
        return self.start + self.velocity * self.ticker.tick_count


async def yield_loop(times=20):
    """Let the event loop run a few iterations."""
    for _ in range(times):
        await asyncio.sleep(0)


async def drive_ticks(ticker, wait, max_ticks=100):
    """Tick until `wait` settles or `max_ticks` is reached."""
    await yield_loop()
    while not wait.done and ticker.tick_count < max_ticks:
        ticker.tick()
        await yield_loop()
    return ticker.tick_count


async def settle_pollers(baseline, loops=200):
    """Yield until no more than `baseline` pollers are active."""
    for _ in range(loops):
        if poller_metrics.active <= baseline:
            return
        await asyncio.sleep(0)


@pytest.fixture
def moving_point():
    """Factory for explicitly moved point sources."""
    return MovingPoint


@pytest.fixture
def ticked_point():
    """Factory for tick-driven point sources."""
    return TickedPoint


@pytest.fixture
def instant_step():
    """Step function that only yields to the event loop."""

    async def step():
        await asyncio.sleep(0)

    return step


@pytest.fixture
def drive():
    """Tick driver: drive(ticker, wait, max_ticks=100) -> ticks emitted."""
    return drive_ticks


@pytest.fixture
def settle():
    """Poller drain: settle(baseline) waits for active pollers to drop."""
    return settle_pollers


@pytest.fixture
def spin():
    """Event loop yielder: spin(times=20)."""
    return yield_loop
