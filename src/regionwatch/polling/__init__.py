"""
Polling Module
==============

Wait protocol used by enter/leave detection.

This module provides:
    - PendingWait: Awaitable, cancellable handle for one in-flight wait
    - poll_until: The check / suspend / repeat loop
    - race: First-of-N combinator that cancels the losers
    - fixed_delay, TickSignal: Step functions setting the poll cadence
    - poller_metrics: Counters (including currently active pollers)
"""

from regionwatch.polling.steps import StepFunction, TickSignal, fixed_delay
from regionwatch.polling.poller import (
    CancellationToken,
    PendingWait,
    PollerMetrics,
    poll_until,
    poller_metrics,
    resolve_timeout,
    sample_position,
    watch_transition,
)
from regionwatch.polling.race import race


__all__ = [
    "StepFunction",
    "TickSignal",
    "fixed_delay",
    "CancellationToken",
    "PendingWait",
    "PollerMetrics",
    "poll_until",
    "poller_metrics",
    "resolve_timeout",
    "sample_position",
    "watch_transition",
    "race",
]
