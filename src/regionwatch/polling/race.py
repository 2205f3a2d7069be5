"""
Race Combinator
===============

First-of-N over cancellable waits.

A contender is anything exposing:
    - future: asyncio.Future settled when the contender finishes
    - cancel(): request cooperative cancellation

Rules:
    - The first contender to SUCCEED wins, and every other contender is cancelled
    - Failed contenders are recorded and the race goes on
    - If every contender fails -> RaceFailedError (errors in contender order)
    - If the optional token is cancelled first, all contenders are cancelled
      and the race returns None
"""

import asyncio
import logging
from typing import Dict, Optional, Protocol, Sequence

from regionwatch.errors import RaceFailedError
from regionwatch.polling.poller import CancellationToken


logger = logging.getLogger(__name__)


class Contender(Protocol):
    """Cancellable unit of work taking part in a race."""

    @property
    def future(self) -> asyncio.Future: ...

    def cancel(self) -> bool: ...


def _cancel_all(contenders: Sequence[Contender], keep: Optional[int] = None) -> None:
    for index, contender in enumerate(contenders):
        if index != keep:
            contender.cancel()


async def race(
    contenders: Sequence[Contender],
    token: Optional[CancellationToken] = None,
) -> Optional[int]:
    """
    Wait for the first contender to succeed.

    Args:
        contenders: Contenders, in priority order for simultaneous finishes
        token: Optional token abandoning the whole race

    Returns:
        Index of the winning contender, or None if the race was abandoned

    Raises:
        ValueError: If no contenders are given
        RaceFailedError: If every contender failed
    """
    contenders = list(contenders)
    if not contenders:
        raise ValueError("race needs at least one contender")

    pending: Dict[asyncio.Future, int] = {
        contender.future: index for index, contender in enumerate(contenders)
    }
    errors: Dict[int, BaseException] = {}
    stop = asyncio.ensure_future(token.wait()) if token is not None else None

    try:
        while pending:
            watched = set(pending)
            if stop is not None:
                watched.add(stop)

            done, _ = await asyncio.wait(watched, return_when=asyncio.FIRST_COMPLETED)

            if stop is not None and stop in done:
                logger.debug(f"Race abandoned with {len(pending)} contenders pending")
                _cancel_all(contenders)
                return None

            winner: Optional[int] = None
            for future in sorted(done, key=lambda f: pending[f]):
                index = pending.pop(future)
                if future.cancelled():
                    errors[index] = asyncio.CancelledError()
                elif future.exception() is not None:
                    errors[index] = future.exception()
                elif winner is None:
                    winner = index

            if winner is not None:
                _cancel_all(contenders, keep=winner)
                return winner

        raise RaceFailedError([errors[index] for index in sorted(errors)])
    finally:
        if stop is not None and not stop.done():
            stop.cancel()
