"""
Region Errors
=============

Exception types raised by region construction and transition waits.

Rules:
    - Timeouts reject the pending wait they belong to, nothing else
    - Cancellation is NOT an error (a cancelled wait never settles)
    - Unknown shape kinds are NOT an error (containment is False)
"""

from typing import List, Optional


class RegionError(Exception):
    """Base class for all regionwatch errors."""
    pass


class InvalidRegionError(RegionError, ValueError):
    """Raised when a composite region is built from invalid members."""
    pass


class RegionTimeoutError(RegionError, TimeoutError):
    """
    Raised when an enter/leave wait exceeds its deadline.

    Attributes:
        timeout: Deadline that was given, in seconds
        elapsed: Seconds elapsed when the deadline was detected
        label: Description of the wait that timed out
    """

    def __init__(
        self,
        timeout: float,
        elapsed: float,
        label: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.elapsed = elapsed
        self.label = label
        what = label or "region wait"
        super().__init__(
            f"{what} timed out after {elapsed:.3f}s (timeout={timeout:.3f}s)"
        )


class RaceFailedError(RegionError):
    """
    Raised when every contender of a race failed.

    Attributes:
        errors: Failures in contender order
    """

    def __init__(self, errors: List[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(f"all {len(self.errors)} contenders failed")
