"""
regionwatch
===========

Point-in-region tests and awaitable enter/leave detection for 3D regions.

Game and simulation scripts use it to react to objects entering or
leaving zones without subscribing to a per-frame event stream.

Components:
    - models: Shape kinds, points and transforms
    - geometry: Shape predicates and region variants (primitive, union, negation)
    - polling: Pending waits, step functions and the race combinator

Example:
    from regionwatch import PrimitiveRegion, ShapeKind, Transform

    zone = PrimitiveRegion(Transform.identity(), (10, 10, 10), ShapeKind.SPHERE)
    await zone.entered_region(player, timeout=10.0)
    await zone.left_region(player)
"""

__version__ = "0.1.0"

from regionwatch.errors import (
    InvalidRegionError,
    RaceFailedError,
    RegionError,
    RegionTimeoutError,
)
from regionwatch.models import ShapeKind, Transform, Vector3
from regionwatch.geometry import (
    NegationRegion,
    PrimitiveRegion,
    Region,
    UnionRegion,
    is_in_shape,
)
from regionwatch.polling import PendingWait, TickSignal, fixed_delay

__all__ = [
    "__version__",
    # Errors
    "RegionError",
    "RegionTimeoutError",
    "RaceFailedError",
    "InvalidRegionError",
    # Models
    "ShapeKind",
    "Transform",
    "Vector3",
    # Geometry
    "is_in_shape",
    "Region",
    "PrimitiveRegion",
    "UnionRegion",
    "NegationRegion",
    # Polling
    "PendingWait",
    "TickSignal",
    "fixed_delay",
]
