"""
Shape Predicates
================

Pure point-in-shape tests: (point, transform, extents, kind) -> bool.

No state, no side effects. Boundaries are inclusive.

Containment Rules:
    Sphere:   |point - position| <= extents.x
    Cylinder: local = object_space(point) / (1, extents.y / 2, 1)
              |local.x| <= extents.x / 2 and |local.z| <= extents.x / 2
              and |local.y| <= 1
    Box:      local = object_space(point) / (extents / 2)
              |local.x|, |local.y|, |local.z| <= 1
    Unknown:  False

Note:
    The cylinder test compares the radial components as a square
    cross-section. It is kept as-is for compatibility with existing
    region layouts.
"""

import logging
from typing import Callable, Dict, Union

import numpy as np

from regionwatch.models.geometry import PointLike, Transform, as_point
from regionwatch.models.shape_kind import ShapeKind, coerce_shape_kind


logger = logging.getLogger(__name__)


ShapePredicate = Callable[[np.ndarray, Transform, np.ndarray], bool]


def _in_sphere(point: np.ndarray, transform: Transform, extents: np.ndarray) -> bool:
    return bool(np.linalg.norm(point - transform.position) <= extents[0])


def _in_cylinder(point: np.ndarray, transform: Transform, extents: np.ndarray) -> bool:
    with np.errstate(divide="ignore", invalid="ignore"):
        local = transform.point_to_object_space(point) / np.array([1.0, extents[1] / 2, 1.0])
    radius = extents[0] / 2
    return bool(
        abs(local[0]) <= radius
        and abs(local[2]) <= radius
        and abs(local[1]) <= 1.0
    )


def _in_box(point: np.ndarray, transform: Transform, extents: np.ndarray) -> bool:
    with np.errstate(divide="ignore", invalid="ignore"):
        local = transform.point_to_object_space(point) / (extents / 2)
    return bool(np.all(np.abs(local) <= 1.0))


SHAPE_PREDICATES: Dict[ShapeKind, ShapePredicate] = {
    ShapeKind.SPHERE: _in_sphere,
    ShapeKind.CYLINDER: _in_cylinder,
    ShapeKind.BOX: _in_box,
}


def is_in_shape(
    point: PointLike,
    transform: Transform,
    extents: PointLike,
    kind: Union[ShapeKind, str],
) -> bool:
    """
    Check if a point lies inside a primitive shape.

    Args:
        point: World-space point
        transform: Frame of the shape
        extents: Normalized size of the shape
        kind: Shape kind (unknown kinds contain nothing)

    Returns:
        True if the point is inside or on the boundary
    """
    predicate = SHAPE_PREDICATES.get(coerce_shape_kind(kind))
    if predicate is None:
        logger.debug(f"Unknown shape kind {kind!r}, treating point as outside")
        return False
    return predicate(as_point(point), transform, as_point(extents))


def normalize_extents(extents: PointLike, kind: Union[ShapeKind, str]) -> np.ndarray:
    """
    Normalize raw extents so the size cannot extend beyond the shape.

    Rules:
        Sphere:   all components = max(x, y, z)
        Cylinder: x = z = max(x, z), y (axis length) untouched
        Box:      unchanged (also for unknown kinds)

    Args:
        extents: Raw size vector
        kind: Shape kind

    Returns:
        New read-only array of shape (3,)

    Raises:
        ValueError: If any component is negative
    """
    size = as_point(extents)
    if np.any(size < 0):
        raise ValueError(f"extents must be non-negative, got {size.tolist()}")

    shape = coerce_shape_kind(kind)
    if shape is ShapeKind.SPHERE:
        size = np.full(3, size.max())
    elif shape is ShapeKind.CYLINDER:
        radial = max(size[0], size[2])
        size = np.array([radial, size[1], radial])

    size.flags.writeable = False
    return size
