"""
Shape Kinds
===========

Closed set of primitive shapes a region can take.

Rules:
    - Selected once, at region construction
    - Plain strings equal to a member value are accepted as that member
    - Anything else is an unknown kind and never contains a point
"""

from enum import Enum
from typing import Optional, Union


class ShapeKind(str, Enum):
    """
    Geometry variant governing the containment test.

    Attributes:
        SPHERE: Ball centered on the transform position
        CYLINDER: Cylinder whose axis is the local Y axis
        BOX: Oriented box centered on the transform position
    """

    SPHERE = "sphere"
    CYLINDER = "cylinder"
    BOX = "box"


def coerce_shape_kind(value: Union["ShapeKind", str, None]) -> Optional[ShapeKind]:
    """
    Map a value onto a ShapeKind.

    Args:
        value: ShapeKind member or its string value (case-insensitive)

    Returns:
        Matching ShapeKind, or None for unknown values
    """
    if isinstance(value, ShapeKind):
        return value
    if isinstance(value, str):
        try:
            return ShapeKind(value.lower())
        except ValueError:
            return None
    return None
