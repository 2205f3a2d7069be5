"""
Data Models
===========

Value types for regionwatch.

This module re-exports all data models for convenient access.

Models:
    Shape:
        - ShapeKind: Enum of primitive shapes (SPHERE, CYLINDER, BOX)

    Geometry:
        - Vector3: 3D coordinate
        - Transform: Position + orientation frame
"""

from regionwatch.models.shape_kind import ShapeKind, coerce_shape_kind
from regionwatch.models.geometry import Transform, Vector3, as_point

__all__ = [
    # Shape
    "ShapeKind",
    "coerce_shape_kind",
    # Geometry
    "Vector3",
    "Transform",
    "as_point",
]
