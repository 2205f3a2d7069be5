"""
Geometry Module
===============

Point-in-region tests and region composition.

This module provides:
    - is_in_shape / normalize_extents: Pure primitive shape tests
    - PrimitiveRegion, UnionRegion, NegationRegion: Region variants
"""

from regionwatch.geometry.shapes import SHAPE_PREDICATES, is_in_shape, normalize_extents
from regionwatch.geometry.protocols import PointSource, SceneObject
from regionwatch.geometry.regions import (
    NegationRegion,
    PrimitiveRegion,
    Region,
    UnionRegion,
)

__all__ = [
    "SHAPE_PREDICATES",
    "is_in_shape",
    "normalize_extents",
    "PointSource",
    "SceneObject",
    "Region",
    "PrimitiveRegion",
    "UnionRegion",
    "NegationRegion",
]
