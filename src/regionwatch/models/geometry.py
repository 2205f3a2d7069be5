"""
Geometry Models
===============

Spatial primitives that anchor regions in world space.

Supported Types:
    - Vector3: 3D coordinate (x, y, z)
    - Transform: Position + orientation frame of a region

Design Philosophy:
    A Transform is owned by the region that defines it and is
    immutable after construction. Moving a region means building
    a new one.

Example:
    from regionwatch.models.geometry import Transform, as_point

    frame = Transform.from_axis_angle((0, 1, 0), 90, position=(5, 0, 0), degrees=True)
    local = frame.point_to_object_space(as_point((5, 0, 1)))
"""

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
from pydantic import BaseModel, Field
from scipy.spatial.transform import Rotation as R


class Vector3(BaseModel):
    """
    3D vector in world units.

    Attributes:
        x: X component
        y: Y component (up)
        z: Z component
    """

    x: float = Field(default=0.0, description="X component")
    y: float = Field(default=0.0, description="Y component (up)")
    z: float = Field(default=0.0, description="Z component")

    def to_array(self) -> np.ndarray:
        """Convert to a float64 array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "Vector3":
        """Build from any 3-sequence."""
        x, y, z = (float(v) for v in values)
        return cls(x=x, y=y, z=z)


PointLike = Union[Vector3, Sequence[float], np.ndarray]


def as_point(value: PointLike) -> np.ndarray:
    """
    Coerce a point-like value to a float64 array of shape (3,).

    Args:
        value: Vector3, 3-sequence or numpy array

    Returns:
        New array (the input is never aliased)

    Raises:
        ValueError: If the value does not describe exactly 3 components
    """
    if isinstance(value, Vector3):
        return value.to_array()

    try:
        arr = np.array(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Cannot interpret {value!r} as a 3D point: {e}") from e

    if arr.shape != (3,):
        raise ValueError(f"Point must have shape (3,), got {arr.shape}")
    return arr


def _axis_angle_matrix(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation matrix for a right-handed rotation of `angle` radians about `axis`."""
    norm = np.linalg.norm(axis)
    if norm == 0:
        raise ValueError("Rotation axis must be non-zero")
    return R.from_rotvec(axis / norm * angle).as_matrix()


@dataclass(frozen=True, eq=False)
class Transform:
    """
    Position + orientation frame anchoring a region in world space.

    Attributes:
        position: World-space origin of the frame, shape (3,)
        rotation: Orthonormal 3x3 matrix, columns are the local axes

    Note:
        Both arrays are made read-only at construction.
    """

    position: np.ndarray
    rotation: np.ndarray

    def __post_init__(self) -> None:
        """Validate and freeze the arrays."""
        position = as_point(self.position)

        rotation = np.array(self.rotation, dtype=np.float64)
        if rotation.shape != (3, 3):
            raise ValueError(f"rotation must be a 3x3 matrix, got shape {rotation.shape}")
        if not np.allclose(rotation.T @ rotation, np.eye(3), atol=1e-6):
            raise ValueError("rotation must be orthonormal")

        position.flags.writeable = False
        rotation.flags.writeable = False
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "rotation", rotation)

    @classmethod
    def identity(cls) -> "Transform":
        """Frame at the world origin with no rotation."""
        return cls(np.zeros(3), np.eye(3))

    @classmethod
    def from_position(cls, position: PointLike) -> "Transform":
        """Axis-aligned frame at `position`."""
        return cls(as_point(position), np.eye(3))

    @classmethod
    def from_axis_angle(
        cls,
        axis: PointLike,
        angle: float,
        position: PointLike = (0.0, 0.0, 0.0),
        degrees: bool = False,
    ) -> "Transform":
        """
        Frame rotated by `angle` about `axis`, located at `position`.

        Args:
            axis: Rotation axis (need not be unit length)
            angle: Rotation angle, radians unless `degrees` is set
            position: World-space origin of the frame
            degrees: Interpret `angle` in degrees
        """
        if degrees:
            angle = math.radians(angle)
        return cls(as_point(position), _axis_angle_matrix(as_point(axis), angle))

    def point_to_object_space(self, point: PointLike) -> np.ndarray:
        """Express a world-space point in this frame's local coordinates."""
        return self.rotation.T @ (as_point(point) - self.position)

    def point_to_world_space(self, local: PointLike) -> np.ndarray:
        """Express a local point in world coordinates."""
        return self.rotation @ as_point(local) + self.position

    def __repr__(self) -> str:
        return f"Transform(position={self.position.tolist()})"
