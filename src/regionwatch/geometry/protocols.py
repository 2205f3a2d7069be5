"""
Collaborator Protocols
======================

Structural contracts for objects supplied by the host application.

    - PointSource: anything moving whose position is sampled while polling
    - SceneObject: anything a primitive region can be built from
"""

from typing import Any, Protocol

from regionwatch.models.geometry import PointLike, Transform


class PointSource(Protocol):
    """A tracked object. Only `position` is read, never written."""

    @property
    def position(self) -> PointLike: ...


class SceneObject(Protocol):
    """
    A scene object exposing a frame and a size.

    An optional `shape` attribute selects the shape kind. Box is
    assumed when it is missing or None.
    """

    @property
    def transform(self) -> Transform: ...

    @property
    def size(self) -> PointLike: ...


def shape_of(obj: Any) -> Any:
    """Shape kind declared by a scene object, if any."""
    return getattr(obj, "shape", None)
