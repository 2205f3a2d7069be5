"""
Regions
=======

Containment and enter/leave detection over 3D regions.

This module provides:
    - Region: The contract every region satisfies
    - PrimitiveRegion: A sphere, cylinder or box
    - UnionRegion: Any of several regions
    - NegationRegion: A base region minus a subtracted region

All regions are IMMUTABLE after construction. is_in_region is a pure
function of the point. Enter/leave waits poll it until it flips.

Example:
    from regionwatch.geometry import NegationRegion, PrimitiveRegion
    from regionwatch.models import ShapeKind, Transform

    arena = PrimitiveRegion(Transform.identity(), (10, 10, 10), ShapeKind.SPHERE)
    pit = PrimitiveRegion(Transform.identity(), (5, 5, 5), ShapeKind.SPHERE)
    ring = NegationRegion(arena, pit)

    await ring.entered_region(player, timeout=30.0)
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from regionwatch.config import settings
from regionwatch.errors import InvalidRegionError, RaceFailedError, RegionTimeoutError
from regionwatch.geometry.protocols import PointSource, SceneObject, shape_of
from regionwatch.geometry.shapes import is_in_shape, normalize_extents
from regionwatch.models.geometry import PointLike, Transform, as_point
from regionwatch.models.shape_kind import ShapeKind, coerce_shape_kind
from regionwatch.polling.poller import (
    PendingWait,
    resolve_timeout,
    sample_position,
    watch_transition,
)
from regionwatch.polling.race import race
from regionwatch.polling.steps import StepFunction, fixed_delay


logger = logging.getLogger(__name__)


class Region(ABC):
    """
    Contract shared by all regions.

    Implementations answer "is this point inside me" and start
    awaitable waits for a tracked point to enter or leave.
    """

    @abstractmethod
    def is_in_region(self, point: PointLike) -> bool:
        """Check if the point is inside the region."""

    @abstractmethod
    def entered_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        """Wait until the tracked point is observed inside the region."""

    @abstractmethod
    def left_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        """Wait until the tracked point is observed outside the region."""

    @property
    @abstractmethod
    def step_function(self) -> StepFunction:
        """Suspension primitive used between checks."""

    def __contains__(self, point: PointLike) -> bool:
        return self.is_in_region(point)


class PrimitiveRegion(Region):
    """
    Region shaped as a sphere, cylinder or box.

    Extents are normalized at construction so the size cannot extend
    beyond the shape (see normalize_extents).

    Attributes:
        transform: Frame of the region
        extents: Normalized size, read-only array of shape (3,)
        shape: Shape kind

    Example:
        gate = PrimitiveRegion(
            Transform.from_position((0, 2, 40)),
            (6, 4, 1),
            ShapeKind.BOX,
        )
        await gate.entered_region(car)
    """

    def __init__(
        self,
        transform: Union[Transform, PointLike],
        extents: PointLike,
        shape: Union[ShapeKind, str] = ShapeKind.BOX,
        step_function: Optional[StepFunction] = None,
    ) -> None:
        """
        Initialize a primitive region.

        Args:
            transform: Frame of the region, or just its position
            extents: Raw size vector
            shape: Shape kind
            step_function: Poll cadence (defaults to a fixed delay of
                settings.polling.step_interval_seconds)
        """
        if not isinstance(transform, Transform):
            transform = Transform.from_position(transform)

        kind = coerce_shape_kind(shape)
        if kind is None:
            logger.warning(f"Unknown shape kind {shape!r}: region will never contain a point")

        self._transform = transform
        self._shape = kind if kind is not None else shape
        self._extents = normalize_extents(extents, self._shape)
        self._step_function = step_function or fixed_delay(
            settings.polling.step_interval_seconds
        )

    @classmethod
    def from_scene_object(
        cls,
        obj: SceneObject,
        step_function: Optional[StepFunction] = None,
    ) -> "PrimitiveRegion":
        """
        Build a region from a scene object.

        Args:
            obj: Object exposing `transform`, `size` and optionally `shape`
            step_function: Poll cadence

        Returns:
            Region covering the object (box unless the object says otherwise)
        """
        shape = shape_of(obj)
        return cls(
            obj.transform,
            obj.size,
            ShapeKind.BOX if shape is None else shape,
            step_function=step_function,
        )

    @property
    def transform(self) -> Transform:
        """Frame of the region."""
        return self._transform

    @property
    def extents(self) -> np.ndarray:
        """Normalized size."""
        return self._extents

    @property
    def shape(self) -> Union[ShapeKind, str]:
        """Shape kind."""
        return self._shape

    @property
    def step_function(self) -> StepFunction:
        return self._step_function

    def is_in_region(self, point: PointLike) -> bool:
        return is_in_shape(point, self._transform, self._extents, self._shape)

    def entered_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        return watch_transition(
            self.is_in_region,
            tracked,
            True,
            self._step_function,
            timeout,
            label=f"enter {self!r}",
        )

    def left_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        return watch_transition(
            self.is_in_region,
            tracked,
            False,
            self._step_function,
            timeout,
            label=f"leave {self!r}",
        )

    def __repr__(self) -> str:
        shape = self._shape.value if isinstance(self._shape, ShapeKind) else self._shape
        return (
            f"PrimitiveRegion({shape}, "
            f"position={self._transform.position.tolist()}, "
            f"extents={self._extents.tolist()})"
        )


class UnionRegion(Region):
    """
    Region made of several member regions (logical OR).

    Enter/leave waits race the members. The first member to report
    the transition wins and the other member waits are cancelled.

    Attributes:
        regions: Member regions, in order
    """

    def __init__(self, regions: Sequence[Region]) -> None:
        """
        Initialize a union.

        Args:
            regions: Member regions (at least one)

        Raises:
            InvalidRegionError: If no regions are given
            TypeError: If a member is not a Region
        """
        regions = tuple(regions)
        if not regions:
            raise InvalidRegionError("UnionRegion needs at least one region")
        for region in regions:
            if not isinstance(region, Region):
                raise TypeError(f"UnionRegion members must be Regions, got {type(region).__name__}")
        self._regions: Tuple[Region, ...] = regions

    @property
    def regions(self) -> Tuple[Region, ...]:
        """Member regions, in order."""
        return self._regions

    @property
    def step_function(self) -> StepFunction:
        """Step function of the first member."""
        return self._regions[0].step_function

    def is_in_region(self, point: PointLike) -> bool:
        point = as_point(point)
        return any(region.is_in_region(point) for region in self._regions)

    def get_regions(self, point: PointLike) -> List[Region]:
        """
        Get the members containing a point.

        Returns:
            Containing members in order (possibly empty)
        """
        point = as_point(point)
        return [region for region in self._regions if region.is_in_region(point)]

    def find_region(self, point: PointLike) -> Optional[Region]:
        """
        Get the first member containing a point.

        Returns:
            Region if found, None otherwise
        """
        point = as_point(point)
        for region in self._regions:
            if region.is_in_region(point):
                return region
        return None

    def entered_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        timeout = resolve_timeout(timeout)
        wait = PendingWait(f"enter {self!r}", timeout)
        members = [region.entered_region(tracked, timeout) for region in self._regions]
        return wait.start(self._race_members(wait, members))

    def left_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        timeout = resolve_timeout(timeout)
        label = f"leave {self!r}"
        try:
            occupied = self.get_regions(sample_position(tracked))
        except Exception as e:
            # Sampling errors reject the wait, as in every other region wait
            return PendingWait.rejected(label, e)
        if not occupied:
            logger.debug(f"{label}: point is in no member, resolving immediately")
            return PendingWait.resolved(label)

        wait = PendingWait(label, timeout)
        members = [region.left_region(tracked, timeout) for region in occupied]
        return wait.start(self._race_members(wait, members))

    @staticmethod
    async def _race_members(wait: PendingWait, members: List[PendingWait]) -> bool:
        try:
            winner = await race(members, token=wait.token)
        except RaceFailedError as e:
            if all(isinstance(err, RegionTimeoutError) for err in e.errors):
                raise RegionTimeoutError(wait.timeout, wait.elapsed, wait.label) from e
            raise

        if winner is None:
            return False
        logger.debug(f"{wait.label}: won by member {winner}")
        return True

    def __repr__(self) -> str:
        return f"UnionRegion({len(self._regions)} regions)"


class NegationRegion(Region):
    """
    Region covering `base` except where `subtract` also applies.

    Polls with the base region's step function.

    Attributes:
        base: Region to keep
        subtract: Region carved out of the base
    """

    def __init__(self, base: Region, subtract: Region) -> None:
        """
        Initialize a negation.

        Raises:
            InvalidRegionError: If either operand is missing
            TypeError: If an operand is not a Region
        """
        if base is None or subtract is None:
            raise InvalidRegionError("NegationRegion needs both a base and a subtract region")
        for operand in (base, subtract):
            if not isinstance(operand, Region):
                raise TypeError(f"NegationRegion operands must be Regions, got {type(operand).__name__}")
        self._base = base
        self._subtract = subtract

    @property
    def base(self) -> Region:
        return self._base

    @property
    def subtract(self) -> Region:
        return self._subtract

    @property
    def step_function(self) -> StepFunction:
        return self._base.step_function

    def is_in_region(self, point: PointLike) -> bool:
        point = as_point(point)
        return self._base.is_in_region(point) and not self._subtract.is_in_region(point)

    def entered_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        return watch_transition(
            self.is_in_region,
            tracked,
            True,
            self.step_function,
            timeout,
            label=f"enter {self!r}",
        )

    def left_region(
        self,
        tracked: PointSource,
        timeout: Optional[float] = None,
    ) -> PendingWait:
        return watch_transition(
            self.is_in_region,
            tracked,
            False,
            self.step_function,
            timeout,
            label=f"leave {self!r}",
        )

    def __repr__(self) -> str:
        return f"NegationRegion({self._base!r} - {self._subtract!r})"
