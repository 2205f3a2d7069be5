"""
Region Tests
============

Tests for region construction and containment.
"""

from types import SimpleNamespace

import numpy as np
import pytest

from regionwatch.errors import InvalidRegionError
from regionwatch.geometry.regions import NegationRegion, PrimitiveRegion, UnionRegion
from regionwatch.models.geometry import Transform
from regionwatch.models.shape_kind import ShapeKind


def sphere(radius, position=(0, 0, 0), step_function=None):
    return PrimitiveRegion(
        Transform.from_position(position),
        (radius, radius, radius),
        ShapeKind.SPHERE,
        step_function=step_function,
    )


class TestPrimitiveRegion:
    """Tests for PrimitiveRegion."""

    def test_normalizes_sphere_extents(self):
        """Sphere extents are uniform after construction."""
        region = PrimitiveRegion(Transform.identity(), (2, 9, 4), ShapeKind.SPHERE)
        np.testing.assert_allclose(region.extents, [9, 9, 9])

    def test_normalizes_cylinder_extents(self):
        """Cylinder extents are radially symmetric after construction."""
        region = PrimitiveRegion(Transform.identity(), (2, 9, 4), ShapeKind.CYLINDER)
        np.testing.assert_allclose(region.extents, [4, 9, 4])

    def test_accepts_bare_position(self):
        """A position alone builds an axis-aligned frame."""
        region = PrimitiveRegion((10, 0, 0), (2, 2, 2), ShapeKind.BOX)
        assert region.is_in_region((10.5, 0, 0))
        assert not region.is_in_region((0, 0, 0))

    def test_default_shape_is_box(self):
        """Shape defaults to box."""
        region = PrimitiveRegion(Transform.identity(), (2, 2, 2))
        assert region.shape is ShapeKind.BOX

    def test_contains_operator(self):
        """`in` delegates to is_in_region."""
        region = sphere(5)
        assert (1, 1, 1) in region
        assert (9, 0, 0) not in region

    def test_unknown_shape_contains_nothing(self):
        """An unknown shape kind degrades to an always-empty region."""
        region = PrimitiveRegion(Transform.identity(), (5, 5, 5), "cone")
        assert not region.is_in_region((0, 0, 0))

    def test_from_scene_object_defaults_to_box(self):
        """Scene objects without a shape are boxes."""
        obj = SimpleNamespace(transform=Transform.identity(), size=(2, 8, 2))
        region = PrimitiveRegion.from_scene_object(obj)
        assert region.shape is ShapeKind.BOX
        np.testing.assert_allclose(region.extents, [2, 8, 2])

    def test_from_scene_object_with_shape(self):
        """A declared shape is honoured and normalized."""
        obj = SimpleNamespace(transform=Transform.identity(), size=(2, 8, 2), shape="sphere")
        region = PrimitiveRegion.from_scene_object(obj)
        assert region.shape is ShapeKind.SPHERE
        np.testing.assert_allclose(region.extents, [8, 8, 8])

    def test_custom_step_function(self, instant_step):
        """A supplied step function is used as-is."""
        region = sphere(1, step_function=instant_step)
        assert region.step_function is instant_step


class TestUnionRegion:
    """Tests for UnionRegion containment."""

    def test_is_or_of_members(self):
        """Containment equals the OR of member containment."""
        members = [sphere(3), sphere(3, position=(10, 0, 0)), sphere(1, position=(0, 10, 0))]
        union = UnionRegion(members)

        rng = np.random.default_rng(3)
        for point in rng.uniform(-5, 15, size=(300, 3)):
            assert union.is_in_region(point) == any(m.is_in_region(point) for m in members)

    def test_get_regions_in_order(self):
        """get_regions lists containing members in member order."""
        a, b, c = sphere(5), sphere(2, position=(30, 0, 0)), sphere(8)
        union = UnionRegion([a, b, c])
        assert union.get_regions((1, 0, 0)) == [a, c]
        assert union.get_regions((100, 0, 0)) == []

    def test_find_region(self):
        """find_region returns the first containing member."""
        a, b = sphere(2, position=(10, 0, 0)), sphere(20)
        union = UnionRegion([a, b])
        assert union.find_region((10, 0, 0)) is a
        assert union.find_region((0, 0, 0)) is b
        assert union.find_region((0, 50, 0)) is None

    def test_empty_union_rejected(self):
        """A union needs at least one member."""
        with pytest.raises(InvalidRegionError):
            UnionRegion([])

    def test_non_region_member_rejected(self):
        """Members must be regions."""
        with pytest.raises(TypeError):
            UnionRegion([sphere(1), "not a region"])

    def test_step_function_from_first_member(self, instant_step):
        """The union steps like its first member."""
        union = UnionRegion([sphere(1, step_function=instant_step), sphere(2)])
        assert union.step_function is instant_step


class TestNegationRegion:
    """Tests for NegationRegion containment."""

    def test_ring(self):
        """Base r=10 minus subtract r=5: only the shell between counts."""
        ring = NegationRegion(sphere(10), sphere(5))
        assert not ring.is_in_region((4, 0, 0))
        assert not ring.is_in_region((5, 0, 0))
        assert ring.is_in_region((7, 0, 0))
        assert ring.is_in_region((0, 8, 0))
        assert not ring.is_in_region((11, 0, 0))

    def test_is_base_and_not_subtract(self):
        """Containment equals base AND NOT subtract."""
        base = PrimitiveRegion(Transform.identity(), (10, 4, 10), ShapeKind.BOX)
        cut = sphere(3, position=(2, 0, 0))
        negation = NegationRegion(base, cut)

        rng = np.random.default_rng(11)
        for point in rng.uniform(-6, 6, size=(300, 3)):
            expected = base.is_in_region(point) and not cut.is_in_region(point)
            assert negation.is_in_region(point) == expected

    def test_nested_composites(self):
        """Unions and negations compose."""
        holes = UnionRegion([sphere(1, position=(3, 0, 0)), sphere(1, position=(-3, 0, 0))])
        swiss = NegationRegion(sphere(6), holes)
        assert swiss.is_in_region((0, 0, 0))
        assert not swiss.is_in_region((3, 0, 0))
        assert not swiss.is_in_region((-3.5, 0, 0))

    def test_missing_operand_rejected(self):
        """Both operands are required."""
        with pytest.raises(InvalidRegionError):
            NegationRegion(sphere(1), None)
        with pytest.raises(InvalidRegionError):
            NegationRegion(None, sphere(1))

    def test_step_function_from_base(self, instant_step):
        """The negation steps like its base region."""
        negation = NegationRegion(sphere(5, step_function=instant_step), sphere(1))
        assert negation.step_function is instant_step
