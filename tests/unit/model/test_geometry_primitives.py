"""
Unit tests for Point and Rect.
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from chartdigitizer.model.geometry_primitives import MOUSE_POINT_ID, Point, Rect


class TestPoint:
    """Test point identity and distance helpers."""

    def test_ids_are_unique(self):
        ids = {Point(0, 0).id for _ in range(100)}
        assert len(ids) == 100

    def test_mouse_point_uses_reserved_id(self):
        mouse = Point.mouse(1.5, 2.5)
        assert mouse.id == MOUSE_POINT_ID
        assert mouse.is_mouse
        assert not Point(1.5, 2.5).is_mouse

    def test_moved_to_keeps_identity(self):
        pt = Point(1, 2, label="A")
        moved = pt.moved_to(5, 6)
        assert (moved.x, moved.y) == (5, 6)
        assert moved.id == pt.id
        assert moved.label == "A"
        assert (pt.x, pt.y) == (1, 2)

    def test_distance(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == pytest.approx(5.0)

    def test_nearest(self):
        origin = Point(0, 0)
        near, far = Point(1, 1), Point(5, 5)
        assert origin.nearest([far, near]) is near
        assert origin.nearest([]) is None

    def test_nearest_tie_keeps_first(self):
        a, b = Point(1, 0), Point(-1, 0)
        assert Point(0, 0).nearest([a, b]) is a

    def test_short_id_and_array(self):
        pt = Point(2, 3, id="abcdef")
        assert pt.short_id == "abcd"
        np.testing.assert_array_equal(pt.to_array(), [2.0, 3.0])


class TestRect:
    """Test edges and the half-open containment rule."""

    def test_edges(self):
        rect = Rect(5, 5, 10, 4)
        assert rect.west_edge == 0
        assert rect.east_edge == 10
        assert rect.south_edge == 3
        assert rect.north_edge == 7

    def test_contains_is_half_open(self):
        rect = Rect(5, 5, 10, 10)
        assert rect.contains(Point(0, 0))       # west/south inclusive
        assert rect.contains(Point(9.999, 9.999))
        assert not rect.contains(Point(10, 5))  # east exclusive
        assert not rect.contains(Point(5, 10))  # north exclusive
        assert not rect.contains(Point(-0.001, 5))

    def test_intersects(self):
        rect = Rect(0, 0, 2, 2)
        assert rect.intersects(Rect(1, 1, 2, 2))
        assert rect.intersects(Rect(2, 0, 2, 2))  # touching edges
        assert not rect.intersects(Rect(5, 5, 2, 2))
        assert not rect.intersects(Rect(0, 3.5, 2, 2))

    def test_from_edges(self):
        rect = Rect.from_edges(0, 0, 4, 2)
        assert (rect.cx, rect.cy, rect.w, rect.h) == (2, 1, 4, 2)

    def test_quadrants_partition_parent(self):
        parent = Rect(0.3, 0.7, 10.1, 3.3)
        nw, ne, sw, se = parent.quadrants()

        assert nw.west_edge == parent.west_edge and nw.north_edge == parent.north_edge
        assert ne.east_edge == parent.east_edge and se.south_edge == parent.south_edge
        # Shared edges are identical, not merely close
        assert nw.east_edge == ne.west_edge == parent.cx
        assert sw.north_edge == nw.south_edge == parent.cy

        for child in (nw, ne, sw, se):
            assert child.w == pytest.approx(parent.w / 2)
            assert child.h == pytest.approx(parent.h / 2)

    def test_point_on_shared_edge_in_exactly_one_quadrant(self):
        parent = Rect(5, 5, 10, 10)
        centre = Point(5, 5)
        assert sum(q.contains(centre) for q in parent.quadrants()) == 1
        assert parent.quadrants()[1].contains(centre)  # ne owns the centre

    def test_rects_are_immutable(self):
        rect = Rect(0, 0, 1, 1)
        with pytest.raises(FrozenInstanceError):
            rect.cx = 3

    def test_str(self):
        assert str(Rect(0, 0, 2, 2)) == "BOUNDARY (-1 1 1 -1)"

    def test_equality_ignores_derived_edges(self):
        assert Rect(1, 1, 2, 2) == Rect.from_edges(0, 0, 2, 2)
