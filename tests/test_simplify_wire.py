"""Tests for wire simplification."""

import pytest

from tikzsketch.models import DotConnection, FreeConnection
from tikzsketch.wires.simplify import (
    prune_collinear, select_corners, simplify_wire, simplify_wires, tag_angles,
)
from helpers import make_wire


def _summary(simple):
    return [(wp.point, wp.in_angle, wp.out_angle) for wp in simple.points]


class TestTagAngles:
    """Tests for pass A."""

    def test_endpoints_have_one_angle(self):
        tagged = tag_angles([[0, 0], [10, 0], [10, 10]])
        assert tagged[0].in_angle is None
        assert tagged[0].out_angle == 0
        assert tagged[-1].out_angle is None
        assert tagged[-1].in_angle == 90

    def test_interior_angles_point_to_neighbours(self):
        tagged = tag_angles([[0, 0], [10, 0], [10, 10]])
        assert tagged[1].in_angle == 180
        assert tagged[1].out_angle == -90

    def test_angles_are_snapped(self):
        tagged = tag_angles([[0, 0], [10, -3]])
        assert tagged[0].out_angle == 0
        assert tagged[1].in_angle == 180

    def test_angles_are_floats(self):
        tagged = tag_angles([[0, 0], [10, 0], [10, 10]])
        assert isinstance(tagged[0].out_angle, float)
        assert isinstance(tagged[1].in_angle, float)
        assert isinstance(tagged[-1].in_angle, float)

    def test_single_point_rejected(self):
        with pytest.raises(ValueError):
            tag_angles([[0, 0]])


class TestSelectCorners:
    """Tests for pass B."""

    def test_drops_diagonal_entries(self):
        tagged = tag_angles([[0, 0], [10, 10], [20, 20], [30, 20]])
        corners = select_corners(tagged, 5.0)
        assert [c.point for c in corners] == [[0, 0], [30, 20]]

    def test_keeps_endpoints_even_when_diagonal(self):
        tagged = tag_angles([[0, 0], [10, 10]])
        assert len(select_corners(tagged, 5.0)) == 2


class TestPruneCollinear:
    """Tests for passes C and D."""

    def test_straight_run_collapses(self):
        corners = select_corners(tag_angles([[0, 0], [10, 0], [20, 0], [30, 0]]))
        pruned = prune_collinear(corners)
        assert [c.point for c in pruned] == [[0, 0], [30, 0]]


class TestSimplifyWire:
    """Tests for the full simplification."""

    def test_l_shape(self):
        path = [[0, 0], [10, 0], [20, 0], [30, 0], [30, 10], [30, 20], [30, 30]]
        simple = simplify_wire(path)
        assert _summary(simple) == [
            ([0, 0], None, 0),
            ([30, 30], 90, None),
        ]

    def test_keeps_real_corner(self):
        path = [[0, 0], [10, 0], [20, 10], [30, 20], [40, 20], [50, 20], [50, 30], [50, 40]]
        simple = simplify_wire(path)
        assert _summary(simple) == [
            ([0, 0], None, 0),
            ([40, 20], 180, 0),
            ([50, 40], 90, None),
        ]

    def test_two_point_wire(self):
        simple = simplify_wire([[0, 0], [100, 0]])
        assert _summary(simple) == [
            ([0, 0], None, 0),
            ([100, 0], 180, None),
        ]

    def test_endpoints_always_preserved(self):
        paths = [
            [[5, 5], [6, 7], [9, 2], [40, 41], [3, 3]],
            [[0, 0], [0, 10], [0, 20]],
            [[1, 1], [2, 2], [3, 3], [4, 4]],
        ]
        for path in paths:
            simple = simplify_wire(path)
            assert simple.first.point == path[0]
            assert simple.last.point == path[-1]
            assert len(simple.points) >= 2

    def test_all_angles_are_multiples_of_45(self):
        simple = simplify_wire([[0, 0], [13, 2], [25, 30], [60, 31], [61, 80]])
        for wp in simple.points:
            for angle in (wp.in_angle, wp.out_angle):
                if angle is not None:
                    assert angle % 45 == 0
                    assert -180 < angle <= 180


class TestSimplifyWires:
    """Tests for simplifying a whole diagram's wires."""

    def test_preserves_order(self, default_config):
        wires = [
            make_wire(0, [[0, 0], [0, 50]], DotConnection(index=0), FreeConnection(point=[0, 50])),
            make_wire(1, [[10, 10], [60, 10]], FreeConnection(point=[10, 10]), FreeConnection(point=[60, 10])),
        ]
        simplified = simplify_wires(wires, default_config)

        assert len(simplified) == 2
        assert simplified[0].last.point == [0, 50]
        assert simplified[1].first.point == [10, 10]
