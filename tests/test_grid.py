"""
Unit tests for grid primitives.
"""

import sys
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roomkit.grid import (
    NEIGHBOR_OFFSETS,
    neighbors4,
    snap_cell,
    snap_position,
    snap_scalar,
    to_uv,
    xz_distance,
)


class TestNeighbors(unittest.TestCase):
    """Tests for neighbor enumeration."""

    def test_fixed_order(self):
        """Neighbors come out as +x, +z, -x, -z."""
        assert list(neighbors4((3, 7))) == [(4, 7), (3, 8), (2, 7), (3, 6)]

    def test_offsets_are_axis_aligned(self):
        for dx, dz in NEIGHBOR_OFFSETS:
            assert abs(dx) + abs(dz) == 1


class TestSnapping(unittest.TestCase):
    """Tests for rounding positions onto cells."""

    def test_round_half_away_from_zero(self):
        assert snap_scalar(0.5) == 1
        assert snap_scalar(-0.5) == -1
        assert snap_scalar(2.5) == 3
        assert snap_scalar(-2.5) == -3

    def test_round_nearest(self):
        assert snap_scalar(1.49) == 1
        assert snap_scalar(-1.51) == -2
        assert snap_scalar(0.0) == 0

    def test_just_below_half_rounds_down(self):
        below_half = 0.49999999999999994
        assert snap_scalar(below_half) == 0
        assert snap_scalar(-below_half) == 0
        assert snap_scalar(2.4999999999999996) == 2

    def test_snap_cell(self):
        assert snap_cell(1.6, -0.2) == (2, 0)

    def test_snap_position_uses_xz(self):
        """Y is ignored for 3D positions."""
        assert snap_position((1.4, 99.0, 2.6)) == (1, 3)
        assert snap_position((1.4, 2.6)) == (1, 3)

    def test_snap_position_rejects_other_sizes(self):
        with self.assertRaises(ValueError):
            snap_position((1.0, 2.0, 3.0, 4.0))


class TestMisc(unittest.TestCase):

    def test_to_uv(self):
        assert to_uv((2, 1), 4, 2) == (0.5, 0.5)

    def test_xz_distance_ignores_height(self):
        assert xz_distance((0.0, 5.0, 0.0), (3.0, -1.0, 4.0)) == 5.0


if __name__ == "__main__":
    unittest.main(verbosity=2)
