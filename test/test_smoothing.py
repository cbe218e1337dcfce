"""
Tests for the position low-pass filter.
"""

import math

import pytest

from gantry_position_estimator.common.pose import Quaternion
from gantry_position_estimator.estimator.smoothing import smooth


class TestSmooth:
    """Tests for smooth()."""

    def test_moves_one_tenth_of_the_way(self, make_pose):
        """Default K=10 weights the new sample by 0.1."""
        old = make_pose(0, x=0.0, y=10.0, z=-2.0)
        new = make_pose(0, x=1.0, y=0.0, z=2.0)

        out = smooth(new, old)

        assert out.translation.x == pytest.approx(0.1)
        assert out.translation.y == pytest.approx(9.0)
        assert out.translation.z == pytest.approx(-1.6)

    def test_non_position_fields_come_from_new(self, make_pose):
        """Orientation, frames and stamp are the new observation's, unfiltered."""
        q_new = Quaternion(w=0.0, x=1.0, y=0.0, z=0.0)
        old = make_pose(1, x=5.0, sec=10, nanosec=7, frame_id="old_cam")
        new = make_pose(1, x=6.0, sec=11, nanosec=3, rotation=q_new, frame_id="new_cam")

        out = smooth(new, old)

        assert out.rotation == q_new
        assert out.stamp == new.stamp
        assert out.frame_id == "new_cam"
        assert out.child_frame_id == "aruco_1"

    def test_custom_constant(self, make_pose):
        out = smooth(make_pose(0, x=4.0), make_pose(0, x=0.0), smoothing_constant=2.0)
        assert out.translation.x == pytest.approx(2.0)

    def test_constant_one_takes_new_sample(self, make_pose):
        out = smooth(make_pose(0, x=4.0), make_pose(0, x=-3.0), smoothing_constant=1.0)
        assert out.translation.x == pytest.approx(4.0)

    def test_converges_to_constant_input(self, make_pose):
        """Error shrinks by 0.9 per update."""
        target = make_pose(0, x=1.0, y=-2.0, z=0.5)
        state = make_pose(0)

        for _ in range(300):
            state = smooth(target, state)

        assert state.translation.x == pytest.approx(1.0, abs=1e-9)
        assert state.translation.y == pytest.approx(-2.0, abs=1e-9)
        assert state.translation.z == pytest.approx(0.5, abs=1e-9)

    def test_geometric_error_ratio(self, make_pose):
        target = make_pose(0, x=1.0)
        state = make_pose(0, x=0.0)

        errors = []
        for _ in range(5):
            state = smooth(target, state)
            errors.append(1.0 - state.translation.x)

        for prev, cur in zip(errors, errors[1:]):
            assert cur / prev == pytest.approx(0.9)

    def test_nan_propagates(self, make_pose):
        """Non-finite inputs are not sanitized."""
        out = smooth(make_pose(0, x=float("nan")), make_pose(0, x=1.0))
        assert math.isnan(out.translation.x)
        assert out.translation.y == 0.0
