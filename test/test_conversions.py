"""
Message conversion tests. Skipped without a sourced ROS 2 environment.
"""

import pytest

pytest.importorskip("geometry_msgs")
pytest.importorskip("tf2_msgs")

from geometry_msgs.msg import TransformStamped  # noqa: E402

from gantry_position_estimator.common.pose import Quaternion, Stamp  # noqa: E402
from gantry_position_estimator.node.conversions import (  # noqa: E402
    pose_from_transform,
    pose_to_transform,
    poses_to_tf_message,
)


def _transform_msg():
    msg = TransformStamped()
    msg.header.frame_id = "camera"
    msg.header.stamp.sec = 42
    msg.header.stamp.nanosec = 7
    msg.child_frame_id = "aruco_15"
    msg.transform.translation.x = 1.0
    msg.transform.translation.y = 2.0
    msg.transform.translation.z = 3.0
    msg.transform.rotation.w = 0.0
    msg.transform.rotation.x = 1.0
    return msg


def test_pose_from_transform():
    pose = pose_from_transform(_transform_msg())

    assert pose.child_frame_id == "aruco_15"
    assert pose.frame_id == "camera"
    assert pose.stamp == Stamp(42, 7)
    assert (pose.translation.x, pose.translation.y, pose.translation.z) == (1.0, 2.0, 3.0)
    assert pose.rotation == Quaternion(w=0.0, x=1.0, y=0.0, z=0.0)


def test_pose_to_transform_keeps_fields():
    pose = pose_from_transform(_transform_msg()).renamed("gantry_locked").restamped(Stamp(50, 1))

    msg = pose_to_transform(pose)

    assert msg.child_frame_id == "gantry_locked"
    assert msg.header.frame_id == "camera"
    assert (msg.header.stamp.sec, msg.header.stamp.nanosec) == (50, 1)
    assert msg.transform.rotation.x == 1.0


def test_empty_tf_message():
    assert list(poses_to_tf_message([]).transforms) == []
