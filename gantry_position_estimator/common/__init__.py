"""
Common package for the gantry position estimator.

Shared value types used by the estimator core and the ROS node.
"""

from gantry_position_estimator.common.pose import (
    Pose,
    Quaternion,
    Stamp,
    Vector3,
)

__all__ = [
    "Pose",
    "Quaternion",
    "Stamp",
    "Vector3",
]
