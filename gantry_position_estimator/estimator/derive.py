"""
Derived frames from marker pairs.

Facade and gantry share one rule: the frame sits at one marker of the pair
with a hardcoded height, yawed to point along the line between the two
markers and flipped upside down (180 deg about X):

    q = Rz(yaw) * Rx(180 deg)

Facade yaw is measured from marker 0 to marker 1 and the frame sits at
marker 1. Gantry yaw is measured from marker 2 to marker 15 and the frame
sits at marker 15. The agv frame is marker 5 renamed.

Degenerate pairs (identical x/y) give atan2(0, 0) = 0 and are accepted.
Non-finite positions give a NaN yaw, which propagates into the quaternion.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Optional

from gantry_position_estimator import constants
from gantry_position_estimator.common.pose import Pose, Quaternion


def yaw_rotation(yaw: float) -> Quaternion:
    """
    Set yaw and rotate around x to turn upside down.

    Closed form of Rz(yaw) * Rx(pi); no normalization, so NaN yaw yields
    a NaN quaternion instead of an error.
    """
    half = 0.5 * yaw
    return Quaternion(w=0.0, x=math.cos(half), y=math.sin(half), z=0.0)


def _pair_frame(anchor: Pose, yaw: float, height: float, child_frame_id: str) -> Pose:
    t = anchor.translation
    return replace(
        anchor,
        child_frame_id=child_frame_id,
        translation=replace(t, z=height),
        rotation=yaw_rotation(yaw),
    )


def derive_facade(
    left: Optional[Pose],
    right: Optional[Pose],
    height: float = constants.FACADE_HEIGHT,
) -> Optional[Pose]:
    """Facade frame from markers 0 (left) and 1 (right); None unless both are present."""
    if left is None or right is None:
        return None

    diff_x = right.translation.x - left.translation.x
    diff_y = right.translation.y - left.translation.y
    yaw = math.atan2(diff_y, diff_x)

    return _pair_frame(right, yaw, height, constants.FACADE_FRAME)


def derive_gantry(
    marker_a: Optional[Pose],
    marker_b: Optional[Pose],
    height: float = constants.GANTRY_HEIGHT,
) -> Optional[Pose]:
    """Gantry frame from markers 15 (a) and 2 (b); None unless both are present."""
    if marker_a is None or marker_b is None:
        return None

    # gantry position is marker 15 position with this new rotation
    diff_x = marker_a.translation.x - marker_b.translation.x
    diff_y = marker_a.translation.y - marker_b.translation.y
    yaw = math.atan2(diff_y, diff_x)

    return _pair_frame(marker_a, yaw, height, constants.GANTRY_FRAME)


def derive_agv(marker: Optional[Pose]) -> Optional[Pose]:
    """Marker 5 pose under the agv frame name."""
    if marker is None:
        return None
    return marker.renamed(constants.AGV_FRAME)
