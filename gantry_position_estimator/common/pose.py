"""
Stamped pose value types.

Poses mirror geometry_msgs/TransformStamped without depending on ROS:
a parent frame (header frame_id), a child frame (the marker or derived
frame name), a stamp, a translation and a unit quaternion.

Quaternions are stored (w, x, y, z). scipy's Rotation uses (x, y, z, w);
convert with `to_rotation` only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np
from scipy.spatial.transform import Rotation


@dataclass(frozen=True)
class Stamp:
    """Time as whole seconds plus nanoseconds (builtin_interfaces/Time)."""
    sec: int = 0
    nanosec: int = 0


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def norm(self) -> float:
        return float(np.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z))

    def to_rotation(self) -> Rotation:
        """Convert to scipy Rotation (normalizes; raises ValueError on zero norm)."""
        return Rotation.from_quat([self.x, self.y, self.z, self.w])


@dataclass(frozen=True)
class Pose:
    """A stamped rigid transform from `frame_id` to `child_frame_id`."""
    child_frame_id: str
    translation: Vector3 = field(default_factory=Vector3)
    rotation: Quaternion = field(default_factory=Quaternion)
    frame_id: str = ""
    stamp: Stamp = field(default_factory=Stamp)

    def renamed(self, child_frame_id: str) -> "Pose":
        return replace(self, child_frame_id=child_frame_id)

    def restamped(self, stamp: Stamp) -> "Pose":
        return replace(self, stamp=stamp)

