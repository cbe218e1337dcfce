"""
Observation plausibility checks.

A check is any callable taking a Pose and returning True to accept it.
FrameEstimator drops rejected observations before touching any slot.
The default is AcceptAll; UprightMarkerCheck filters out bad measurements
of markers that are expected to lie roughly flat, facing up.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from gantry_position_estimator import constants
from gantry_position_estimator.common.pose import Pose


class ObservationCheck(Protocol):
    def __call__(self, observation: Pose) -> bool:
        ...


class AcceptAll:
    """Every observation is plausible."""

    def __call__(self, observation: Pose) -> bool:
        return True


class UprightMarkerCheck:
    """
    Accept markers whose z-axis, rotated by the observed orientation,
    still points (anti)parallel to the camera z-axis.

    Accepted iff |x| < max_tilt, |y| < max_tilt and |z| > min_z for the
    rotated unit z vector. Zero-norm quaternions are rejected.
    """

    def __init__(
        self,
        max_tilt: float = constants.UPRIGHT_MAX_TILT,
        min_z: float = constants.UPRIGHT_MIN_Z,
    ) -> None:
        self.max_tilt = max_tilt
        self.min_z = min_z

    def __call__(self, observation: Pose) -> bool:
        q = observation.rotation
        if not np.isfinite(q.norm()) or q.norm() < constants.QUATERNION_NORM_EPSILON:
            return False

        up = q.to_rotation().apply([0.0, 0.0, 1.0])
        return bool(
            abs(up[0]) < self.max_tilt
            and abs(up[1]) < self.max_tilt
            and abs(up[2]) > self.min_z
        )
