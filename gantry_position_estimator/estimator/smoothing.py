"""
Low-pass filter on incoming marker positions.

First-order exponential moving average in the camera frame:

    p_out = p_old + (p_new - p_old) / K

with K = SMOOTHING_CONSTANT (10.0), i.e. weight 1/K on the newest sample.
The error to a constant input shrinks by (1 - 1/K) per update.

Only the translation is filtered. Orientation, frames and stamp are taken
from the new observation unmodified. NaN/Inf propagate.
"""

from dataclasses import replace

from gantry_position_estimator import constants
from gantry_position_estimator.common.pose import Pose, Vector3


def smooth(new: Pose, old: Pose, smoothing_constant: float = constants.SMOOTHING_CONSTANT) -> Pose:
    """Blend `new` into `old` position; everything else comes from `new`."""
    n = new.translation
    o = old.translation

    translation = Vector3(
        x=o.x + (n.x - o.x) / smoothing_constant,
        y=o.y + (n.y - o.y) / smoothing_constant,
        z=o.z + (n.z - o.z) / smoothing_constant,
    )
    return replace(new, translation=translation)
