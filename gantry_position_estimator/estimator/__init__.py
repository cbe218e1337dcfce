"""
Estimator core.

Marker slots, smoothing, staleness sweeps, derived frames and the locked
snapshot. Pure Python on numpy/scipy; no ROS imports.
"""

from gantry_position_estimator.estimator.derive import (
    derive_agv,
    derive_facade,
    derive_gantry,
    yaw_rotation,
)
from gantry_position_estimator.estimator.markers import (
    MarkerEvent,
    MarkerId,
    MarkerSlotStore,
    sweep_stale,
)
from gantry_position_estimator.estimator.smoothing import smooth
from gantry_position_estimator.estimator.state import (
    DerivedTransforms,
    FrameEstimator,
    LockResult,
    Publication,
)
from gantry_position_estimator.estimator.validation import (
    AcceptAll,
    ObservationCheck,
    UprightMarkerCheck,
)

__all__ = [
    "AcceptAll",
    "DerivedTransforms",
    "FrameEstimator",
    "LockResult",
    "MarkerEvent",
    "MarkerId",
    "MarkerSlotStore",
    "ObservationCheck",
    "Publication",
    "UprightMarkerCheck",
    "derive_agv",
    "derive_facade",
    "derive_gantry",
    "smooth",
    "sweep_stale",
    "yaw_rotation",
]
