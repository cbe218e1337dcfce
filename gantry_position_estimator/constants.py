"""
Gantry Position Estimator Constants.

All magic numbers are centralized here with clear documentation.
"""

# =============================================================================
# Marker Identifiers
# =============================================================================

# Markers 0 and 1 define the facade position
MARKER_FACADE_LEFT = 0
MARKER_FACADE_RIGHT = 1

# Markers 15 and 2 define the gantry position
MARKER_GANTRY_A = 15
MARKER_GANTRY_B = 2

# Marker 5 is the agv
MARKER_AGV = 5

# Child frame prefix used by the detector ("aruco_0", "aruco_15", ...)
MARKER_FRAME_PREFIX = "aruco_"

# =============================================================================
# Output Frames
# =============================================================================

FACADE_FRAME = "facade_aruco"
GANTRY_FRAME = "gantry_aruco"
AGV_FRAME = "agv_aruco"

FACADE_LOCKED_FRAME = "facade_locked"
GANTRY_LOCKED_FRAME = "gantry_locked"

# =============================================================================
# Geometry
# =============================================================================

# Hardcoded output heights (meters), replacing the measured z
FACADE_HEIGHT = 3.57
GANTRY_HEIGHT = 1.93

# =============================================================================
# Filtering and Staleness
# =============================================================================

# EMA divisor: new = old + (obs - old) / K, i.e. weight 0.1 on the newest sample
SMOOTHING_CONSTANT = 10.0

# Marker slots older than this (whole seconds) are emptied by the sweeper
STALE_THRESHOLD_SEC = 5

# =============================================================================
# Upright Plausibility Check (disabled by default)
# =============================================================================

# Rotated marker z-axis must stay within these bounds to count as upright
UPRIGHT_MAX_TILT = 0.2
UPRIGHT_MIN_Z = 0.9

# Quaternions with a smaller norm cannot be interpreted as a rotation
QUATERNION_NORM_EPSILON = 1e-12

# =============================================================================
# ROS Interfaces
# =============================================================================

INPUT_TOPIC = "/aruco"
TF_TOPICS = ["/rita/tf", "/tf"]
READY_TOPIC = "measured"
STATUS_TOPIC = "~/status"
LOCK_SERVICE = "trigger"

# Sweep + publish cadence (10 Hz)
PUBLISH_PERIOD_SEC = 0.1

# JSON status cadence
STATUS_PERIOD_SEC = 5.0

# Observation stream, periodic tick and lock service run concurrently
EXECUTOR_THREADS_DEFAULT = 3

QOS_DEPTH_DEFAULT = 10
