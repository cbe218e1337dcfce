"""
Configuration classes for the gantry position estimator.

Organizes parameters into logical groups for better maintainability.
Every group can be built from ROS node parameters or from a flat dict
using the same parameter names (YAML files, tests).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from gantry_position_estimator import constants


# Flat parameter names and defaults, declared on the node at startup.
DEFAULT_PARAMETERS: Dict[str, Any] = {
    "input_topic": constants.INPUT_TOPIC,
    "tf_topics": list(constants.TF_TOPICS),
    "ready_topic": constants.READY_TOPIC,
    "status_topic": constants.STATUS_TOPIC,
    "lock_service": constants.LOCK_SERVICE,
    "qos_depth": constants.QOS_DEPTH_DEFAULT,
    "publish_period_sec": constants.PUBLISH_PERIOD_SEC,
    "status_period_sec": constants.STATUS_PERIOD_SEC,
    "stale_threshold_sec": constants.STALE_THRESHOLD_SEC,
    "smoothing_constant": constants.SMOOTHING_CONSTANT,
    "facade_height": constants.FACADE_HEIGHT,
    "gantry_height": constants.GANTRY_HEIGHT,
    "rederive_on_expiry": False,
    "clear_agv_when_stale": False,
    "enable_upright_check": False,
    "upright_max_tilt": constants.UPRIGHT_MAX_TILT,
    "upright_min_z": constants.UPRIGHT_MIN_Z,
    "executor_threads": constants.EXECUTOR_THREADS_DEFAULT,
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off", ""):
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


@dataclass
class TopicConfig:
    """ROS topic and service configuration."""
    input_topic: str = constants.INPUT_TOPIC
    tf_topics: List[str] = field(default_factory=lambda: list(constants.TF_TOPICS))
    ready_topic: str = constants.READY_TOPIC
    status_topic: str = constants.STATUS_TOPIC
    lock_service: str = constants.LOCK_SERVICE
    qos_depth: int = constants.QOS_DEPTH_DEFAULT


@dataclass
class TimingConfig:
    """Periodic tick and staleness configuration."""
    publish_period_sec: float = constants.PUBLISH_PERIOD_SEC
    status_period_sec: float = constants.STATUS_PERIOD_SEC
    stale_threshold_sec: int = constants.STALE_THRESHOLD_SEC
    executor_threads: int = constants.EXECUTOR_THREADS_DEFAULT


@dataclass
class GeometryConfig:
    """Filter and derived-frame geometry."""
    smoothing_constant: float = constants.SMOOTHING_CONSTANT
    facade_height: float = constants.FACADE_HEIGHT
    gantry_height: float = constants.GANTRY_HEIGHT


@dataclass
class BehaviorConfig:
    """
    Optional behavior changes, all off by default.

    rederive_on_expiry: recompute facade/gantry/agv after a sweep removed
        a marker, so staleness reaches the derived frames immediately.
    clear_agv_when_stale: agv frame becomes absent once marker 5 is gone.
    enable_upright_check: drop observations whose marker is not upright.
    """
    rederive_on_expiry: bool = False
    clear_agv_when_stale: bool = False
    enable_upright_check: bool = False
    upright_max_tilt: float = constants.UPRIGHT_MAX_TILT
    upright_min_z: float = constants.UPRIGHT_MIN_Z


@dataclass
class EstimatorConfig:
    """Complete estimator configuration."""
    topics: TopicConfig = field(default_factory=TopicConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "EstimatorConfig":
        """Create configuration from flat parameter names; missing keys use defaults."""
        unknown = sorted(set(params) - set(DEFAULT_PARAMETERS))
        if unknown:
            raise ValueError(f"Unknown estimator parameters: {unknown}")

        p = {**DEFAULT_PARAMETERS, **params}

        topics = TopicConfig(
            input_topic=str(p["input_topic"]),
            tf_topics=[str(t) for t in p["tf_topics"]],
            ready_topic=str(p["ready_topic"]),
            status_topic=str(p["status_topic"]),
            lock_service=str(p["lock_service"]),
            qos_depth=int(p["qos_depth"]),
        )

        timing = TimingConfig(
            publish_period_sec=float(p["publish_period_sec"]),
            status_period_sec=float(p["status_period_sec"]),
            stale_threshold_sec=int(p["stale_threshold_sec"]),
            executor_threads=int(p["executor_threads"]),
        )

        geometry = GeometryConfig(
            smoothing_constant=float(p["smoothing_constant"]),
            facade_height=float(p["facade_height"]),
            gantry_height=float(p["gantry_height"]),
        )

        behavior = BehaviorConfig(
            rederive_on_expiry=_as_bool(p["rederive_on_expiry"]),
            clear_agv_when_stale=_as_bool(p["clear_agv_when_stale"]),
            enable_upright_check=_as_bool(p["enable_upright_check"]),
            upright_max_tilt=float(p["upright_max_tilt"]),
            upright_min_z=float(p["upright_min_z"]),
        )

        return cls(topics=topics, timing=timing, geometry=geometry, behavior=behavior)

    @classmethod
    def from_ros_node(cls, node) -> "EstimatorConfig":
        """Create configuration from ROS node parameters (declared via declare_parameters)."""
        params = {name: node.get_parameter(name).value for name in DEFAULT_PARAMETERS}
        return cls.from_dict(params)

    def validate(self) -> None:
        """
        Fail fast on settings the estimator cannot run with.

        Raises ValueError if validation fails.
        """
        if not self.topics.input_topic:
            raise ValueError("input_topic must be non-empty")
        if not self.topics.tf_topics or not all(self.topics.tf_topics):
            raise ValueError("tf_topics must list at least one non-empty topic")
        if not self.topics.ready_topic or not self.topics.lock_service:
            raise ValueError("ready_topic and lock_service must be non-empty")
        if self.topics.qos_depth <= 0:
            raise ValueError("qos_depth must be > 0")
        if self.timing.publish_period_sec <= 0.0:
            raise ValueError("publish_period_sec must be > 0")
        if self.timing.status_period_sec <= 0.0:
            raise ValueError("status_period_sec must be > 0")
        if self.timing.stale_threshold_sec < 0:
            raise ValueError("stale_threshold_sec must be >= 0")
        if self.timing.executor_threads <= 0:
            raise ValueError("executor_threads must be > 0")
        if self.geometry.smoothing_constant <= 0.0:
            raise ValueError("smoothing_constant must be > 0")
        if not 0.0 <= self.behavior.upright_max_tilt <= 1.0:
            raise ValueError("upright_max_tilt must be within [0, 1]")
        if not 0.0 <= self.behavior.upright_min_z <= 1.0:
            raise ValueError("upright_min_z must be within [0, 1]")


def declare_parameters(node) -> None:
    """Declare every estimator parameter on the node with its default."""
    for name, default in DEFAULT_PARAMETERS.items():
        node.declare_parameter(name, default)

