import os
from typing import Any, Callable, Dict, Optional

import numpy as np
import pytest
import yaml

from gantry_position_estimator.common.pose import Pose, Quaternion, Stamp, Vector3
from gantry_position_estimator.config import EstimatorConfig


def _load_params_yaml(path: str, node_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a ROS 2 parameter file, handling the ros__parameters wrapper.

    Accepts `/**:` or `<node_name>:` as the top-level key.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    for key in ("/**", node_name):
        if key and key in data and "ros__parameters" in (data.get(key) or {}):
            return dict(data[key]["ros__parameters"] or {})

    wrapped = [k for k, v in data.items() if isinstance(v, dict) and "ros__parameters" in v]
    if wrapped:
        raise ValueError(
            f"No ros__parameters section for {node_name or '/**'!r} in {path}"
        )
    return dict(data)


def _same_rotation(a: Quaternion, b: Quaternion, atol: float = 1e-9) -> bool:
    """True if both quaternions describe the same rotation (q and -q are equal)."""
    qa = np.array([a.w, a.x, a.y, a.z], dtype=np.float64)
    qb = np.array([b.w, b.x, b.y, b.z], dtype=np.float64)
    qa = qa / np.linalg.norm(qa)
    qb = qb / np.linalg.norm(qb)
    return bool(abs(abs(float(np.dot(qa, qb))) - 1.0) <= atol)


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def params_path() -> str:
    """Path to the packaged parameter file."""
    test_dir = os.path.dirname(__file__)
    pkg_root = os.path.dirname(test_dir)
    return os.path.join(pkg_root, "config", "gantry_position_estimator.yaml")


@pytest.fixture
def load_params() -> Callable[..., Dict[str, Any]]:
    """Parameter file loader: load_params(path, node_name=None)."""
    return _load_params_yaml


@pytest.fixture
def default_config() -> EstimatorConfig:
    return EstimatorConfig()


@pytest.fixture
def hardened_config() -> EstimatorConfig:
    """Staleness reaches every derived frame immediately."""
    return EstimatorConfig.from_dict({
        "rederive_on_expiry": True,
        "clear_agv_when_stale": True,
    })


# =============================================================================
# Pose Fixtures
# =============================================================================


@pytest.fixture
def make_pose() -> Callable[..., Pose]:
    """
    Factory for marker observations.

    Usage:
        def test_something(make_pose):
            pose = make_pose(0, x=1.0, sec=100)
    """
    def _make(
        marker: int,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        sec: int = 100,
        nanosec: int = 0,
        rotation: Quaternion = Quaternion(),
        frame_id: str = "camera",
    ) -> Pose:
        return Pose(
            child_frame_id=f"aruco_{marker}",
            translation=Vector3(x=x, y=y, z=z),
            rotation=rotation,
            frame_id=frame_id,
            stamp=Stamp(sec=sec, nanosec=nanosec),
        )

    return _make


@pytest.fixture
def same_rotation() -> Callable[[Quaternion, Quaternion], bool]:
    """Rotation equality up to quaternion sign."""
    return _same_rotation
