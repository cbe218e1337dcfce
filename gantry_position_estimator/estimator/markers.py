"""
Marker slot store.

One optional slot per tracked marker. A slot is empty until the first
observation arrives, holds the smoothed pose afterwards, and is emptied
again by `expire` once its stamp is too old.

The store is not thread-safe; FrameEstimator owns it and serializes access.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional

from gantry_position_estimator import constants
from gantry_position_estimator.common.pose import Pose, Stamp
from gantry_position_estimator.estimator.smoothing import smooth


class MarkerId(IntEnum):
    """The closed set of tracked markers, named by role."""
    FACADE_LEFT = constants.MARKER_FACADE_LEFT
    FACADE_RIGHT = constants.MARKER_FACADE_RIGHT
    GANTRY_B = constants.MARKER_GANTRY_B
    GANTRY_A = constants.MARKER_GANTRY_A
    AGV = constants.MARKER_AGV

    @property
    def frame_name(self) -> str:
        return f"{constants.MARKER_FRAME_PREFIX}{int(self)}"

    @classmethod
    def from_frame_name(cls, name: str) -> Optional["MarkerId"]:
        """Map "aruco_N" to a MarkerId; None for anything not tracked."""
        return _BY_FRAME_NAME.get(name)


_BY_FRAME_NAME: Dict[str, MarkerId] = {m.frame_name: m for m in MarkerId}


# MarkerEvent.kind values
EVENT_LIVE = "live"
EVENT_STALE = "stale"
EVENT_REJECTED = "rejected"


@dataclass(frozen=True)
class MarkerEvent:
    """A change in marker liveness, surfaced to the caller for logging."""
    kind: str
    marker_id: MarkerId

    def describe(self) -> str:
        if self.kind == EVENT_LIVE:
            return f"marker is live {self.marker_id.frame_name}"
        if self.kind == EVENT_STALE:
            return f"stale marker {int(self.marker_id)}, removing"
        return f"bad marker: {self.marker_id.frame_name}"


class MarkerSlotStore:
    """Latest smoothed pose per marker, or None."""

    def __init__(self) -> None:
        self._slots: Dict[MarkerId, Optional[Pose]] = {m: None for m in MarkerId}

    def get(self, marker_id: MarkerId) -> Optional[Pose]:
        return self._slots[marker_id]

    def is_live(self, marker_id: MarkerId) -> bool:
        return self._slots[marker_id] is not None

    def live_markers(self) -> List[MarkerId]:
        return [m for m, pose in self._slots.items() if pose is not None]

    def update(
        self,
        marker_id: MarkerId,
        observation: Pose,
        smoothing_constant: float = constants.SMOOTHING_CONSTANT,
    ) -> Optional[MarkerEvent]:
        """
        Accept a new observation for a marker.

        An empty slot takes the observation verbatim and reports the marker
        live. An occupied slot is replaced by smooth(observation, old).
        """
        old = self._slots[marker_id]
        if old is None:
            self._slots[marker_id] = observation
            return MarkerEvent(EVENT_LIVE, marker_id)

        self._slots[marker_id] = smooth(observation, old, smoothing_constant)
        return None

    def expire(
        self,
        marker_id: MarkerId,
        now: Stamp,
        threshold_sec: int = constants.STALE_THRESHOLD_SEC,
    ) -> Optional[MarkerEvent]:
        """
        Empty the slot if it is older than `threshold_sec` whole seconds.

        Nanoseconds are ignored on both sides. Expiring an empty slot is a no-op.
        """
        pose = self._slots[marker_id]
        if pose is None:
            return None
        if now.sec - pose.stamp.sec > threshold_sec:
            self._slots[marker_id] = None
            return MarkerEvent(EVENT_STALE, marker_id)
        return None


def sweep_stale(
    store: MarkerSlotStore,
    now: Stamp,
    threshold_sec: int = constants.STALE_THRESHOLD_SEC,
) -> List[MarkerEvent]:
    """Run `expire` on every slot with one shared `now` and threshold."""
    events = []
    for marker_id in MarkerId:
        event = store.expire(marker_id, now, threshold_sec)
        if event is not None:
            events.append(event)
    return events
