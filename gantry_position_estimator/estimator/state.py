"""
Shared estimator state and its critical section.

FrameEstimator owns the marker slots, the derived frames, the locked
snapshot and the counters behind a single threading.Lock. Every public
method takes the lock exactly once and returns immutable values, so the
observation callback, the periodic tick and the lock service can run on
different executor threads without lost updates or torn reads.

Derivation policy:
    - Every accepted observation of a tracked marker recomputes facade,
      gantry and agv, whichever marker it was.
    - Sweeps do not recompute unless `rederive_on_expiry` is set. With the
      default, facade/gantry keep their last value after a marker expires
      until the next observation arrives.
    - agv keeps its last value when marker 5 is absent unless
      `clear_agv_when_stale` is set.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

from gantry_position_estimator import constants
from gantry_position_estimator.common.pose import Pose, Stamp
from gantry_position_estimator.config import EstimatorConfig
from gantry_position_estimator.estimator.derive import derive_agv, derive_facade, derive_gantry
from gantry_position_estimator.estimator.markers import (
    EVENT_REJECTED,
    MarkerEvent,
    MarkerId,
    MarkerSlotStore,
    sweep_stale,
)
from gantry_position_estimator.estimator.validation import (
    AcceptAll,
    ObservationCheck,
    UprightMarkerCheck,
)


@dataclass(frozen=True)
class DerivedTransforms:
    facade: Optional[Pose] = None
    gantry: Optional[Pose] = None
    agv: Optional[Pose] = None


@dataclass(frozen=True)
class LockResult:
    """Which frames were available when the lock was taken."""
    facade_locked: bool
    gantry_locked: bool

    @property
    def message(self) -> str:
        return (
            f"gantry: {str(self.gantry_locked).lower()}, "
            f"facade: {str(self.facade_locked).lower()}"
        )


@dataclass(frozen=True)
class Publication:
    """Everything one tick publishes, read in one critical section."""
    live: List[Pose]
    locked: List[Pose]
    ready: bool


@dataclass
class _Counters:
    observations: int = 0
    ignored: int = 0
    rejected: int = 0
    expired: int = 0
    locks: int = 0


@dataclass
class SharedState:
    slots: MarkerSlotStore = field(default_factory=MarkerSlotStore)
    facade: Optional[Pose] = None
    gantry: Optional[Pose] = None
    agv: Optional[Pose] = None
    locked_facade: Optional[Pose] = None
    locked_gantry: Optional[Pose] = None
    counters: _Counters = field(default_factory=_Counters)


def make_observation_check(config: EstimatorConfig) -> ObservationCheck:
    behavior = config.behavior
    if behavior.enable_upright_check:
        return UprightMarkerCheck(behavior.upright_max_tilt, behavior.upright_min_z)
    return AcceptAll()


class FrameEstimator:
    """Marker fusion core: slots, derived frames and the locked snapshot."""

    def __init__(
        self,
        config: Optional[EstimatorConfig] = None,
        observation_check: Optional[ObservationCheck] = None,
    ) -> None:
        self.config = config if config is not None else EstimatorConfig()
        self.observation_check = (
            observation_check
            if observation_check is not None
            else make_observation_check(self.config)
        )
        self._lock = threading.Lock()
        self._state = SharedState()
        self._start_time = time.time()

    # -------------------------------------------------------------------------
    # Writers
    # -------------------------------------------------------------------------

    def observe(self, observation: Pose) -> List[MarkerEvent]:
        """
        Feed one marker observation, keyed by its child frame ("aruco_N").

        Untracked frames are ignored. Rejected observations change nothing
        but the counters.
        """
        marker_id = MarkerId.from_frame_name(observation.child_frame_id)

        with self._lock:
            if marker_id is None:
                self._state.counters.ignored += 1
                return []

            if not self.observation_check(observation):
                self._state.counters.rejected += 1
                return [MarkerEvent(EVENT_REJECTED, marker_id)]

            self._state.counters.observations += 1
            event = self._state.slots.update(
                marker_id, observation, self.config.geometry.smoothing_constant
            )
            self._rederive()

        return [event] if event is not None else []

    def sweep(self, now: Stamp) -> List[MarkerEvent]:
        """Empty every slot older than the staleness threshold at `now`."""
        with self._lock:
            events = sweep_stale(
                self._state.slots, now, self.config.timing.stale_threshold_sec
            )
            self._state.counters.expired += len(events)
            if events and self.config.behavior.rederive_on_expiry:
                self._rederive()
        return events

    def lock(self) -> LockResult:
        """
        Copy the current facade and gantry frames into the locked snapshot.

        Absent frames overwrite the snapshot with absence.
        """
        with self._lock:
            state = self._state
            state.locked_facade = state.facade
            state.locked_gantry = state.gantry
            state.counters.locks += 1
            return LockResult(
                facade_locked=state.locked_facade is not None,
                gantry_locked=state.locked_gantry is not None,
            )

    # -------------------------------------------------------------------------
    # Readers
    # -------------------------------------------------------------------------

    def publication(self, now: Stamp) -> Publication:
        """Live frames, locked frames renamed and stamped with `now`, readiness."""
        with self._lock:
            state = self._state
            live = [t for t in (state.facade, state.gantry, state.agv) if t is not None]

            locked = []
            if state.locked_facade is not None:
                locked.append(
                    state.locked_facade.renamed(constants.FACADE_LOCKED_FRAME).restamped(now)
                )
            if state.locked_gantry is not None:
                locked.append(
                    state.locked_gantry.renamed(constants.GANTRY_LOCKED_FRAME).restamped(now)
                )

            ready = state.facade is not None and state.gantry is not None
        return Publication(live=live, locked=locked, ready=ready)

    def transforms(self) -> DerivedTransforms:
        with self._lock:
            return DerivedTransforms(
                facade=self._state.facade,
                gantry=self._state.gantry,
                agv=self._state.agv,
            )

    def locked(self) -> DerivedTransforms:
        with self._lock:
            return DerivedTransforms(
                facade=self._state.locked_facade,
                gantry=self._state.locked_gantry,
            )

    def marker(self, marker_id: MarkerId) -> Optional[Pose]:
        with self._lock:
            return self._state.slots.get(marker_id)

    def status(self) -> dict:
        """JSON-ready counters and availability."""
        with self._lock:
            state = self._state
            c = state.counters
            return {
                "elapsed_sec": time.time() - self._start_time,
                "observations": c.observations,
                "ignored": c.ignored,
                "rejected": c.rejected,
                "expired": c.expired,
                "locks": c.locks,
                "live_markers": [int(m) for m in state.slots.live_markers()],
                "facade": state.facade is not None,
                "gantry": state.gantry is not None,
                "agv": state.agv is not None,
                "facade_locked": state.locked_facade is not None,
                "gantry_locked": state.locked_gantry is not None,
            }

    # -------------------------------------------------------------------------
    # Internals (caller holds the lock)
    # -------------------------------------------------------------------------

    def _rederive(self) -> None:
        state = self._state
        slots = state.slots
        geometry = self.config.geometry

        state.facade = derive_facade(
            slots.get(MarkerId.FACADE_LEFT),
            slots.get(MarkerId.FACADE_RIGHT),
            geometry.facade_height,
        )
        state.gantry = derive_gantry(
            slots.get(MarkerId.GANTRY_A),
            slots.get(MarkerId.GANTRY_B),
            geometry.gantry_height,
        )

        agv = derive_agv(slots.get(MarkerId.AGV))
        if agv is not None or self.config.behavior.clear_agv_when_stale:
            state.agv = agv
