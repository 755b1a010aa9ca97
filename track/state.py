"""Track motion state and its hysteresis policy."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from configs.settings import StateConfig
from exceptions import UnknownTrackStateError


class TrackState(str, Enum):
    STATIC = "STATIC"
    DYNAMIC = "DYNAMIC"
    UNCERTAIN = "UNCERTAIN"


class MotionEvidence(str, Enum):
    STATIC = "STATIC"
    DYNAMIC = "DYNAMIC"
    UNAVAILABLE = "UNAVAILABLE"


_STATE_LABELS = {
    TrackState.STATIC: "Static",
    TrackState.DYNAMIC: "Dynamic",
    TrackState.UNCERTAIN: "Uncertain",
}


def state_label(state: TrackState) -> str:
    # Plain strings hash like the str-valued members, so reject them explicitly.
    if not isinstance(state, TrackState):
        raise UnknownTrackStateError(f"Unsupported track state: {state!r}")
    try:
        return _STATE_LABELS[state]
    except KeyError:
        raise UnknownTrackStateError(f"Unsupported track state: {state!r}") from None


class TrackStateMachine:
    """Static/dynamic classification with hysteresis.

    Leaving UNCERTAIN takes a single frame of evidence. A STATIC or DYNAMIC
    track only falls back to UNCERTAIN after more consecutive frames without a
    motion estimate than its state tolerates, and a DYNAMIC track is only
    demoted to STATIC after `dynamic_demotion_frames` consecutive low-residual
    frames (never, if that is None).
    """

    def __init__(self, config: Optional[StateConfig] = None) -> None:
        self._config = config or StateConfig()
        self._state = TrackState.UNCERTAIN
        self._uncertain_frames = 0
        self._low_residual_run = 0

    @property
    def state(self) -> TrackState:
        return self._state

    @property
    def uncertain_frames(self) -> int:
        return self._uncertain_frames

    @property
    def low_residual_run(self) -> int:
        return self._low_residual_run

    def classify(self, residual: Optional[float]) -> MotionEvidence:
        if residual is None:
            return MotionEvidence.UNAVAILABLE
        if residual > self._config.translation_error_threshold:
            return MotionEvidence.DYNAMIC
        return MotionEvidence.STATIC

    def step(self, residual: Optional[float]) -> TrackState:
        """Feed one frame's residual translation (None if unavailable)."""
        evidence = self.classify(residual)

        if evidence is MotionEvidence.UNAVAILABLE:
            self._low_residual_run = 0
            if self._state is not TrackState.UNCERTAIN:
                self._uncertain_frames += 1
                if self._state is TrackState.STATIC:
                    limit = self._config.max_uncertain_frames_static
                else:
                    limit = self._config.max_uncertain_frames_dynamic
                if self._uncertain_frames > limit:
                    self._enter(TrackState.UNCERTAIN)
            return self._state

        self._uncertain_frames = 0
        if evidence is MotionEvidence.DYNAMIC:
            self._enter(TrackState.DYNAMIC)
        elif self._state is TrackState.DYNAMIC:
            self._low_residual_run += 1
            demotion = self._config.dynamic_demotion_frames
            if demotion is not None and self._low_residual_run >= demotion:
                self._enter(TrackState.STATIC)
        else:
            self._enter(TrackState.STATIC)
        return self._state

    def _enter(self, state: TrackState) -> None:
        self._state = state
        self._uncertain_frames = 0
        self._low_residual_run = 0
