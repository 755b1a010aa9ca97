"""Per-object track management."""

from .matching import score_match
from .render import render_ascii_timeline
from .state import MotionEvidence, TrackState, TrackStateMachine, state_label
from .track import Track

__all__ = [
    "MotionEvidence",
    "Track",
    "TrackState",
    "TrackStateMachine",
    "render_ascii_timeline",
    "score_match",
    "state_label",
]
