"""Per-object track: frame history, motion state and reconstruction bookkeeping."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional

import numpy as np

from configs.settings import InstRecConfig
from contracts import TrackFrame
from exceptions import EmptyTrackError, FrameOrderError, MissingReconstructionError
from log_config.logger import get_logger
from motion.provider import SparseSFProvider
from motion.rigid import compose_chain, invert_transform, translation_magnitude
from reconstruction.handle import ReconstructionHandle
from reconstruction.lifecycle import compute_reap_weight
from track.matching import score_match
from track.render import render_ascii_timeline
from track.state import TrackState, TrackStateMachine, state_label

logger = get_logger(__name__)


class Track:
    """A detected object's track through multiple frames.

    Frames are kept in non-decreasing frame index order. There can be gaps,
    for frames in which this particular object was not detected.

    The track may hold a share of a reconstruction volume. The driver
    allocates it, hands it over with `attach_reconstruction` and must call
    `close()` when the track is discarded.
    """

    def __init__(self, track_id: int, config: Optional[InstRecConfig] = None) -> None:
        self._track_id = track_id
        self._config = config or InstRecConfig()
        self._frames: List[TrackFrame] = []
        self._state_machine = TrackStateMachine(self._config.state)
        self._reconstruction: Optional[ReconstructionHandle] = None
        self.needs_cleanup = False
        self._fused_frames = 0

        # Used for the constant velocity assumption in tracking.
        self._last_known_motion: Optional[np.ndarray] = None
        self._last_known_motion_time = -1

    # Frames

    @property
    def track_id(self) -> int:
        return self._track_id

    @property
    def frames(self) -> List[TrackFrame]:
        return list(self._frames)

    @property
    def size(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def frame(self, index: int) -> TrackFrame:
        return self._frames[index]

    def add_frame(self, frame: TrackFrame) -> None:
        if self._frames and frame.frame_index < self._frames[-1].frame_index:
            raise FrameOrderError(
                f"Track [{self._track_id}] ends at frame {self._frames[-1].frame_index}, "
                f"cannot append frame {frame.frame_index}",
                track_id=self._track_id,
            )
        self._frames.append(frame)

    @property
    def last_frame(self) -> TrackFrame:
        self._require_frames("last frame")
        return self._frames[-1]

    @property
    def start_time(self) -> int:
        self._require_frames("start time")
        return self._frames[0].frame_index

    @property
    def end_time(self) -> int:
        self._require_frames("end time")
        return self._frames[-1].frame_index

    @property
    def class_name(self) -> str:
        self._require_frames("class")
        return self._frames[-1].class_name

    def _require_frames(self, what: str) -> None:
        if not self._frames:
            raise EmptyTrackError(
                f"Track [{self._track_id}] needs at least one frame to determine its {what}",
                track_id=self._track_id,
            )

    # Matching and state

    def score_match(self, candidate: TrackFrame) -> float:
        """Evaluate how well a new frame would continue this track.

        Returns:
            Score in [0, 1]; 0 means no match at all, 1 a perfect match
        """
        return score_match(self.last_frame, candidate, self._config.matching)

    @property
    def state(self) -> TrackState:
        return self._state_machine.state

    @property
    def state_label(self) -> str:
        return state_label(self._state_machine.state)

    @property
    def uncertain_frames(self) -> int:
        return self._state_machine.uncertain_frames

    def update(
        self,
        egomotion: np.ndarray,
        flow_provider: SparseSFProvider,
        verbose: bool = False,
    ) -> None:
        """Estimate the newest frame's relative pose and update the track state.

        The stored relative pose is ``inv(egomotion) @ motion``. A static
        object therefore ends up near identity only if both transforms map
        points the same way.

        Args:
            egomotion: 4x4 point transform taking coordinates in the previous
                camera frame to the current camera frame. This is not the
                camera pose; passing camera-to-world poses doubles the residual.
            flow_provider: Source of the object's apparent motion, as a point
                transform from the previous to the current camera frame
            verbose: Log the residual, the transition and the track summary at
                INFO instead of DEBUG
        """
        current = self.last_frame
        relative_pose = None
        if len(self._frames) >= 2:
            previous = self._frames[-2]
            motion = flow_provider.estimate_motion(
                previous.frame_index, current.frame_index, current.bbox
            )
            if motion is not None:
                # Remove camera motion; a static object ends up near identity.
                egomotion = np.asarray(egomotion, dtype=np.float64)
                relative_pose = invert_transform(egomotion) @ np.asarray(motion, dtype=np.float64)

        residual = translation_magnitude(relative_pose) if relative_pose is not None else None
        old_state = self._state_machine.state
        new_state = self._state_machine.step(residual)

        self._frames[-1] = replace(current, relative_pose=relative_pose)
        if relative_pose is not None:
            self._last_known_motion = relative_pose
            self._last_known_motion_time = current.frame_index

        log = logger.info if verbose else logger.debug
        residual_text = f"{residual:.4f}" if residual is not None else "n/a"
        log(
            f"Track [{self._track_id}] frame {current.frame_index}: residual={residual_text}, "
            f"{state_label(old_state)} -> {state_label(new_state)} "
            f"(uncertain frames: {self._state_machine.uncertain_frames})"
        )
        if verbose:
            logger.info(f"Track summary: {self.to_dict()}")

    @property
    def last_known_motion(self) -> Optional[np.ndarray]:
        return None if self._last_known_motion is None else self._last_known_motion.copy()

    @property
    def last_known_motion_time(self) -> int:
        return self._last_known_motion_time

    def extrapolate_motion(self, frame_index: int) -> Optional[np.ndarray]:
        """Constant-velocity stand-in for a missing relative pose.

        Returns the last known frame-to-frame motion, or None if there is none
        or it is older than `max_motion_extrapolation_frames`.
        """
        if self._last_known_motion is None:
            return None
        age = frame_index - self._last_known_motion_time
        if age < 0 or age > self._config.state.max_motion_extrapolation_frames:
            return None
        return self._last_known_motion.copy()

    # Poses

    def get_frame_pose(self, index: int, anchor: int = 0) -> Optional[np.ndarray]:
        """Pose of frame `index` relative to frame `anchor` (the first frame by default).

        Composes the relative poses of frames anchor+1..index and returns None
        if any of them is unknown.
        """
        if not 0 <= anchor <= index < len(self._frames):
            raise IndexError(
                f"Invalid pose query for track [{self._track_id}] with {len(self._frames)} "
                f"frames: index={index}, anchor={anchor}"
            )
        return compose_chain(frame.relative_pose for frame in self._frames[anchor + 1 : index + 1])

    def get_first_fusable_frame_index(self) -> int:
        """Index of the frame right before the first one with a known relative pose.

        Returns -1 if no frame has a known relative pose.
        """
        for i, frame in enumerate(self._frames):
            if frame.has_relative_pose:
                return max(0, i - 1)
        return -1

    # Reconstruction

    def eligible_for_reconstruction(self) -> bool:
        # For now, use this simple heuristic: at least k frames in track.
        return len(self._frames) >= self._config.reconstruction.min_frames

    @property
    def has_reconstruction(self) -> bool:
        return self._reconstruction is not None

    @property
    def reconstruction(self) -> Optional[ReconstructionHandle]:
        return self._reconstruction

    def attach_reconstruction(self, handle: ReconstructionHandle) -> None:
        """Take a share of a reconstruction allocated by the driver."""
        if self._reconstruction is handle:
            return
        # Share first so a released handle leaves the current one untouched.
        shared = handle.share()
        if self._reconstruction is not None:
            logger.debug(f"Track [{self._track_id}] replaces its reconstruction")
            self._reconstruction.release()
        self._reconstruction = shared

    def detach_reconstruction(self) -> bool:
        """Give up this track's share of its reconstruction.

        Returns:
            True if that freed the volume
        """
        if self._reconstruction is None:
            return False
        handle, self._reconstruction = self._reconstruction, None
        self.needs_cleanup = False
        return handle.release()

    @property
    def fused_frames(self) -> int:
        return self._fused_frames

    def count_fused_frame(self) -> None:
        self._fused_frames += 1

    def reap_reconstruction(self) -> int:
        """Run a bounded decay pass on the reconstruction.

        Returns:
            The maximum voxel weight that was decayed
        """
        if self._reconstruction is None:
            raise MissingReconstructionError(
                f"Track [{self._track_id}] has no reconstruction to reap"
            )
        reap_weight = compute_reap_weight(self._fused_frames, self._config.reconstruction)
        logger.info(f"Reaping track [{self._track_id}] with max weight [{reap_weight}].")
        self._reconstruction.reap(reap_weight)
        return reap_weight

    def close(self) -> None:
        """Release resources still held by the track."""
        if self._reconstruction is not None:
            logger.warning(f"Deleting track [{self._track_id}] and its associated reconstruction!")
            self.detach_reconstruction()

    # Diagnostics

    def get_ascii_art(self) -> str:
        return render_ascii_timeline(self._track_id, (frame.frame_index for frame in self._frames))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "track_id": self._track_id,
            "class_name": self._frames[-1].class_name if self._frames else None,
            "state": state_label(self.state),
            "size": len(self._frames),
            "start_time": self._frames[0].frame_index if self._frames else None,
            "end_time": self._frames[-1].frame_index if self._frames else None,
            "fused_frames": self._fused_frames,
            "has_reconstruction": self.has_reconstruction,
            "needs_cleanup": self.needs_cleanup,
        }

    def __repr__(self) -> str:
        return f"Track(id={self._track_id}, state={self.state_label}, size={len(self._frames)})"
