"""Custom exception classes for instrec."""

from __future__ import annotations

from typing import Optional


class InstRecError(Exception):
    """Base exception for all instrec errors."""

    pass


class TrackError(InstRecError):
    """Base exception for track-related errors."""

    def __init__(self, message: str, track_id: Optional[int] = None):
        self.track_id = track_id
        super().__init__(message)


class EmptyTrackError(TrackError):
    """Raised when an operation needs at least one frame but the track has none."""

    pass


class FrameOrderError(TrackError):
    """Raised when a frame older than the track's end time is appended."""

    pass


class UnknownTrackStateError(TrackError):
    """Raised when a track state has no known label."""

    pass


class ReconstructionError(InstRecError):
    """Base exception for reconstruction lifecycle errors."""

    pass


class MissingReconstructionError(ReconstructionError):
    """Raised when a volume operation is requested on a track without a volume."""

    pass


class ReleasedHandleError(ReconstructionError):
    """Raised when a reconstruction handle is used after its last release."""

    pass


class MotionEstimationError(InstRecError):
    """Raised when motion estimation receives malformed input."""

    pass


class ConfigError(InstRecError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)
