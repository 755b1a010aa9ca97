"""Shared data contracts for instance tracking."""

from .types import (
    BoundingBox,
    InstanceDetection,
    InstanceView,
    TrackFrame,
)

__all__ = [
    "BoundingBox",
    "InstanceDetection",
    "InstanceView",
    "TrackFrame",
]
