"""Core data contracts for detections, instance views and track frames."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

import numpy as np

Point = Tuple[float, float]


def _as_transform(matrix: Any, dtype: type, name: str) -> np.ndarray:
    transform = np.array(matrix, dtype=dtype)
    if transform.shape != (4, 4):
        raise ValueError(f"{name} must be a 4x4 matrix, got shape {transform.shape}")
    return transform


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned image region in (x1, y1, x2, y2) pixel coordinates."""

    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self) -> None:
        if self.x2 < self.x1 or self.y2 < self.y1:
            raise ValueError(f"Degenerate bounding box: {self}")

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return ((self.x1 + self.x2) / 2.0, (self.y1 + self.y2) / 2.0)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    def contains(self, point: Point) -> bool:
        x, y = point
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def iou(self, other: BoundingBox, eps: float = 1e-7) -> float:
        """Intersection over union of two boxes."""
        inter_w = max(0.0, min(self.x2, other.x2) - max(self.x1, other.x1))
        inter_h = max(0.0, min(self.y2, other.y2) - max(self.y1, other.y1))
        inter = inter_w * inter_h
        union = self.area + other.area - inter
        return float(inter / (union + eps))


@dataclass(frozen=True)
class InstanceDetection:
    class_name: str
    bbox: BoundingBox
    confidence: float = 1.0
    class_id: Optional[int] = None


@dataclass(frozen=True)
class InstanceView:
    """One instance segmentation result; the mask is owned by the detector."""

    detection: InstanceDetection
    mask: Any = None

    @property
    def class_name(self) -> str:
        return self.detection.class_name

    @property
    def bbox(self) -> BoundingBox:
        return self.detection.bbox


@dataclass(frozen=True, eq=False)
class TrackFrame:
    """One observation of one object at one frame.

    `relative_pose` is the object's motion since the previous frame of the same
    track, with camera motion removed. It is None when it could not be estimated.
    """

    frame_index: int
    instance_view: InstanceView
    camera_pose: np.ndarray = field(default_factory=lambda: np.eye(4, dtype=np.float32))
    relative_pose: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "camera_pose", _as_transform(self.camera_pose, np.float32, "camera_pose")
        )
        if self.relative_pose is not None:
            object.__setattr__(
                self,
                "relative_pose",
                _as_transform(self.relative_pose, np.float64, "relative_pose"),
            )

    @property
    def has_relative_pose(self) -> bool:
        return self.relative_pose is not None

    @property
    def class_name(self) -> str:
        return self.instance_view.class_name

    @property
    def bbox(self) -> BoundingBox:
        return self.instance_view.bbox
