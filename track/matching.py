"""Pairwise match scoring between a track's last frame and a candidate frame."""

from __future__ import annotations

import math
from typing import Optional

from configs.settings import MatchingConfig
from contracts import BoundingBox, TrackFrame


def proximity(a: BoundingBox, b: BoundingBox) -> float:
    """1 for coincident centers, falling to 0 at one mean box diagonal apart."""
    scale = (a.diagonal + b.diagonal) / 2.0
    if scale <= 0.0:
        return 1.0 if a.center == b.center else 0.0
    (ax, ay), (bx, by) = a.center, b.center
    return max(0.0, 1.0 - math.hypot(ax - bx, ay - by) / scale)


def spatial_score(a: BoundingBox, b: BoundingBox, iou_weight: float) -> float:
    return iou_weight * a.iou(b) + (1.0 - iou_weight) * proximity(a, b)


def class_agreement(last: TrackFrame, candidate: TrackFrame, config: MatchingConfig) -> float:
    if last.class_name == candidate.class_name:
        return 1.0
    return config.class_mismatch_score


def temporal_discount(frame_gap: int, config: MatchingConfig) -> float:
    """Penalty for frames in which the object went undetected."""
    if frame_gap < 0 or frame_gap > config.max_frame_gap:
        return 0.0
    return config.gap_decay ** max(0, frame_gap - 1)


def score_match(
    last: TrackFrame, candidate: TrackFrame, config: Optional[MatchingConfig] = None
) -> float:
    """Goodness of fit in [0, 1] of `candidate` as the continuation of `last`."""
    config = config or MatchingConfig()
    discount = temporal_discount(candidate.frame_index - last.frame_index, config)
    if discount == 0.0:
        return 0.0
    agreement = class_agreement(last, candidate, config)
    if agreement == 0.0:
        return 0.0
    score = agreement * discount * spatial_score(last.bbox, candidate.bbox, config.iou_weight)
    return float(min(1.0, max(0.0, score)))
