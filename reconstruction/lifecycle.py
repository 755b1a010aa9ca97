"""Reconstruction maintenance policy."""

from __future__ import annotations

from typing import Optional

from configs.settings import ReconstructionConfig


def compute_reap_weight(fused_frames: int, config: Optional[ReconstructionConfig] = None) -> int:
    """Maximum voxel weight a reap pass may decay.

    Grows with the number of fused frames and is capped to bound the cost of a
    single pass: clamp(round(0.33 * fused_frames), 1, 5) with the defaults.
    """
    config = config or ReconstructionConfig()
    weight = int(round(config.reap_weight_factor * fused_frames))
    return max(config.min_reap_weight, min(config.max_reap_weight, weight))
