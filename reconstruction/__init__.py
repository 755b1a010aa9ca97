"""Reconstruction lifecycle boundary."""

from .handle import ReconstructionHandle
from .lifecycle import compute_reap_weight
from .volume import ReconstructionVolume

__all__ = ["ReconstructionHandle", "ReconstructionVolume", "compute_reap_weight"]
