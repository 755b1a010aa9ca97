"""Interface to a volumetric reconstruction owned by the fusion engine."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ReconstructionVolume(ABC):
    @abstractmethod
    def reap(self, weight: int) -> None:
        """Decay voxels whose fusion weight is at most `weight`."""

    @abstractmethod
    def release(self) -> None:
        """Free the volume's memory."""

    @property
    def memory_bytes(self) -> int:
        """Approximate memory held by the volume, for diagnostics."""
        return 0
