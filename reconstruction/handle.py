"""Shared ownership of a reconstruction volume."""

from __future__ import annotations

from typing import Optional

from exceptions import ReleasedHandleError
from log_config.logger import get_logger
from reconstruction.volume import ReconstructionVolume

logger = get_logger(__name__)


class ReconstructionHandle:
    """Reference-counted handle to a reconstruction volume.

    The creator holds the first reference. Every other holder (e.g. a track)
    takes its own with `share()` and gives it back with `release()`. The volume
    is released when the last reference goes away.

    Not thread safe; callers synchronize per volume.
    """

    def __init__(self, volume: ReconstructionVolume, name: Optional[str] = None) -> None:
        self._volume: Optional[ReconstructionVolume] = volume
        self._refcount = 1
        self.name = name or f"volume-{id(volume):x}"

    @property
    def refcount(self) -> int:
        return self._refcount

    @property
    def is_released(self) -> bool:
        return self._volume is None

    @property
    def volume(self) -> ReconstructionVolume:
        if self._volume is None:
            raise ReleasedHandleError(f"Reconstruction handle '{self.name}' was already released")
        return self._volume

    def share(self) -> ReconstructionHandle:
        if self._volume is None:
            raise ReleasedHandleError(f"Cannot share released reconstruction handle '{self.name}'")
        self._refcount += 1
        return self

    def release(self) -> bool:
        """Drop one reference.

        Returns:
            True if this call freed the underlying volume
        """
        volume = self.volume
        self._refcount -= 1
        if self._refcount > 0:
            return False

        logger.debug(f"Releasing reconstruction '{self.name}' ({volume.memory_bytes} bytes)")
        self._volume = None
        volume.release()
        return True

    def reap(self, weight: int) -> None:
        self.volume.reap(weight)

    def __repr__(self) -> str:
        return f"ReconstructionHandle(name={self.name!r}, refcount={self._refcount})"
