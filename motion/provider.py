"""Sparse scene-flow provider interface and a correspondence-based provider."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from configs.settings import MotionConfig
from contracts import BoundingBox
from exceptions import MotionEstimationError
from log_config.logger import get_logger
from motion.rigid import ransac_rigid_transform

logger = get_logger(__name__)


class SparseSFProvider(ABC):
    @abstractmethod
    def estimate_motion(
        self, previous_index: int, current_index: int, region: BoundingBox
    ) -> Optional[np.ndarray]:
        """Return the 4x4 camera-frame motion of points inside `region`
        between the two frames, or None if it cannot be estimated reliably."""


@dataclass(frozen=True)
class FrameCorrespondences:
    """3D point matches between two frames.

    `pixels_current` holds each match's (u, v) location in the later frame and
    is used to restrict the matches to an object's image region.
    """

    points_previous: np.ndarray
    points_current: np.ndarray
    pixels_current: np.ndarray

    def __post_init__(self) -> None:
        n = len(self.points_previous)
        if (
            np.shape(self.points_previous) != (n, 3)
            or np.shape(self.points_current) != (n, 3)
            or np.shape(self.pixels_current) != (n, 2)
        ):
            raise MotionEstimationError(
                "Correspondences need Nx3 previous points, Nx3 current points and Nx2 pixels, "
                f"got {np.shape(self.points_previous)}, {np.shape(self.points_current)}, "
                f"{np.shape(self.pixels_current)}"
            )

    def inside(self, region: BoundingBox) -> np.ndarray:
        u = self.pixels_current[:, 0]
        v = self.pixels_current[:, 1]
        return (u >= region.x1) & (u <= region.x2) & (v >= region.y1) & (v <= region.y2)


class CorrespondenceMotionProvider(SparseSFProvider):
    """Estimates object motion from driver-supplied scene-flow matches.

    Only frame pairs ending within `correspondence_window` frames of the
    newest pair are kept.
    """

    def __init__(
        self,
        config: Optional[MotionConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self._config = config or MotionConfig()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._correspondences: Dict[Tuple[int, int], FrameCorrespondences] = {}

    def set_correspondences(
        self,
        previous_index: int,
        current_index: int,
        points_previous,
        points_current,
        pixels_current,
    ) -> None:
        self._correspondences[(previous_index, current_index)] = FrameCorrespondences(
            points_previous=np.asarray(points_previous, dtype=np.float64),
            points_current=np.asarray(points_current, dtype=np.float64),
            pixels_current=np.asarray(pixels_current, dtype=np.float64),
        )
        self._evict_before(current_index - self._config.correspondence_window)

    @property
    def stored_pairs(self) -> int:
        return len(self._correspondences)

    def _evict_before(self, oldest_index: int) -> None:
        stale = [pair for pair in self._correspondences if pair[1] <= oldest_index]
        for pair in stale:
            del self._correspondences[pair]
        if stale:
            logger.debug(
                f"Dropped {len(stale)} correspondence set(s) ending at or before frame {oldest_index}"
            )

    def clear(self) -> None:
        self._correspondences.clear()

    def estimate_motion(
        self, previous_index: int, current_index: int, region: BoundingBox
    ) -> Optional[np.ndarray]:
        matches = self._correspondences.get((previous_index, current_index))
        if matches is None:
            logger.debug(f"No scene flow between frames {previous_index} and {current_index}")
            return None

        mask = matches.inside(region)
        count = int(mask.sum())
        if count < self._config.min_correspondences:
            logger.debug(
                f"Too few correspondences in region ({count} < {self._config.min_correspondences})"
            )
            return None

        transform, inliers = ransac_rigid_transform(
            matches.points_previous[mask],
            matches.points_current[mask],
            inlier_threshold=self._config.inlier_threshold,
            iterations=self._config.ransac_iterations,
            rng=self._rng,
        )
        inlier_ratio = float(inliers.mean())
        if transform is None or inlier_ratio < self._config.min_inlier_ratio:
            logger.debug(f"Rejected motion estimate, inlier ratio {inlier_ratio:.2f}")
            return None
        return transform
