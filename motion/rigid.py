"""Rigid-transform helpers for 4x4 homogeneous poses."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np

from exceptions import MotionEstimationError


def make_transform(rotation: Optional[np.ndarray] = None, translation=None) -> np.ndarray:
    """Build a 4x4 float64 transform from a 3x3 rotation and a 3-vector."""
    transform = np.eye(4, dtype=np.float64)
    if rotation is not None:
        transform[:3, :3] = rotation
    if translation is not None:
        transform[:3, 3] = np.asarray(translation, dtype=np.float64).reshape(3)
    return transform


def invert_transform(transform: np.ndarray) -> np.ndarray:
    """Invert a rigid transform without a general matrix inverse."""
    transform = np.asarray(transform, dtype=np.float64)
    rotation = transform[:3, :3]
    inverse = np.eye(4, dtype=np.float64)
    inverse[:3, :3] = rotation.T
    inverse[:3, 3] = -rotation.T @ transform[:3, 3]
    return inverse


def translation_magnitude(transform: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(transform)[:3, 3]))


def compose_chain(transforms: Iterable[Optional[np.ndarray]]) -> Optional[np.ndarray]:
    """Compose frame-to-frame transforms, oldest first.

    Returns None as soon as a link is missing.
    """
    pose = np.eye(4, dtype=np.float64)
    for transform in transforms:
        if transform is None:
            return None
        pose = np.asarray(transform, dtype=np.float64) @ pose
    return pose


def transform_points(transform: np.ndarray, points: np.ndarray) -> np.ndarray:
    points = np.asarray(points, dtype=np.float64)
    return points @ transform[:3, :3].T + transform[:3, 3]


def _check_correspondences(src: np.ndarray, dst: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    src = np.asarray(src, dtype=np.float64)
    dst = np.asarray(dst, dtype=np.float64)
    if src.ndim != 2 or src.shape[1] != 3 or src.shape != dst.shape:
        raise MotionEstimationError(
            f"Expected two Nx3 point arrays of equal shape, got {src.shape} and {dst.shape}"
        )
    return src, dst


def estimate_rigid_transform(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """Least-squares rigid transform mapping src onto dst (Kabsch).

    Args:
        src: Nx3 points at the earlier frame
        dst: Nx3 corresponding points at the later frame

    Returns:
        4x4 float64 transform T with dst ~= R @ src + t
    """
    src, dst = _check_correspondences(src, dst)
    if len(src) < 3:
        raise MotionEstimationError(f"Need at least 3 correspondences, got {len(src)}")

    # Translate points to their centroids
    centroid_src = src.mean(axis=0)
    centroid_dst = dst.mean(axis=0)
    src_centered = src - centroid_src
    dst_centered = dst - centroid_dst

    H = src_centered.T @ dst_centered
    U, _, Vt = np.linalg.svd(H)
    R = Vt.T @ U.T

    # Special reflection case
    if np.linalg.det(R) < 0:
        Vt[2, :] *= -1
        R = Vt.T @ U.T

    t = centroid_dst - R @ centroid_src
    return make_transform(R, t)


def ransac_rigid_transform(
    src: np.ndarray,
    dst: np.ndarray,
    inlier_threshold: float,
    iterations: int = 100,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[Optional[np.ndarray], np.ndarray]:
    """Robust rigid transform from noisy correspondences.

    Samples minimal 3-point sets, keeps the hypothesis with the most inliers
    and refits on those inliers.

    Returns:
        (transform or None, boolean inlier mask)
    """
    src, dst = _check_correspondences(src, dst)
    n = len(src)
    if n < 3:
        return None, np.zeros(n, dtype=bool)
    rng = rng if rng is not None else np.random.default_rng()

    best_mask = np.zeros(n, dtype=bool)
    for _ in range(iterations):
        sample = rng.choice(n, size=3, replace=False)
        try:
            hypothesis = estimate_rigid_transform(src[sample], dst[sample])
        except np.linalg.LinAlgError:
            continue
        residuals = np.linalg.norm(transform_points(hypothesis, src) - dst, axis=1)
        mask = residuals < inlier_threshold
        if mask.sum() > best_mask.sum():
            best_mask = mask
            if mask.all():
                break

    if best_mask.sum() < 3:
        return None, best_mask
    return estimate_rigid_transform(src[best_mask], dst[best_mask]), best_mask


__all__ = [
    "compose_chain",
    "estimate_rigid_transform",
    "invert_transform",
    "make_transform",
    "ransac_rigid_transform",
    "transform_points",
    "translation_magnitude",
]
