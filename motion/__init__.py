"""Motion estimation helpers."""

from .provider import CorrespondenceMotionProvider, FrameCorrespondences, SparseSFProvider
from .rigid import (
    compose_chain,
    estimate_rigid_transform,
    invert_transform,
    make_transform,
    ransac_rigid_transform,
    translation_magnitude,
)

__all__ = [
    "CorrespondenceMotionProvider",
    "FrameCorrespondences",
    "SparseSFProvider",
    "compose_chain",
    "estimate_rigid_transform",
    "invert_transform",
    "make_transform",
    "ransac_rigid_transform",
    "translation_magnitude",
]
