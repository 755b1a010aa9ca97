"""Configuration loading for instance tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from configs.validator import validate_config
from exceptions import ConfigError, InvalidConfigError
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StateConfig:
    """Thresholds of the static/dynamic/uncertain state machine."""

    translation_error_threshold: float = 0.20
    max_uncertain_frames_static: int = 3
    max_uncertain_frames_dynamic: int = 2
    # Low-residual frames needed before a dynamic track is demoted to static.
    # None keeps dynamic tracks dynamic until they lose their motion estimates.
    dynamic_demotion_frames: Optional[int] = 3
    max_motion_extrapolation_frames: int = 3


@dataclass(frozen=True)
class MatchingConfig:
    iou_weight: float = 0.7
    class_mismatch_score: float = 0.0
    max_frame_gap: int = 3
    gap_decay: float = 0.8


@dataclass(frozen=True)
class ReconstructionConfig:
    min_frames: int = 6
    reap_weight_factor: float = 0.33
    min_reap_weight: int = 1
    max_reap_weight: int = 5


@dataclass(frozen=True)
class MotionConfig:
    min_correspondences: int = 6
    inlier_threshold: float = 0.05
    ransac_iterations: int = 100
    min_inlier_ratio: float = 0.5
    # Frame pairs older than this many frames behind the newest one are dropped.
    correspondence_window: int = 5


@dataclass(frozen=True)
class InstRecConfig:
    state: StateConfig = field(default_factory=StateConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    reconstruction: ReconstructionConfig = field(default_factory=ReconstructionConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)


def config_from_dict(data: Optional[Dict[str, Any]]) -> InstRecConfig:
    """Validate a configuration mapping and build the config objects.

    Missing sections and keys fall back to their defaults.

    Raises:
        ConfigValidationError: If the mapping fails schema validation
    """
    data = dict(data or {})
    for section in ("state", "matching", "reconstruction", "motion"):
        data[section] = dict(data.get(section) or {})

    validate_config(data)

    return InstRecConfig(
        state=StateConfig(**data["state"]),
        matching=MatchingConfig(**data["matching"]),
        reconstruction=ReconstructionConfig(**data["reconstruction"]),
        motion=MotionConfig(**data["motion"]),
    )


def load_config(path: Path) -> InstRecConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated InstRecConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    path = Path(path)
    logger.info(f"Loading configuration from {path}")
    if not path.exists():
        raise InvalidConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    if data is not None and not isinstance(data, dict):
        raise InvalidConfigError(f"Configuration root must be a mapping: {path}")

    try:
        config = config_from_dict(data)
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration value: {e}")
        raise InvalidConfigError(f"Invalid configuration value: {e}")

    logger.info(
        f"Configuration loaded successfully: threshold={config.state.translation_error_threshold}, "
        f"min_frames={config.reconstruction.min_frames}"
    )
    return config
