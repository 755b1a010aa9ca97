"""Configuration for instance tracking."""

from .settings import (
    InstRecConfig,
    MatchingConfig,
    MotionConfig,
    ReconstructionConfig,
    StateConfig,
    config_from_dict,
    load_config,
)

__all__ = [
    "InstRecConfig",
    "MatchingConfig",
    "MotionConfig",
    "ReconstructionConfig",
    "StateConfig",
    "config_from_dict",
    "load_config",
]
