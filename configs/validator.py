"""Configuration validation using JSON Schema."""

from __future__ import annotations

from typing import Any, Dict

import jsonschema
from jsonschema import Draft7Validator, validators

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "state": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "translation_error_threshold": {"type": "number", "exclusiveMinimum": 0.0, "default": 0.20},
                "max_uncertain_frames_static": {"type": "integer", "minimum": 0, "default": 3},
                "max_uncertain_frames_dynamic": {"type": "integer", "minimum": 0, "default": 2},
                "dynamic_demotion_frames": {"type": ["integer", "null"], "minimum": 1, "default": 3},
                "max_motion_extrapolation_frames": {"type": "integer", "minimum": 0, "default": 3},
            },
        },
        "matching": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "iou_weight": {"type": "number", "minimum": 0.0, "maximum": 1.0, "default": 0.7},
                "class_mismatch_score": {"type": "number", "minimum": 0.0, "maximum": 1.0, "default": 0.0},
                "max_frame_gap": {"type": "integer", "minimum": 1, "default": 3},
                "gap_decay": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 1.0, "default": 0.8},
            },
        },
        "reconstruction": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "min_frames": {"type": "integer", "minimum": 1, "default": 6},
                "reap_weight_factor": {"type": "number", "exclusiveMinimum": 0.0, "default": 0.33},
                "min_reap_weight": {"type": "integer", "minimum": 1, "default": 1},
                "max_reap_weight": {"type": "integer", "minimum": 1, "default": 5},
            },
        },
        "motion": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "min_correspondences": {"type": "integer", "minimum": 3, "default": 6},
                "inlier_threshold": {"type": "number", "exclusiveMinimum": 0.0, "default": 0.05},
                "ransac_iterations": {"type": "integer", "minimum": 1, "maximum": 10000, "default": 100},
                "min_inlier_ratio": {"type": "number", "minimum": 0.0, "maximum": 1.0, "default": 0.5},
                "correspondence_window": {"type": "integer", "minimum": 1, "default": 5},
            },
        },
    },
}


def extend_with_default(validator_class):
    """Extend JSON Schema validator to set default values."""
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        for prop, subschema in properties.items():
            if "default" in subschema:
                instance.setdefault(prop, subschema["default"])

        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration against JSON Schema, filling in defaults.

    Args:
        config: Configuration dictionary (modified in place)

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    try:
        validator = DefaultValidatingValidator(CONFIG_SCHEMA)
        errors = list(validator.iter_errors(config))

        if errors:
            error_messages = []
            for error in errors:
                path = " -> ".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            logger.error(f"Configuration validation failed with {len(errors)} errors")
            for msg in error_messages:
                logger.error(f"  - {msg}")

            raise ConfigValidationError(
                f"Configuration validation failed with {len(errors)} error(s). See logs for details.",
                validation_errors=error_messages,
            )

        logger.debug("Configuration validation passed")

    except jsonschema.exceptions.SchemaError as e:
        logger.error(f"Invalid schema: {e}")
        raise ConfigValidationError(f"Invalid schema definition: {e}")


__all__ = ["validate_config", "CONFIG_SCHEMA"]
