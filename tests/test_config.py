from pathlib import Path

import pytest

from configs.settings import InstRecConfig, config_from_dict, load_config
from exceptions import ConfigValidationError, InvalidConfigError

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def test_load_default_config() -> None:
    config = load_config(DEFAULT_CONFIG)

    assert config == InstRecConfig()
    assert config.state.translation_error_threshold == 0.20
    assert config.state.max_uncertain_frames_static == 3
    assert config.state.max_uncertain_frames_dynamic == 2
    assert config.reconstruction.min_frames == 6
    assert config.reconstruction.max_reap_weight == 5


def test_partial_config_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("state:\n  translation_error_threshold: 0.5\n  dynamic_demotion_frames: null\n")

    config = load_config(path)

    assert config.state.translation_error_threshold == 0.5
    assert config.state.dynamic_demotion_frames is None
    assert config.state.max_uncertain_frames_static == 3
    assert config.matching.max_frame_gap == 3


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(path) == InstRecConfig()


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError):
        load_config(tmp_path / "missing.yaml")


def test_malformed_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("state: [unclosed\n")

    with pytest.raises(InvalidConfigError):
        load_config(path)


def test_validation_errors_are_collected() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        config_from_dict(
            {
                "state": {"translation_error_threshold": -1.0},
                "reconstruction": {"min_frames": 0},
                "motion": {"bogus": 1},
            }
        )

    assert len(excinfo.value.validation_errors) == 3


def test_unknown_section_rejected() -> None:
    with pytest.raises(ConfigValidationError):
        config_from_dict({"fusion": {}})
