"""Tests for MotionConfig presets, validation and the YAML loader."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from motiondetector.config.loader import config_from_dict, load_motion_config, load_yaml
from motiondetector.config.motion_config import ConfigError, MotionConfig


def write_yaml(tmp_path: Path, text: str) -> str:
    path = tmp_path / "motion.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_default_preset_values() -> None:
    cfg = MotionConfig.default()
    assert cfg == MotionConfig(0.8, 0.2, 0.4, 0.3, 3000, 1500, 0.3, 1.5)


def test_tuned_preset_values() -> None:
    cfg = MotionConfig.tuned()
    assert (cfg.motion_start_threshold, cfg.motion_stop_threshold) == (0.7, 0.2)
    assert (cfg.start_delay_ms, cfg.stop_delay_ms) == (5000, 2500)
    assert cfg.rms_alpha == 0.4
    assert MotionConfig.optimized() == cfg


def test_optional_fields_have_defaults() -> None:
    cfg = MotionConfig(
        filter_alpha=0.9,
        accel_smoothing_alpha=0.1,
        motion_start_threshold=1.0,
        motion_stop_threshold=0.5,
        start_delay_ms=0,
        stop_delay_ms=0,
    )
    assert cfg.rms_alpha == 0.3
    assert cfg.spike_threshold == 1.5


def test_config_is_immutable() -> None:
    cfg = MotionConfig.default()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.filter_alpha = 0.5  # type: ignore[misc]

    changed = cfg.replace(start_delay_ms=100)
    assert changed.start_delay_ms == 100
    assert cfg.start_delay_ms == 3000


def test_presets_pass_validation() -> None:
    assert MotionConfig.default().validate() == MotionConfig.default()
    MotionConfig.tuned().validate()


def test_validation_reports_every_problem() -> None:
    cfg = MotionConfig.default().replace(
        filter_alpha=1.5,
        motion_stop_threshold=0.4,
        stop_delay_ms=-1,
    )
    with pytest.raises(ConfigError) as exc:
        cfg.validate()

    msg = str(exc.value)
    assert "filter_alpha" in msg
    assert "motion_stop_threshold must be below" in msg
    assert "stop_delay_ms" in msg
    assert len(cfg.problems()) == 3


def test_invalid_config_is_still_accepted_without_validate() -> None:
    cfg = MotionConfig.default().replace(motion_stop_threshold=0.9)
    assert cfg.problems()


def test_load_motion_config_preset_with_overrides(tmp_path: Path) -> None:
    path = write_yaml(
        tmp_path,
        "motion:\n"
        "  preset: tuned\n"
        "  start_delay_ms: 4000\n"
        "  spike_threshold: 2\n",
    )
    cfg = load_motion_config(path)

    assert cfg == MotionConfig.tuned().replace(start_delay_ms=4000, spike_threshold=2.0)
    assert isinstance(cfg.start_delay_ms, int)
    assert isinstance(cfg.spike_threshold, float)


def test_load_motion_config_empty_file_uses_default(tmp_path: Path) -> None:
    path = write_yaml(tmp_path, "")
    assert load_yaml(path) == {}
    assert load_motion_config(path) == MotionConfig.default()


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_motion_config(str(tmp_path / "nope.yaml"))


def test_unknown_key_rejected() -> None:
    with pytest.raises(ConfigError, match="start_thresh"):
        config_from_dict({"start_thresh": 0.5})


def test_unknown_preset_rejected() -> None:
    with pytest.raises(ConfigError, match="aggressive"):
        config_from_dict({"preset": "aggressive"})


def test_validate_flag_runs_range_check() -> None:
    with pytest.raises(ConfigError):
        config_from_dict({"motion_stop_threshold": 0.5, "validate": True})
    # same values load fine when validation is off
    assert config_from_dict({"motion_stop_threshold": 0.5}).motion_stop_threshold == 0.5


def test_shipped_config_loads() -> None:
    path = Path(__file__).resolve().parents[1] / "configs" / "motion_config.yaml"
    assert load_motion_config(str(path)) == MotionConfig.default()
