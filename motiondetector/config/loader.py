# motiondetector/config/loader.py
# -*- coding: utf-8 -*-
"""
Config loader for motion detection.
运动检测相关配置加载工具。
"""

import os
from typing import Any, Dict

import yaml

from motiondetector.config.motion_config import ConfigError, MotionConfig


PRESETS = {
    "default": MotionConfig.default,
    "tuned": MotionConfig.tuned,
    "optimized": MotionConfig.optimized,
}


def load_yaml(cfg_path: str) -> dict:
    """
    Load YAML config file.
    加载 YAML 配置文件。

    Args:
        cfg_path (str): Path to config YAML.
                        配置文件路径。
    """
    if not os.path.isfile(cfg_path):
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    return cfg or {}


def config_from_dict(section: Dict[str, Any]) -> MotionConfig:
    """
    Build a MotionConfig from the `motion:` section of a config dict.
    根据配置字典中的 `motion:` 段构建 MotionConfig。

    - `preset` 选择基础预设（default / tuned / optimized），缺省为 default；
    - 其余键逐项覆盖预设中的字段；
    - `validate: true` 时执行范围校验。

    Args:
        section (dict): The `motion:` mapping (may be empty or None).
                        `motion:` 段内容，可为空。

    Returns:
        MotionConfig built from preset + overrides.
    """
    section = dict(section or {})
    preset_name = str(section.pop("preset", "default")).lower()
    do_validate = bool(section.pop("validate", False))

    if preset_name not in PRESETS:
        raise ConfigError(
            f"Unknown motion preset '{preset_name}', expected one of {sorted(PRESETS)}"
        )

    known = set(MotionConfig.field_names())
    unknown = sorted(k for k in section if k not in known)
    if unknown:
        raise ConfigError(f"Unknown motion config keys: {unknown}")

    overrides: Dict[str, Any] = {}
    for key, value in section.items():
        if key.endswith("_ms"):
            overrides[key] = int(value)
        else:
            overrides[key] = float(value)

    cfg = PRESETS[preset_name]().replace(**overrides)
    if do_validate:
        cfg.validate()
    return cfg


def load_motion_config(cfg_path: str) -> MotionConfig:
    """
    Load MotionConfig from a YAML file.
    从 YAML 文件加载 MotionConfig。

    Args:
        cfg_path (str): Path to config YAML.
                        配置文件路径。
    """
    cfg = load_yaml(cfg_path)
    return config_from_dict(cfg.get("motion", {}))
