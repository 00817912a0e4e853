# -*- coding: utf-8 -*-
"""
photokit 配置：从包内 photokit.cfg 读取默认值，可用外部 override 文件与环境变量覆盖。

Usage::
    from photokit.config import load_settings
    settings = load_settings("~/.photokit.json")
    settings["tools_dir"]
"""
from __future__ import annotations

import json
import os
from typing import Any

CONFIG_FILENAME = "photokit.cfg"

DEFAULT_SETTINGS: dict[str, Any] = {
    "exiftool_path": "",
    "tools_dir": "./tools",
    "log_level": "DEBUG",
    "log_file": "",
    "filename_max_length": 143,
}

# env var -> settings key
_ENV_OVERRIDES = {
    "PHOTOKIT_EXIFTOOL": "exiftool_path",
    "PHOTOKIT_TOOLS_DIR": "tools_dir",
    "PHOTOKIT_LOG_LEVEL": "log_level",
    "PHOTOKIT_LOG_FILE": "log_file",
}


def _module_cfg_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), CONFIG_FILENAME)


def _read_json_dict(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_settings(override_path: str | None = None) -> dict[str, Any]:
    """读取配置：默认值 → 包内 photokit.cfg → override 文件（仅已知键）→ 环境变量。"""
    settings = dict(DEFAULT_SETTINGS)
    p = _module_cfg_path()
    if os.path.isfile(p):
        for k, v in _read_json_dict(p).items():
            if k in DEFAULT_SETTINGS:
                settings[k] = v
    if override_path:
        override_path = os.path.expanduser(override_path)
        if os.path.isfile(override_path):
            for k, v in _read_json_dict(override_path).items():
                if k in DEFAULT_SETTINGS:
                    settings[k] = v
    for env_name, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name, "").strip()
        if value:
            settings[key] = value
    try:
        settings["filename_max_length"] = int(settings["filename_max_length"])
    except (TypeError, ValueError):
        settings["filename_max_length"] = DEFAULT_SETTINGS["filename_max_length"]
    return settings


def save_setting(override_path: str, key: str, value: Any) -> None:
    """将单个配置键写入 override 文件（先读全量再合并后写回）。"""
    if key not in DEFAULT_SETTINGS:
        raise ValueError(f"unknown setting: {key!r}")
    override_path = os.path.expanduser(override_path)
    data = _read_json_dict(override_path) if os.path.isfile(override_path) else {}
    data[key] = value
    with open(override_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
