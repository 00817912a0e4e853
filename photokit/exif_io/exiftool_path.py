# -*- coding: utf-8 -*-
"""
定位 exiftool 可执行文件：配置 / 环境变量 → tools 目录 → 系统 PATH。
"""
from __future__ import annotations

import os
import shutil
import subprocess
import sys
from functools import lru_cache

from photokit.config import load_settings

EXIFTOOL_NAME = "exiftool"


class ExifToolNotFoundError(RuntimeError):
    """exiftool is required but no usable executable was found."""


@lru_cache(maxsize=32)
def _is_usable_exiftool(executable_path: str) -> bool:
    """
    轻量健康检查：验证 exiftool 能正常启动并返回版本号。
    避免命中损坏的安装（例如缺失 lib/Image/ExifTool.pm）。
    """
    p = str(executable_path or "").strip()
    if not p or not os.path.isfile(p):
        return False
    try:
        cp = subprocess.run(
            [p, "-ver"],
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=3,
        )
    except (OSError, subprocess.SubprocessError):
        return False
    if cp.returncode != 0:
        return False
    return bool((cp.stdout or "").strip())


def _tools_dir_candidates(tools_dir: str) -> list[str]:
    if sys.platform.startswith("win"):
        names = ["exiftool.exe", "exiftool(-k).exe"]
    else:
        names = [EXIFTOOL_NAME]
    return [os.path.join(tools_dir, n) for n in names]


def get_exiftool_executable_path(override_path: str | None = None) -> str | None:
    """
    按优先级定位 exiftool：
    exiftool_path 配置（或 PHOTOKIT_EXIFTOOL）→ tools_dir 下的 exiftool → 系统 PATH。
    Windows 仅使用 .exe，不使用 .pl（避免依赖 Perl）。
    """
    settings = load_settings(override_path)
    configured = str(settings.get("exiftool_path") or "").strip()
    if configured:
        configured = os.path.expanduser(configured)
        if _is_usable_exiftool(configured):
            return configured

    tools_dir = str(settings.get("tools_dir") or "").strip()
    if tools_dir:
        for p in _tools_dir_candidates(os.path.abspath(os.path.expanduser(tools_dir))):
            if _is_usable_exiftool(p):
                return p

    p = shutil.which(EXIFTOOL_NAME)
    if p and os.path.isfile(p):
        if sys.platform.startswith("win") and p.lower().endswith(".pl"):
            return None
        if _is_usable_exiftool(p):
            return p
    return None


def require_exiftool(override_path: str | None = None) -> str:
    p = get_exiftool_executable_path(override_path)
    if not p:
        raise ExifToolNotFoundError(
            "exiftool executable not found; install it (https://exiftool.org/install.html), "
            "put it in the tools directory, or set PHOTOKIT_EXIFTOOL."
        )
    return p
