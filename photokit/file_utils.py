# -*- coding: utf-8 -*-
"""
文件/目录/JSON 小工具。全部同步调用，错误（OSError / JSONDecodeError）原样抛给调用方。
"""
from __future__ import annotations

import json
import os
import re
import shutil
import stat
import sys
import urllib.request
from typing import Any, Iterable

from photokit.config import load_settings

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.\-]")


def is_dir(path: str) -> bool:
    """lstat 判断，符号链接不算目录。"""
    return stat.S_ISDIR(os.lstat(path).st_mode)


def file_stats(path: str) -> os.stat_result:
    return os.stat(path)


def read_file(filepath: str) -> str:
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read()


def save_file(filepath: str, data: str | bytes) -> None:
    if isinstance(data, bytes):
        with open(filepath, "wb") as f:
            f.write(data)
        return
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(data)


def copy_file(src: str, dest: str) -> None:
    shutil.copyfile(src, dest)


def file_exists(path: str) -> bool:
    return os.path.exists(path)


def delete_file(path: str, recursive: bool = False, force: bool = False) -> None:
    """删除文件；recursive=True 时也可删除目录树；force=True 时忽略不存在的路径。"""
    if force and not os.path.lexists(path):
        return
    if recursive and os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def dir_exists(path: str) -> bool:
    return os.path.exists(path) and is_dir(path)


def ensure_dir_exists(dir_path: str) -> None:
    os.makedirs(dir_path, exist_ok=True)


def delete_dir(dir_path: str, recursive: bool = False, force: bool = False) -> None:
    if force and not os.path.lexists(dir_path):
        return
    if recursive:
        shutil.rmtree(dir_path)
    else:
        os.rmdir(dir_path)


def ensure_hidden_directory(base_dir: str, name: str = ".photokit") -> str:
    """在 base_dir 下创建隐藏目录（点前缀；Windows 额外设置隐藏属性），返回其路径。"""
    if not name.startswith("."):
        name = "." + name
    path = os.path.join(base_dir, name)
    os.makedirs(path, exist_ok=True)
    if sys.platform == "win32":
        import ctypes

        FILE_ATTRIBUTE_HIDDEN = 0x02
        ctypes.windll.kernel32.SetFileAttributesW(path, FILE_ATTRIBUTE_HIDDEN)
    return path


def rename_file(old_path: str, new_path: str) -> None:
    os.rename(old_path, new_path)


def move_file(old_path: str, new_path: str) -> None:
    """移动文件，目标目录不存在时先创建。"""
    parent = os.path.dirname(new_path)
    if parent:
        ensure_dir_exists(parent)
    shutil.move(old_path, new_path)


def rename_in_place(dir_path: str, current_name: str, new_name: str) -> None:
    os.rename(os.path.join(dir_path, current_name), os.path.join(dir_path, new_name))


def save_json(filepath: str, data: Any) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def save_json_min(filepath: str, data: Any) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, separators=(",", ":"))


def ensure_save_json(dir_path: str, name: str, data: Any) -> str:
    ensure_dir_exists(dir_path)
    if ".json" not in name:
        name += ".json"
    path = os.path.join(dir_path, name)
    save_json(path, data)
    return path


def load_json(filepath: str) -> Any:
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def fetch_json(url: str, timeout: float = 30) -> Any:
    with urllib.request.urlopen(url, timeout=timeout) as resp:
        charset = resp.headers.get_content_charset() or "utf-8"
        return json.loads(resp.read().decode(charset))


def sanitize_filename(filename: str) -> str:
    """Every character outside [a-zA-Z0-9.-] becomes '_'."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def is_filename_long(filename: str, max_length: int | None = None) -> bool:
    if max_length is None:
        max_length = load_settings()["filename_max_length"]
    return len(os.path.basename(filename)) > max_length


def alphabetize(items: list[str]) -> list[str]:
    """In-place, case-insensitive sort; returns the same list."""
    items.sort(key=lambda s: (s.casefold(), s))
    return items


def filter_unique(items: Iterable[Any]) -> list[Any]:
    return list(dict.fromkeys(items))
