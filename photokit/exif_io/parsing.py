# -*- coding: utf-8 -*-
"""
解析 exiftool 默认文本输出（每行 ``Key                : Value``）。
"""
from __future__ import annotations

from typing import Any, Iterable

EDITOR_MARKERS = ("adobe", "photoshop")
SUBJECT_KEY = "Subject"
DATE_TIME_ORIGINAL_KEY = "Date/Time Original"


def contains_any(text: str, search: str | Iterable[str]) -> bool:
    """Case-insensitive substring test for one string or any of several."""
    haystack = (text or "").lower()
    if isinstance(search, str):
        return search.lower() in haystack
    return any(s.lower() in haystack for s in search)


def get_shell_output_value(stdout: str) -> str:
    """Value part of single-tag output: everything after the first colon."""
    _, sep, value = (stdout or "").partition(":")
    return value.strip() if sep else ""


def parse_exiftool_output(text: str) -> dict[str, Any]:
    """
    ``Key: Value`` 行转为字典，并补充派生键：

    - ``tags``: Subject 按 ", " 拆分的列表；无 Subject 时为 ""
    - ``date_taken``: Date/Time Original 的值；无则为 ""
    - ``photoshop``: 输出中含 adobe / photoshop（不区分大小写）
    """
    metadata: dict[str, Any] = {}
    for line in (text or "").splitlines():
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        metadata[key] = value.strip()

    subject = metadata.get(SUBJECT_KEY)
    metadata["tags"] = subject.split(", ") if subject else ""
    metadata["date_taken"] = metadata.get(DATE_TIME_ORIGINAL_KEY, "")
    metadata["photoshop"] = contains_any(text, EDITOR_MARKERS)
    return metadata
