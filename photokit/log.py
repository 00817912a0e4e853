# -*- coding: utf-8 -*-
"""photokit.log – minimal logging for batch runs (file + stderr).

Usage::
    from photokit.log import get_logger
    log = get_logger("rename_photos")
    log.info("renaming %d files", count)
    log.debug("detail: %s", value)

    exif_log = log.clone()
    exif_log.prefix = "exif_io"
    exif_log.set_log_color("blue")
    exif_log.log("exiftool -overwrite_original -title=x \"a.jpg\"")
    exif_log.log_to_file(process_stdout)   # file only, never stderr
"""
from __future__ import annotations

import copy
import sys
from datetime import datetime
from typing import Any

from photokit.config import load_settings

_settings = load_settings()

# stderr always; a log file only when configured (PHOTOKIT_LOG_FILE or photokit.cfg).
LOG_FILE: str | None = str(_settings.get("log_file") or "").strip() or None
LOG_LEVEL: str = str(_settings.get("log_level") or "DEBUG").upper()  # DEBUG | INFO | WARNING | ERROR

_LEVEL_ORDER = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3}

_COLORS = {
    "black": "\033[30m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
}
_RESET = "\033[0m"


def _level_ok(level: str) -> bool:
    return _LEVEL_ORDER.get(level.upper(), 0) >= _LEVEL_ORDER.get(LOG_LEVEL.upper(), 0)


def _format(level: str, name: str, msg: str, *args: Any) -> str:
    parts = [datetime.now().strftime("%Y-%m-%d %H:%M:%S"), level, name, msg % args if args else msg]
    return " ".join(str(p) for p in parts)


def _append(path: str, text: str) -> None:
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)
    except OSError:
        pass


class _Logger:
    def __init__(self, name: str) -> None:
        self._name = name
        self.prefix = ""
        self.emoji = ""
        self.color: str | None = None

    @property
    def name(self) -> str:
        return self._name

    def clone(self) -> "_Logger":
        return copy.copy(self)

    def set_log_color(self, color: str | None) -> None:
        """Colour for stderr lines; unknown names reset to plain output."""
        self.color = color if color in _COLORS else None

    def _label(self) -> str:
        label = f"{self._name}:{self.prefix}" if self.prefix else self._name
        return f"{self.emoji}{label}" if self.emoji else label

    def _write(self, level: str, msg: str, *args: Any) -> None:
        if not _level_ok(level):
            return
        line = _format(level, self._label(), msg, *args) + "\n"
        if LOG_FILE:
            _append(LOG_FILE, line)
        err = sys.stderr
        if err is None or not hasattr(err, "write"):
            return
        if self.color and getattr(err, "isatty", lambda: False)():
            body = line.rstrip("\n")
            line = f"{_COLORS[self.color]}{body}{_RESET}\n"
        try:
            err.write(line)
            err.flush()
        except OSError:
            pass

    def debug(self, msg: str, *args: Any) -> None:
        self._write("DEBUG", msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self._write("INFO", msg, *args)

    def warning(self, msg: str, *args: Any) -> None:
        self._write("WARNING", msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self._write("ERROR", msg, *args)

    def log(self, msg: str, *args: Any) -> None:
        self.info(msg, *args)

    def log_to_file(self, text: str) -> None:
        """Raw text (e.g. a tool's stdout) to the log file only."""
        if not LOG_FILE or not text:
            return
        _append(LOG_FILE, text if text.endswith("\n") else text + "\n")


class _NullLogger(_Logger):
    """Stub used when a caller does not pass a logger."""

    def _write(self, level: str, msg: str, *args: Any) -> None:
        return None

    def log_to_file(self, text: str) -> None:
        return None


def get_logger(name: str) -> _Logger:
    return _Logger(name)


def get_null_logger(name: str = "null") -> _Logger:
    return _NullLogger(name)


def get_log_file_path() -> str | None:
    return LOG_FILE


def set_log_file(path: str | None) -> None:
    global LOG_FILE
    LOG_FILE = path or None


def set_log_level(level: str) -> None:
    global LOG_LEVEL
    level = (level or "").upper()
    if level not in _LEVEL_ORDER:
        raise ValueError(f"invalid log level: {level!r}")
    LOG_LEVEL = level
