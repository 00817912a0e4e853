# -*- coding: utf-8 -*-
"""
ImageMetadata：通过 exiftool 读写单个文件的元数据。

每次调用拼成 ``exiftool -overwrite_original <args> "<file>"``（以参数列表执行，不经过 shell），
stdout 原样写入日志文件；进程退出码不为 0 时不抛异常，调用方自行查看返回的 CompletedProcess。
backend="auto" 且未找到 exiftool 时，读取走 Pillow、部分写入走 piexif。

Usage::
    meta = ImageMetadata(get_logger("rename"))
    meta.set_artist("IMG_0001.jpg", "me")
    meta.get_all_metadata("IMG_0001.jpg")["date_taken"]
"""
from __future__ import annotations

import os
import subprocess
from datetime import datetime
from typing import Any, Iterable

from photokit.exif_io.exiftool_path import (
    ExifToolNotFoundError,
    get_exiftool_executable_path,
    require_exiftool,
)
from photokit.exif_io.parsing import (
    EDITOR_MARKERS,
    contains_any,
    get_shell_output_value,
    parse_exiftool_output,
)
from photokit.exif_io.reader import pillow_metadata_as_text, read_pillow_metadata, read_pillow_tags
from photokit.exif_io.writer import UnsupportedTagError, write_tags_with_piexif
from photokit.formatting import date_add, get_local_iso_date_string
from photokit.log import get_null_logger
from photokit.timing import stat_span

BACKENDS = ("auto", "exiftool", "builtin")
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# exiftool tag -> piexif writer name
_BUILTIN_WRITABLE = {
    "title": "Title",
    "artist": "Artist",
    "copyright": "Copyright",
    "imagedescription": "ImageDescription",
    "rating": "Rating",
    "usercomment": "UserComment",
    "datetimeoriginal": "DateTimeOriginal",
    "imageuniqueid": "ImageUniqueID",
}

# exiftool tag -> Pillow tag name, where they differ
_BUILTIN_READ_ALIASES = {
    "title": "XPTitle",
    "subject": "XPKeywords",
}


def format_command(args: Iterable[str], filepath: str | None = None) -> str:
    """Readable command line for the log; not used for execution."""
    parts = ["exiftool", "-overwrite_original", *args]
    if filepath:
        parts.append(f'"{filepath}"')
    return " ".join(parts)


class ImageMetadata:
    def __init__(self, logger=None, backend: str = "auto", exiftool_path: str | None = None):
        if backend not in BACKENDS:
            raise ValueError(f"invalid backend: {backend!r}")
        if logger is not None:
            self.logger = logger.clone()
            self.logger.prefix = "exif_io.metadata"
            self.logger.emoji = "💻 "
        else:
            self.logger = get_null_logger("exif_io.metadata")
        self.backend = backend
        self._exiftool = exiftool_path
        self._resolved = exiftool_path is not None

    # ------------------------------------------------------------------
    # exiftool process
    # ------------------------------------------------------------------

    def _exiftool_path(self) -> str | None:
        if self.backend == "builtin":
            return None
        if not self._resolved:
            if self.backend == "exiftool":
                self._exiftool = require_exiftool()
            else:
                self._exiftool = get_exiftool_executable_path()
            self._resolved = True
        return self._exiftool

    @property
    def uses_exiftool(self) -> bool:
        return bool(self._exiftool_path())

    def shell_exec(self, args: str | Iterable[str], filepath: str | None = None) -> subprocess.CompletedProcess:
        """Run exiftool once; the CompletedProcess is returned whatever the exit code."""
        et = self._exiftool_path()
        if not et:
            raise ExifToolNotFoundError("exiftool is required for this operation but was not found.")
        args = [args] if isinstance(args, str) else list(args)
        argv = [et, "-overwrite_original", *args]
        if filepath:
            argv.append(os.path.normpath(filepath))
        self.logger.set_log_color("blue")
        self.logger.log(format_command(args, filepath))
        with stat_span("exiftool"):
            cp = subprocess.run(
                argv,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        self.logger.log_to_file(cp.stdout)
        if cp.returncode != 0:
            self.logger.warning("exiftool exited with %s: %s", cp.returncode, (cp.stderr or "").strip())
        return cp

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def log_metadata(self, fn: str, tag_filter: str | Iterable[str]) -> subprocess.CompletedProcess:
        return self.shell_exec(tag_filter, fn)

    def log_all_metadata(self, fn: str) -> subprocess.CompletedProcess:
        return self.shell_exec([], fn)

    def _builtin_get(self, fn: str, tag: str) -> str:
        name = tag.lstrip("-").lower()
        name = _BUILTIN_READ_ALIASES.get(name, name).lower()
        for key, value in read_pillow_tags(fn).items():
            if key.lower() == name:
                if key == "XPKeywords":
                    return ", ".join(k.strip() for k in value.split(";") if k.strip())
                return value
        return ""

    def get_metadata(self, fn: str, tag_filter: str) -> str:
        """Value of a single tag, e.g. ``get_metadata(fn, "-title")``; "" when missing."""
        if not self.uses_exiftool:
            return self._builtin_get(fn, tag_filter)
        return get_shell_output_value(self.log_metadata(fn, tag_filter).stdout)

    def get_all_metadata(self, fn: str) -> dict[str, Any]:
        """全部元数据，附带 tags / date_taken / photoshop 派生键。"""
        if not self.uses_exiftool:
            self.logger.debug("exiftool not found, reading %s with Pillow", fn)
            return read_pillow_metadata(fn)
        return parse_exiftool_output(self.log_all_metadata(fn).stdout)

    def metadata_includes(self, fn: str, search: str | Iterable[str], tag_filter: str | None = None) -> bool:
        """Case-insensitive search of the metadata text for a string (or any of several)."""
        if not self.uses_exiftool:
            text = pillow_metadata_as_text(fn)
        else:
            text = self.shell_exec([tag_filter] if tag_filter else [], fn).stdout
        return contains_any(text, search)

    def has_photoshop_data(self, fn: str) -> bool:
        """Mentions of Adobe / Photoshop anywhere; a rough signal only."""
        return self.metadata_includes(fn, EDITOR_MARKERS)

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    def _set(self, fn: str, tag: str, value: Any) -> subprocess.CompletedProcess | None:
        if self.uses_exiftool:
            return self.shell_exec([f"-{tag}={value}"], fn)
        target = _BUILTIN_WRITABLE.get(tag.lower())
        if not target:
            raise UnsupportedTagError(f"cannot write {tag} without exiftool")
        self.logger.debug("exiftool not found, writing %s with piexif: %s", tag, fn)
        write_tags_with_piexif(fn, {target: value})
        return None

    def set_title(self, fn: str, title: str):
        return self._set(fn, "title", title)

    def get_title(self, fn: str) -> str:
        return self.get_metadata(fn, "-title")

    def set_artist(self, fn: str, artist: str):
        return self._set(fn, "artist", artist)

    def get_artist(self, fn: str) -> str:
        return self.get_metadata(fn, "-artist")

    def set_copyright(self, fn: str, copyright_text: str):
        return self._set(fn, "copyright", copyright_text)

    def get_copyright(self, fn: str) -> str:
        return self.get_metadata(fn, "-copyright")

    def set_image_description(self, fn: str, description: str):
        return self._set(fn, "ImageDescription", description)

    def get_image_description(self, fn: str) -> str:
        return self.get_metadata(fn, "-ImageDescription")

    def set_rating(self, fn: str, rating: int):
        return self._set(fn, "rating", rating)

    def get_rating(self, fn: str) -> str:
        return self.get_metadata(fn, "-rating")

    def set_user_comment(self, fn: str, comment: str):
        return self._set(fn, "UserComment", comment)

    def get_user_comment(self, fn: str) -> str:
        return self.get_metadata(fn, "-UserComment")

    def get_tags(self, fn: str) -> str:
        return self.get_metadata(fn, "-subject")

    def set_tag(self, fn: str, subject: str):
        return self._set(fn, "subject", subject)

    def add_tags(self, fn: str, subject: str | Iterable[str]):
        """Append one tag or several to Subject (``-subject+=``)."""
        tags = [subject] if isinstance(subject, str) else list(subject)
        return self.shell_exec([f"-subject+={t}" for t in tags], fn)

    def set_date_time_original(self, fn: str, date: str | datetime):
        if isinstance(date, datetime):
            date = date.strftime(EXIF_DATE_FORMAT)
        return self._set(fn, "DateTimeOriginal", date)

    def get_date_time_original(self, fn: str) -> str:
        return self.get_metadata(fn, "-DateTimeOriginal")

    def add_to_date_time_original(self, fn: str, y: int = 0, m: int = 0, d: int = 0, h: int = 0, minutes: int = 0):
        """Shift DateTimeOriginal forward (negative values shift back)."""
        if self.uses_exiftool:
            return self.shell_exec([f"-DateTimeOriginal+={y}:{m}:{d} {h}:{minutes}:0"], fn)
        current = self.get_date_time_original(fn)
        if not current:
            raise ValueError(f"no DateTimeOriginal in {fn}")
        date = datetime.strptime(current, EXIF_DATE_FORMAT)
        for interval, units in (("year", y), ("month", m), ("day", d), ("hour", h), ("minute", minutes)):
            if units:
                date = date_add(date, interval, units)
        return self.set_date_time_original(fn, date)

    def set_date_acquired_to_file_creation(self, fn: str) -> subprocess.CompletedProcess:
        return self.shell_exec(["-DateAcquired<FileCreateDate"], fn)

    def set_date_acquired(self, fn: str, date_acquired: str) -> subprocess.CompletedProcess:
        return self.shell_exec([f"-dateAcquired={date_acquired}"], fn)

    def set_file_created(self, fn: str, created: str) -> subprocess.CompletedProcess:
        return self.shell_exec([f"-FileCreateDate={created}"], fn)

    def set_image_unique_id(self, fn: str, unique_id: str):
        return self._set(fn, "ImageUniqueID", unique_id)

    @staticmethod
    def get_local_iso_date_string() -> str:
        return get_local_iso_date_string()
