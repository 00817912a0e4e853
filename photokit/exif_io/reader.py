# -*- coding: utf-8 -*-
"""
无 exiftool 时的读取回退：用 Pillow 读 EXIF，键名换成 exiftool 默认输出的显示名，
再走 parse_exiftool_output，让两条路径得到同样的派生键（tags / date_taken / photoshop）。
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from PIL import ExifTags, Image

from photokit.exif_io.parsing import parse_exiftool_output

try:
    _PIL_IFD_ENUM = ExifTags.IFD
except AttributeError:
    _PIL_IFD_ENUM = None

_EXIF_IFD_TAG_ID = int(getattr(_PIL_IFD_ENUM, "Exif", 34665))

# Pillow tag name -> exiftool display name
DISPLAY_NAMES: dict[str, str] = {
    "ImageDescription": "Image Description",
    "Make": "Make",
    "Model": "Camera Model Name",
    "Software": "Software",
    "Artist": "Artist",
    "Copyright": "Copyright",
    "DateTime": "Modify Date",
    "DateTimeOriginal": "Date/Time Original",
    "DateTimeDigitized": "Create Date",
    "UserComment": "User Comment",
    "ImageUniqueID": "Image Unique ID",
    "Rating": "Rating",
    "XPTitle": "XP Title",
    "XPComment": "XP Comment",
    "XPKeywords": "XP Keywords",
}

_XP_TAGS = {"XPTitle", "XPComment", "XPKeywords", "XPSubject", "XPAuthor"}
_SKIPPED = {"ExifOffset", "GPSInfo", "InteropOffset", "MakerNote", "PrintImageMatching"}


def _tag_name(tag_id: Any) -> str:
    try:
        return str(ExifTags.TAGS.get(int(tag_id), str(tag_id)))
    except (TypeError, ValueError):
        return str(tag_id)


def _display_value(name: str, value: Any) -> str:
    if name in _XP_TAGS and isinstance(value, (bytes, tuple)):
        raw = bytes(value)
        return raw.decode("utf-16-le", errors="replace").rstrip("\x00").strip()
    if name == "UserComment" and isinstance(value, bytes):
        # 8-byte charset header, e.g. b"ASCII\x00\x00\x00"
        return value[8:].decode("utf-8", errors="replace").rstrip("\x00").strip()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00").strip()
    if isinstance(value, tuple):
        return " ".join(_display_value(name, v) for v in value)
    if hasattr(value, "numerator") and hasattr(value, "denominator") and not isinstance(value, int):
        try:
            return f"{float(value):g}"
        except ZeroDivisionError:
            return "0"
    return str(value).strip()


def read_pillow_tags(path: Path | str) -> dict[str, str]:
    """IFD0 + Exif IFD tags keyed by Pillow names; {} for files Pillow cannot open."""
    tags: dict[str, str] = {}
    try:
        with Image.open(path) as image:
            exif = image.getexif()
            if not exif:
                return tags
            for tag_id, value in exif.items():
                name = _tag_name(tag_id)
                if name not in _SKIPPED:
                    tags[name] = _display_value(name, value)
            exif_ifd = exif.get_ifd(_EXIF_IFD_TAG_ID)
            for tag_id, value in (exif_ifd or {}).items():
                name = _tag_name(tag_id)
                if name not in _SKIPPED:
                    tags[name] = _display_value(name, value)
    except OSError:
        return {}
    return tags


def pillow_metadata_as_text(path: Path | str) -> str:
    """Render Pillow tags in exiftool's ``Key : Value`` text layout."""
    tags = read_pillow_tags(path)
    lines = []
    for name, value in tags.items():
        lines.append(f"{DISPLAY_NAMES.get(name, name):<32}: {value}")
    keywords = tags.get("XPKeywords")
    if keywords:
        subject = ", ".join(k.strip() for k in keywords.split(";") if k.strip())
        lines.append(f"{'Subject':<32}: {subject}")
    return "\n".join(lines)


def read_pillow_metadata(path: Path | str) -> dict[str, Any]:
    """Same shape as ImageMetadata.get_all_metadata, read with Pillow."""
    return parse_exiftool_output(pillow_metadata_as_text(path))
