# -*- coding: utf-8 -*-
"""
无 exiftool 时的写入回退：用 piexif 直接改 JPEG/TIFF 内嵌 EXIF。
只支持下面 _PIEXIF_TARGETS 中的标签，其余（XMP Subject、FileCreateDate 等）抛 UnsupportedTagError。
"""
from __future__ import annotations

from typing import Any, Callable

import piexif

from photokit.log import get_logger

log = get_logger("exif_io.writer")


class UnsupportedTagError(RuntimeError):
    """The tag cannot be written without exiftool."""


def _sanitize(s: str) -> str:
    if not s:
        return s
    result = []
    for c in s:
        code = ord(c)
        if code == 0 or (code < 32 and c not in "\t\n\r"):
            result.append(" ")
        else:
            result.append(c)
    return "".join(result).strip()


def _encode_ascii(value: Any) -> bytes:
    return _sanitize(str(value)).encode("utf-8")


def _encode_xp_text(value: Any) -> bytes:
    text = _sanitize(str(value))
    if not text:
        return b""
    return text.encode("utf-16-le") + b"\x00\x00"


def _encode_user_comment(value: Any) -> bytes:
    return b"ASCII\x00\x00\x00" + _encode_ascii(value)


def _encode_rating(value: Any) -> int:
    rating = int(value)
    if not 0 <= rating <= 5:
        raise ValueError(f"rating out of range 0-5: {value!r}")
    return rating


# name -> [(ifd, tag_id, encoder), ...]
_PIEXIF_TARGETS: dict[str, list[tuple[str, int, Callable[[Any], Any]]]] = {
    "Title": [
        ("0th", piexif.ImageIFD.XPTitle, _encode_xp_text),
        ("0th", piexif.ImageIFD.DocumentName, _encode_ascii),
    ],
    "Artist": [("0th", piexif.ImageIFD.Artist, _encode_ascii)],
    "Copyright": [("0th", piexif.ImageIFD.Copyright, _encode_ascii)],
    "ImageDescription": [("0th", piexif.ImageIFD.ImageDescription, _encode_ascii)],
    "Rating": [("0th", piexif.ImageIFD.Rating, _encode_rating)],
    "DateTimeOriginal": [("Exif", piexif.ExifIFD.DateTimeOriginal, _encode_ascii)],
    "UserComment": [("Exif", piexif.ExifIFD.UserComment, _encode_user_comment)],
    "ImageUniqueID": [("Exif", piexif.ExifIFD.ImageUniqueID, _encode_ascii)],
}

SUPPORTED_TAGS = frozenset(_PIEXIF_TARGETS)


def write_tags_with_piexif(path: str, values: dict[str, Any]) -> None:
    """
    写入若干标签（键为 exiftool 标签名，如 "Artist"）。值为 None 或 "" 时删除该标签。
    任一标签不支持时在改动文件之前抛 UnsupportedTagError。
    """
    unsupported = [k for k in values if k not in _PIEXIF_TARGETS]
    if unsupported:
        raise UnsupportedTagError(f"cannot write without exiftool: {', '.join(unsupported)}")

    data = piexif.load(path)
    for name, value in values.items():
        for ifd_name, tag_id, encode in _PIEXIF_TARGETS[name]:
            ifd = data.get(ifd_name)
            if not isinstance(ifd, dict):
                ifd = {}
                data[ifd_name] = ifd
            if value is None or value == "":
                ifd.pop(tag_id, None)
            else:
                ifd[tag_id] = encode(value)
    exif_bytes = piexif.dump(data)
    piexif.insert(exif_bytes, path)
    log.debug("piexif wrote %s to %s", ", ".join(values), path)
