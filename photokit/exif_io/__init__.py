# -*- coding: utf-8 -*-
"""
exif_io：exiftool 定位、输出解析、ImageMetadata 读写客户端；
无 exiftool 时以 Pillow 读取、piexif 写入作为回退。
"""
from __future__ import annotations

from photokit.exif_io.exiftool_path import (
    ExifToolNotFoundError,
    get_exiftool_executable_path,
    require_exiftool,
)
from photokit.exif_io.metadata import ImageMetadata, format_command
from photokit.exif_io.parsing import contains_any, get_shell_output_value, parse_exiftool_output
from photokit.exif_io.reader import read_pillow_metadata
from photokit.exif_io.writer import SUPPORTED_TAGS, UnsupportedTagError, write_tags_with_piexif

__all__ = [
    "ExifToolNotFoundError",
    "UnsupportedTagError",
    "get_exiftool_executable_path",
    "require_exiftool",
    "ImageMetadata",
    "format_command",
    "contains_any",
    "get_shell_output_value",
    "parse_exiftool_output",
    "read_pillow_metadata",
    "write_tags_with_piexif",
    "SUPPORTED_TAGS",
]
