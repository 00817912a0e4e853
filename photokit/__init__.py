# -*- coding: utf-8 -*-
"""
photokit：批量整理照片/文件的小工具库：目录遍历、exiftool 元数据读写、zip 处理。

用法:
    from photokit import WalkOptions, walk_files
    from photokit.exif_io import ImageMetadata
    from photokit.zip_utils import create_zip_file
"""

from photokit.file_walker import (
    DirEntry,
    WalkOptions,
    get_dir_files_info,
    run_for_each_dir,
    run_for_each_file,
    run_for_each_leaf_dir,
    walk_dirs,
    walk_files,
    walk_leaf_dirs,
)
from photokit.log import get_logger

__version__ = "0.1.0"

__all__ = [
    "DirEntry",
    "WalkOptions",
    "get_dir_files_info",
    "run_for_each_file",
    "run_for_each_dir",
    "run_for_each_leaf_dir",
    "walk_files",
    "walk_dirs",
    "walk_leaf_dirs",
    "get_logger",
]
