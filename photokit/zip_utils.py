# -*- coding: utf-8 -*-
"""photokit.zip_utils – flatten, extract and build zip archives.

Usage::
    from photokit.zip_utils import get_zip_and_files, extract_to_and_remove_subfolder

    data = get_zip_and_files("album.zip")
    with data.zip:
        extract_to_and_remove_subfolder(data, "out/album")   # flat, sanitized names

    create_zip_file("out/album", "album-flat.zip")
"""
from __future__ import annotations

import io
import os
import zipfile
from typing import NamedTuple

from photokit.file_utils import ensure_dir_exists, rename_file, sanitize_filename, save_file
from photokit.file_walker import DirEntry, WalkOptions, get_dir_files_info, run_for_each_file
from photokit.log import get_logger

log = get_logger("zip_utils")


class ZipData(NamedTuple):
    zip: zipfile.ZipFile
    files: list[zipfile.ZipInfo]


def get_zip(filepath: str) -> zipfile.ZipFile:
    """Open for reading; the caller closes it (it is a context manager)."""
    return zipfile.ZipFile(filepath)


def get_zip_files(filepath: str) -> list[zipfile.ZipInfo]:
    with zipfile.ZipFile(filepath) as zf:
        return zf.infolist()


def get_zip_and_files(filepath: str) -> ZipData:
    zf = get_zip(filepath)
    return ZipData(zf, zf.infolist())


def _flat_name(info: zipfile.ZipInfo) -> str:
    return info.filename.rstrip("/").rsplit("/", 1)[-1]


def has_subfolders(zf: zipfile.ZipFile) -> bool:
    """Directory entries, or file entries stored under a folder path."""
    return any(info.is_dir() or "/" in info.filename.rstrip("/") for info in zf.infolist())


def extract_to_and_remove_subfolder(zip_data: ZipData, output_path: str) -> list[str]:
    """
    Write every file entry directly into ``output_path`` (folders dropped,
    existing files overwritten), then rename the extracted files to their
    sanitized names. Returns the final paths.
    """
    ensure_dir_exists(output_path)
    for info in zip_data.files:
        if info.is_dir():
            continue
        save_file(os.path.join(output_path, _flat_name(info)), zip_data.zip.read(info))

    renamed: list[str] = []

    def sanitize(entry: DirEntry, _options: WalkOptions) -> None:
        target = os.path.join(entry.dir_path, sanitize_filename(entry.filename))
        if target != entry.filepath:
            rename_file(entry.filepath, target)
        renamed.append(target)

    run_for_each_file(get_dir_files_info(output_path), sanitize)
    log.debug("extracted %d files to %s", len(renamed), output_path)
    return renamed


def remove_sub_folder(filepath: str, output_path: str | None = None) -> bool:
    """
    把压缩包内所有文件移到根目录。仅在确有子目录、或指定了不同的输出路径时写出。
    同名文件只保留第一个。返回是否写出了新文件。
    """
    output_path = output_path or filepath
    buf = io.BytesIO()
    with zipfile.ZipFile(filepath) as zf:
        dir_found = has_subfolders(zf)
        if not dir_found and os.path.abspath(output_path) == os.path.abspath(filepath):
            return False
        seen: set[str] = set()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as out:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                name = _flat_name(info)
                if name in seen:
                    log.warning("duplicate name %s in %s, skipped", name, filepath)
                    continue
                seen.add(name)
                out.writestr(name, zf.read(info))
    save_file(output_path, buf.getvalue())
    return True


def create_zip_file(dir_path: str, output_path: str | None = None, recursive: bool = False) -> ZipData:
    """
    Archive the files of ``dir_path``. Top level only by default; with
    ``recursive`` the whole tree is walked (``ignore`` folders skipped) and
    paths are stored relative to ``dir_path``. The archive is built in memory
    and written to ``output_path`` when given.
    """
    root = os.path.abspath(dir_path)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        if recursive:

            def add(entry: DirEntry, _options: WalkOptions) -> None:
                zf.write(entry.filepath, arcname=os.path.relpath(entry.filepath, root).replace(os.sep, "/"))

            run_for_each_file(get_dir_files_info(root), add)
        else:
            for entry in get_dir_files_info(root):
                if not entry.is_dir:
                    zf.write(entry.filepath, arcname=entry.filename)
    data = buf.getvalue()
    if output_path:
        save_file(output_path, data)
        log.debug("wrote %s", output_path)
    zf = zipfile.ZipFile(io.BytesIO(data))
    return ZipData(zf, zf.infolist())
