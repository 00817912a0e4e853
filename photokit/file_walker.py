# -*- coding: utf-8 -*-
"""photokit.file_walker – directory listing and visitor-driven tree walks.

Usage::
    from photokit.file_walker import WalkOptions, get_dir_files_info, run_for_each_file

    def visit(entry, options):
        print(entry.filepath)
        if entry.filename == "last.jpg":
            options.stop = True            # no more visitor calls anywhere

    opts = WalkOptions(excluded_extensions={".xmp"})
    run_for_each_file(get_dir_files_info("/photos"), visit, opts)

A directory named exactly ``ignore`` is never entered, whatever the options.
The visitor may set ``stop`` (abort the whole walk) or ``stop_current_dir``
(skip the rest of the directory being walked, then the flag clears itself);
the walker reads both before every entry. Exceptions raised by the visitor
are not caught and abort the walk.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable

from photokit.file_utils import is_dir
from photokit.formatting import format_bytes
from photokit.log import get_logger

log = get_logger("file_walker")

IGNORED_DIR_NAME = "ignore"


@dataclass(frozen=True)
class DirEntry:
    """Snapshot of one directory child, taken when the directory was listed."""

    filename: str
    filepath: str
    basename: str
    ext: str
    is_dir: bool
    dir_path: str
    parent_dir_name: str
    birthtime: datetime
    size: str
    size_bytes: int = 0


@dataclass
class WalkOptions:
    """Control state shared by reference through one traversal."""

    stop: bool = False
    stop_current_dir: bool = False
    skip_recursion: bool = False
    excluded_extensions: set[str] = field(default_factory=set)

    def stop_all(self) -> None:
        self.stop = True

    def skip_rest_of_dir(self) -> None:
        self.stop_current_dir = True

    def is_excluded(self, entry: DirEntry) -> bool:
        return entry.ext in self.excluded_extensions or entry.filename == IGNORED_DIR_NAME

    def _consume_stop_current_dir(self) -> bool:
        # one-shot: reading a raised flag clears it
        if self.stop_current_dir:
            self.stop_current_dir = False
            return True
        return False


FileVisitor = Callable[[DirEntry, WalkOptions], None]
DirVisitor = Callable[[list[DirEntry], WalkOptions], None]


def _birthtime(st: os.stat_result) -> datetime:
    ts = getattr(st, "st_birthtime", None)
    if ts is None:
        ts = st.st_ctime
    return datetime.fromtimestamp(ts)


def get_dir_files_info(dir_path: str) -> list[DirEntry]:
    """
    List the immediate children of ``dir_path`` in listing order (unsorted).

    A missing or unreadable directory raises the OSError from the listing.
    """
    entries: list[DirEntry] = []
    for filename in os.listdir(dir_path):
        filepath = os.path.abspath(os.path.join(dir_path, filename))
        ext = os.path.splitext(filename)[1]
        entry_is_dir = is_dir(filepath)
        st = os.stat(filepath)
        parent = os.path.dirname(filepath)
        entries.append(
            DirEntry(
                filename=filename,
                filepath=filepath,
                basename=filename if entry_is_dir else filename[: len(filename) - len(ext)],
                ext=ext,
                is_dir=entry_is_dir,
                dir_path=filepath if entry_is_dir else parent,
                parent_dir_name=os.path.basename(parent),
                birthtime=_birthtime(st),
                size=format_bytes(st.st_size),
                size_bytes=st.st_size,
            )
        )
    return entries


def run_for_each_file(
    files: Iterable[DirEntry],
    visitor: FileVisitor,
    options: WalkOptions | None = None,
) -> None:
    """
    Call ``visitor(entry, options)`` for every file, depth-first, pre-order.

    Entries whose extension is in ``options.excluded_extensions`` are skipped,
    directories included. ``skip_recursion`` keeps the walk on this level.
    """
    if options is None:
        options = WalkOptions()
    for entry in files:
        if options.stop:
            break
        if options._consume_stop_current_dir():
            break
        if options.is_excluded(entry):
            continue
        if entry.is_dir:
            if not options.skip_recursion:
                run_for_each_file(get_dir_files_info(entry.filepath), visitor, options)
        else:
            visitor(entry, options)
    # raised on the last entry of this level: must not leak into the parent
    options.stop_current_dir = False


def _dir_level(entries: list[DirEntry], visitor: DirVisitor, options: WalkOptions) -> None:
    for entry in entries:
        if options.stop:
            break
        if options._consume_stop_current_dir():
            break
        if entry.is_dir and not options.skip_recursion:
            _dir_level(_without_ignored(get_dir_files_info(entry.filepath)), visitor, options)
    # a flag left by the children belongs to them; one set by this visitor applies to our siblings
    options.stop_current_dir = False
    visitor(entries, options)


def _without_ignored(files: Iterable[DirEntry]) -> list[DirEntry]:
    return [entry for entry in files if entry.filename != IGNORED_DIR_NAME]


def run_for_each_dir(
    files: Iterable[DirEntry],
    visitor: DirVisitor,
    options: WalkOptions | None = None,
) -> None:
    """
    Call ``visitor(entries, options)`` once per directory level, post-order.

    ``entries`` is the whole listing of that level minus ``ignore`` entries.
    The visitor still runs for a level whose loop was cut short by ``stop`` or
    ``stop_current_dir``. ``stop_current_dir`` raised by a level's visitor
    skips the remaining siblings of that level, nothing above it.
    ``excluded_extensions`` is not applied here.
    """
    if options is None:
        options = WalkOptions()
    _dir_level(_without_ignored(files), visitor, options)
    options.stop_current_dir = False


def run_for_each_leaf_dir(
    files: Iterable[DirEntry],
    visitor: DirVisitor,
    options: WalkOptions | None = None,
) -> None:
    """Like run_for_each_dir, but only for levels without subdirectories."""
    if options is None:
        options = WalkOptions()

    def leaf_only(entries: list[DirEntry], opts: WalkOptions) -> None:
        if not any(entry.is_dir for entry in entries):
            visitor(entries, opts)

    run_for_each_dir(files, leaf_only, options)


def walk_files(root: str, visitor: FileVisitor, options: WalkOptions | None = None) -> WalkOptions:
    options = options if options is not None else WalkOptions()
    log.debug("walk files: %s", root)
    run_for_each_file(get_dir_files_info(root), visitor, options)
    return options


def walk_dirs(root: str, visitor: DirVisitor, options: WalkOptions | None = None) -> WalkOptions:
    options = options if options is not None else WalkOptions()
    log.debug("walk dirs: %s", root)
    run_for_each_dir(get_dir_files_info(root), visitor, options)
    return options


def walk_leaf_dirs(root: str, visitor: DirVisitor, options: WalkOptions | None = None) -> WalkOptions:
    options = options if options is not None else WalkOptions()
    log.debug("walk leaf dirs: %s", root)
    run_for_each_leaf_dir(get_dir_files_info(root), visitor, options)
    return options
