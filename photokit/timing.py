# -*- coding: utf-8 -*-
"""photokit.timing – rate-limit waits between tool/network calls, and named spans.

Usage::
    from photokit.timing import random_wait_on_index, stat_span, stat_report

    for i, path in enumerate(paths):
        with stat_span("rename"):
            rename_in_place(path, new_name(path))
        random_wait_on_index(i, logger=log)   # 1-10s, every 20th 3-5min, every 100th 10-20min

    stat_report(log)  # "exiftool: 40 calls, 6.412s" (ImageMetadata records its own span)
"""
from __future__ import annotations

import random
import sys
import time
from contextlib import contextmanager
from typing import Any, Generator

from photokit.formatting import format_duration

MINUTE_MS = 60_000

# patched in tests
_sleep = time.sleep


def random_range(min_ms: int, max_ms: int) -> int:
    """Random integer in [min_ms, max_ms)."""
    return int(random.random() * (max_ms - min_ms) + min_ms)


def wait(ms: int = 1000) -> None:
    _sleep(ms / 1000)


def random_wait(min_ms: int, max_ms: int) -> int:
    ms = random_range(min_ms, max_ms)
    wait(ms)
    return ms


def custom_random_wait_on_index(
    index: int,
    constant_wait_min: int,
    constant_wait_max: int,
    shorter_wait_every: int,
    shorter_wait_min: int,
    shorter_wait_max: int,
    longer_wait_every: int,
    longer_wait_min: int,
    longer_wait_max: int,
    logger: Any = None,
) -> int:
    """
    Always wait between the constant bounds; on a multiple of
    ``longer_wait_every`` additionally wait the longer range, otherwise on a
    multiple of ``shorter_wait_every`` the shorter one. Index 0 counts as a
    multiple. Returns the total milliseconds waited.
    """
    total = random_wait(constant_wait_min, constant_wait_max)
    extra = 0
    if index % longer_wait_every == 0:
        extra = random_range(longer_wait_min, longer_wait_max)
    elif index % shorter_wait_every == 0:
        extra = random_range(shorter_wait_min, shorter_wait_max)
    if extra:
        if logger is not None:
            logger.info("\tWaiting %s", format_duration(extra))
        wait(extra)
    return total + extra


def random_wait_on_index(index: int, logger: Any = None) -> int:
    return custom_random_wait_on_index(
        index,
        1_000,
        10_000,
        20,
        MINUTE_MS * 3,
        MINUTE_MS * 5,
        100,
        MINUTE_MS * 10,
        MINUTE_MS * 20,
        logger,
    )


_open_spans: dict[str, float] = {}
_totals: dict[str, list[float]] = {}  # name -> [calls, seconds]


def stat_reset() -> None:
    _open_spans.clear()
    _totals.clear()


def stat_begin(name: str) -> None:
    _open_spans[name] = time.perf_counter()


def stat_end(name: str) -> float | None:
    """Close ``name`` and add it to the totals; None when it was never opened."""
    started = _open_spans.pop(name, None)
    if started is None:
        return None
    elapsed = time.perf_counter() - started
    total = _totals.setdefault(name, [0, 0.0])
    total[0] += 1
    total[1] += elapsed
    return elapsed


@contextmanager
def stat_span(name: str) -> Generator[None, None, None]:
    stat_begin(name)
    try:
        yield
    finally:
        stat_end(name)


def stat_totals() -> dict[str, tuple[int, float]]:
    return {name: (int(calls), seconds) for name, (calls, seconds) in _totals.items()}


def stat_report(logger: Any = None) -> list[str]:
    """
    One line per span name, e.g. ``exiftool: 12 calls, 3.402s``.
    Lines go to ``logger.info`` when given, otherwise to stderr.
    """
    lines = [
        f"{name}: {int(calls)} calls, {seconds:.3f}s"
        for name, (calls, seconds) in sorted(_totals.items())
    ]
    for line in lines:
        if logger is not None:
            logger.info(line)
        else:
            print(line, file=sys.stderr, flush=True)
    return lines
