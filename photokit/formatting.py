# -*- coding: utf-8 -*-
"""photokit.formatting – size, duration, date and template helpers.

Usage::
    from photokit.formatting import format_bytes, format_duration, date_add
    format_bytes(1536)                 # '1.5 KB'
    format_duration(90_000)            # '1 Minutes 30 Seconds'
    date_add(datetime(2024, 1, 31), "month", 1)   # 2024-02-29
"""
from __future__ import annotations

import calendar
import math
import re
from datetime import datetime, timedelta
from pprint import pprint
from typing import Any

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

REGEX = {
    "url": re.compile(r"(ftp|http|https)://(\w+:{0,1}\w*@)?(\S+)(:[0-9]+)?(/|/([\w#!:.?+=&%@!\-/]))?"),
    "filepath": re.compile(r"^(?:[a-zA-Z]:|\\\\[\w.]+\\[\w.$]+)\\(?:[\w]+\\)*\w([\w.])+$"),
}

_TEMPLATE_SLOT = "{{}}"


def _trim_number(value: float, decimals: int) -> str:
    txt = f"{value:.{decimals}f}"
    if "." in txt:
        txt = txt.rstrip("0").rstrip(".")
    return txt


def format_bytes(num_bytes: int | float, decimals: int = 2) -> str:
    """1024 进制的人类可读大小，去掉多余的尾随 0：1536 -> '1.5 KB'。"""
    if num_bytes < 0:
        raise ValueError(f"negative size: {num_bytes!r}")
    if num_bytes == 0:
        return "0 Bytes"
    decimals = max(0, decimals)
    k = 1024
    i = int(math.floor(math.log(num_bytes) / math.log(k))) if num_bytes >= 1 else 0
    i = min(i, len(SIZE_UNITS) - 1)
    return f"{_trim_number(num_bytes / k ** i, decimals)} {SIZE_UNITS[i]}"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_duration(milliseconds: int | float) -> str:
    """
    Milliseconds as '5 Days 4 Hours 32 Minutes 9 Seconds'.

    Larger units are left off when zero. Seconds are shown when non-zero, or
    when there are no hours and no minutes (so short waits read '0 Seconds').
    """
    total_seconds = _round_half_up(milliseconds / 1000)
    d = total_seconds // 86400
    total_seconds -= d * 86400
    h = total_seconds // 3600
    total_seconds -= h * 3600
    m = total_seconds // 60
    total_seconds -= m * 60

    days = f"{d} Days " if d >= 1 else ""
    hours = f"{h} Hours " if h >= 1 else ""
    mins = f"{m} Minutes " if m >= 1 else ""
    sec = f"{total_seconds} Seconds" if (h == 0 and m == 0) or total_seconds >= 1 else ""
    return f"{days}{hours}{mins}{sec}".rstrip()


def _as_datetime(value: datetime | int | float) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromtimestamp(value)


def elapsed_time(start_time: datetime | int | float, end_time: datetime | int | float) -> str:
    """Start / end / elapsed block for the end-of-run summary (timestamps in seconds)."""
    start = _as_datetime(start_time)
    end = _as_datetime(end_time)
    elapsed = format_duration((end - start).total_seconds() * 1000)
    text = f"\n\t  Start Time:   {start:%Y-%m-%d %H:%M:%S}"
    text += f"\n\t    End Time:   {end:%Y-%m-%d %H:%M:%S}"
    text += f"\n\tTime Elapsed:   {elapsed}"
    return text


def get_index_percentage(i: int, length: int) -> str:
    return f"({i}/{length} - {math.floor(((i + 1) / length) * 100)}%)"


def get_full_month_name(date: datetime) -> str:
    return MONTH_NAMES[date.month - 1]


def get_date_formatted_ymd(date: datetime | str) -> str:
    """Date as YYYY-MM-DD; ISO strings are accepted."""
    if isinstance(date, str):
        date = datetime.fromisoformat(date)
    return f"{date.year}-{date.month:02d}-{date.day:02d}"


def get_local_iso_date_string(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return now.isoformat(timespec="milliseconds")


def _add_months(date: datetime, months: int) -> datetime:
    # Jan 31 + 1 month -> last day of February
    index = date.month - 1 + months
    year = date.year + index // 12
    month = index % 12 + 1
    day = min(date.day, calendar.monthrange(year, month)[1])
    return date.replace(year=year, month=month, day=day)


def date_add(date: Any, interval: str, units: int) -> datetime | None:
    """
    Add ``units`` of ``interval`` to a datetime, like MySQL DATE_ADD.

    interval: year, quarter, month, week, day, hour, minute or second.
    Year/quarter/month clamp to the end of the target month. Returns None when
    ``date`` is not a datetime; an unknown interval raises ValueError.
    """
    if not isinstance(date, datetime):
        return None
    interval = str(interval).lower()
    if interval == "year":
        return _add_months(date, 12 * units)
    if interval == "quarter":
        return _add_months(date, 3 * units)
    if interval == "month":
        return _add_months(date, units)
    if interval == "week":
        return date + timedelta(weeks=units)
    if interval == "day":
        return date + timedelta(days=units)
    if interval == "hour":
        return date + timedelta(hours=units)
    if interval == "minute":
        return date + timedelta(minutes=units)
    if interval == "second":
        return date + timedelta(seconds=units)
    raise ValueError(f"unknown interval: {interval!r}")


def modify_current_date(
    y: int = 0,
    m: int = 0,
    d: int = 0,
    h: int = 0,
    minutes: int = 0,
    s: int = 0,
    now: datetime | None = None,
) -> datetime:
    date = now or datetime.now()
    for interval, units in (
        ("year", y),
        ("month", m),
        ("day", d),
        ("hour", h),
        ("minute", minutes),
        ("second", s),
    ):
        if units:
            date = date_add(date, interval, units)
    return date


def insert_into_template(template: str, value: Any) -> str:
    """Replace the first ``{{}}`` slot of the template."""
    return template.replace(_TEMPLATE_SLOT, str(value), 1)


def log_object(obj: Any) -> None:
    pprint(obj, width=120, sort_dicts=False)
