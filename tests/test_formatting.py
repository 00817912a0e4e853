from datetime import datetime

import pytest

from photokit.formatting import (
    REGEX,
    date_add,
    elapsed_time,
    format_bytes,
    format_duration,
    get_date_formatted_ymd,
    get_full_month_name,
    get_index_percentage,
    insert_into_template,
    log_object,
    modify_current_date,
)


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 Bytes"),
        (500, "500 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (1234567, "1.18 MB"),
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


def test_format_bytes_decimals():
    assert format_bytes(1234567, decimals=0) == "1 MB"
    assert format_bytes(1234567, decimals=-3) == "1 MB"


def test_format_bytes_rejects_negative():
    with pytest.raises(ValueError):
        format_bytes(-1)


@pytest.mark.parametrize(
    "ms, expected",
    [
        (0, "0 Seconds"),
        (1500, "2 Seconds"),
        (90_000, "1 Minutes 30 Seconds"),
        (3_600_000, "1 Hours"),
        (86_400_000 + 4 * 3_600_000 + 32 * 60_000 + 9_000, "1 Days 4 Hours 32 Minutes 9 Seconds"),
    ],
)
def test_format_duration(ms, expected):
    assert format_duration(ms) == expected


def test_elapsed_time_block():
    text = elapsed_time(datetime(2024, 1, 1, 10, 0, 0), datetime(2024, 1, 1, 10, 2, 5))

    assert "Start Time:   2024-01-01 10:00:00" in text
    assert "End Time:   2024-01-01 10:02:05" in text
    assert text.endswith("Time Elapsed:   2 Minutes 5 Seconds")


def test_index_percentage():
    assert get_index_percentage(0, 4) == "(0/4 - 25%)"
    assert get_index_percentage(2, 3) == "(2/3 - 100%)"


def test_month_and_ymd():
    date = datetime(2024, 3, 5, 23, 59)

    assert get_full_month_name(date) == "March"
    assert get_date_formatted_ymd(date) == "2024-03-05"
    assert get_date_formatted_ymd("2021-12-09T08:00:00") == "2021-12-09"


def test_date_add_clamps_month_end():
    assert date_add(datetime(2024, 1, 31), "month", 1) == datetime(2024, 2, 29)
    assert date_add(datetime(2024, 2, 29), "year", 1) == datetime(2025, 2, 28)
    assert date_add(datetime(2024, 11, 30), "quarter", 1) == datetime(2025, 2, 28)
    assert date_add(datetime(2024, 3, 31), "month", -1) == datetime(2024, 2, 29)


def test_date_add_fixed_intervals():
    start = datetime(2024, 1, 1, 12, 0, 0)

    assert date_add(start, "week", 2) == datetime(2024, 1, 15, 12, 0, 0)
    assert date_add(start, "DAY", -1) == datetime(2023, 12, 31, 12, 0, 0)
    assert date_add(start, "hour", 13) == datetime(2024, 1, 2, 1, 0, 0)
    assert date_add(start, "minute", 30) == datetime(2024, 1, 1, 12, 30, 0)
    assert date_add(start, "second", 61) == datetime(2024, 1, 1, 12, 1, 1)


def test_date_add_bad_input():
    assert date_add("2024-01-01", "day", 1) is None
    with pytest.raises(ValueError):
        date_add(datetime(2024, 1, 1), "fortnight", 1)


def test_modify_current_date():
    now = datetime(2024, 1, 31, 8, 0, 0)

    assert modify_current_date(m=1, d=1, h=2, now=now) == datetime(2024, 3, 1, 10, 0, 0)
    assert modify_current_date(now=now) == now


def test_insert_into_template_replaces_first_slot():
    assert insert_into_template("Hello {{}} and {{}}", "x") == "Hello x and {{}}"
    assert insert_into_template("no slot", "x") == "no slot"


def test_regex_patterns():
    assert REGEX["url"].search("see https://exiftool.org/install.html for setup")
    assert REGEX["url"].search("no links here") is None
    assert REGEX["filepath"].match(r"C:\Photos\2024\img.jpg")
    assert REGEX["filepath"].match("/home/me/img.jpg") is None


def test_log_object_pretty_prints_to_stdout(capsys):
    log_object({"tags": ["beach", "sunset"], "rating": 5})

    out = capsys.readouterr().out
    assert out == "{'tags': ['beach', 'sunset'], 'rating': 5}\n"
