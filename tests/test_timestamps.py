from datetime import datetime

from utils.timestamps import detect_timestamp_format, format_timestamp, layout_name, parse_timestamp


def test_detects_german_layout():
    fmt = detect_timestamp_format("24.01.2025 13:05:00")

    assert layout_name(fmt) == "dd.MM.yyyy HH:mm:ss"
    assert format_timestamp(parse_timestamp("24.01.2025 13:05:00", fmt)) == "2025-01-24 13:05:00"


def test_detects_us_layout():
    fmt = detect_timestamp_format("1/24/2025 1:05:00 PM")

    assert layout_name(fmt) == "M/d/yyyy h:mm:ss tt"
    assert format_timestamp(parse_timestamp("1/24/2025 1:05:00 PM", fmt)) == "2025-01-24 13:05:00"
    assert parse_timestamp("12/31/2024 12:00:00 AM", fmt) == datetime(2024, 12, 31, 0, 0, 0)


def test_unknown_layouts():
    assert detect_timestamp_format("2025-01-24T13:05:00Z") is None
    assert detect_timestamp_format("4.1.2025 13:05:00") is None
    assert detect_timestamp_format("") is None
    assert detect_timestamp_format(None) is None
    assert layout_name(None) == "unknown"


def test_parse_with_missing_or_mismatched_format():
    german = detect_timestamp_format("24.01.2025 13:05:00")

    assert parse_timestamp("1/24/2025 1:05:00 PM", german) is None
    assert parse_timestamp("24.01.2025 13:05:00", None) is None
    assert parse_timestamp("", german) is None
    assert format_timestamp(None) == ""
