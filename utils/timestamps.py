# =============================================================================
# utils/timestamps.py - Timestamp layout detection
# =============================================================================

import re
from datetime import datetime
from typing import Optional

OUTPUT_FORMAT = "%Y-%m-%d %H:%M:%S"

# (layout name, detection pattern, strptime format)
TIMESTAMP_LAYOUTS = [
    ("dd.MM.yyyy HH:mm:ss", re.compile(r"^\d{2}\.\d{2}\.\d{4} \d{2}:\d{2}:\d{2}$"), "%d.%m.%Y %H:%M:%S"),
    ("M/d/yyyy h:mm:ss tt", re.compile(r"^\d{1,2}/\d{1,2}/\d{4} \d{1,2}:\d{2}:\d{2} (AM|PM)$"), "%m/%d/%Y %I:%M:%S %p"),
]


def detect_timestamp_format(sample: Optional[str]) -> Optional[str]:
    """Return the strptime format matching a sample value, or None"""
    if not sample:
        return None

    sample = sample.strip()
    for _name, pattern, fmt in TIMESTAMP_LAYOUTS:
        if pattern.match(sample):
            return fmt
    return None


def layout_name(fmt: Optional[str]) -> str:
    """Human readable layout for a strptime format"""
    for name, _pattern, layout_fmt in TIMESTAMP_LAYOUTS:
        if layout_fmt == fmt:
            return name
    return "unknown"


def parse_timestamp(value: Optional[str], fmt: Optional[str]) -> Optional[datetime]:
    """Parse value with the detected format; None when either is missing or they disagree"""
    if not value or not fmt:
        return None
    try:
        return datetime.strptime(value.strip(), fmt)
    except ValueError:
        return None


def format_timestamp(value: Optional[datetime]) -> str:
    return value.strftime(OUTPUT_FORMAT) if value else ""
