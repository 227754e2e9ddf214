"""Human-readable dates and sizes for list and media views."""

import math
from datetime import datetime

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_date(value: datetime) -> str:
    """e.g. "Mar 5, 2024"."""
    return f"{value:%b} {value.day}, {value.year}"


def format_relative_time(value: datetime, now: datetime | None = None) -> str:
    """Hours/days ago for the last week, then an absolute date."""
    now = now or datetime.utcnow()
    hours = math.floor((now - value).total_seconds() / 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if hours < 24 * 7:
        days = hours // 24
        return f"{days} day{'s' if days > 1 else ''} ago"
    return format_date(value)


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = round(size / 1024**exponent, 2)
    # "1.5 KB" but "2 KB", not "2.0 KB"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[exponent]}"
