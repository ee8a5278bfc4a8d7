"""Shared parsing helpers for values delivered by the record provider."""

from __future__ import annotations

import re

from filmlink.core.errors import InvalidRuntime, InvalidYear

# "2005", "2015-2017", "2015–2017", "2015-" (open range, still airing)
_YEAR_RE = re.compile(r"^(\d{4})\s*(?:[-–—]\s*(\d{4})?)?$")

# "93", "93 min", "1h 33m", "2h", "45m", "1h 5min"
_RUNTIME_RE = re.compile(r"^(?:(\d+)\s*h)?\s*(?:(\d+)\s*m(?:in)?)?$")


def _strip_year_decoration(value: str) -> str:
    """Strip whitespace and wrapping parentheses, e.g. "(2015–2016)"."""
    text = value.strip()
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1].strip()
    return text


def parse_year_bounds(value: str | int, record_id: int | str | None = None) -> tuple[int, int]:
    """Parse a release year or an inclusive year range.

    Args:
        value: Year string from a scraped page, or an int year
        record_id: Title identifier, only used in the error message

    Returns:
        Tuple of (start, end); end equals start for a single year and for
        open ranges such as "2015-"

    Raises:
        InvalidYear: If the value is not a year or a year range
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if value <= 0:
            raise InvalidYear(str(value), record_id)
        return value, value

    if not isinstance(value, str):
        raise InvalidYear(repr(value), record_id)

    match = _YEAR_RE.match(_strip_year_decoration(value))
    if not match:
        raise InvalidYear(value, record_id)

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    if end < start:
        raise InvalidYear(value, record_id)
    return start, end


def parse_runtime(value: str | int | None, record_id: int | str | None = None) -> int | None:
    """Parse a runtime into whole minutes.

    Plain minute counts come from the primary catalog ("93"); the secondary
    catalog prints hours and minutes ("1h 33m", "2h", "45m").

    Args:
        value: Runtime string, int minutes, or None
        record_id: Title identifier, only used in the error message

    Returns:
        Runtime in minutes, or None when the runtime is absent (None, blank
        or 0, which the catalog reports for unknown runtimes)

    Raises:
        InvalidRuntime: If the value is present but malformed
    """
    if value is None:
        return None

    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise InvalidRuntime(str(value), record_id)
        return value or None

    if not isinstance(value, str):
        raise InvalidRuntime(repr(value), record_id)

    text = value.strip().lower()
    if not text:
        return None

    if text.isdigit():
        return int(text) or None

    match = _RUNTIME_RE.match(text)
    if not match or not (match.group(1) or match.group(2)):
        raise InvalidRuntime(value, record_id)

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return hours * 60 + minutes or None
