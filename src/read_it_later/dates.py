"""Date formatting and lenient date parsing."""

from datetime import datetime

# Formats tried in order by parse_date
DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
]


def format_date(value: datetime, fmt: str) -> str:
    """Format a datetime with a strftime pattern."""
    return value.strftime(fmt)


def format_current_date(fmt: str, now: datetime | None = None) -> str:
    """Format the current local time.

    Args:
        fmt: strftime pattern.
        now: Override for the current time, mainly for tests.

    Returns:
        The formatted date string.
    """
    return format_date(now or datetime.now(), fmt)


def parse_date(date_str: str | None) -> datetime | None:
    """Parse a date string in one of the common web formats.

    Returns:
        The parsed datetime, or None if no known format matches.
    """
    if not date_str:
        return None

    date_str = date_str.strip()

    try:
        return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue

    return None


def reformat_date(date_str: str | None, fmt: str) -> str:
    """Parse ``date_str`` leniently and format it, or return "" if unparsable."""
    parsed = parse_date(date_str)
    return format_date(parsed, fmt) if parsed else ""
