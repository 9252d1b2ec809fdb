"""ISO-8601 durations and their compact human-readable form."""

import re
from dataclasses import astuple, dataclass, fields

DURATION_PATTERN = re.compile(
    r"^P(?!$)"
    r"(?:(?P<years>\d+(?:[.,]\d+)?)Y)?"
    r"(?:(?P<months>\d+(?:[.,]\d+)?)M)?"
    r"(?:(?P<weeks>\d+(?:[.,]\d+)?)W)?"
    r"(?:(?P<days>\d+(?:[.,]\d+)?)D)?"
    r"(?:T(?=\d)"
    r"(?:(?P<hours>\d+(?:[.,]\d+)?)H)?"
    r"(?:(?P<minutes>\d+(?:[.,]\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:[.,]\d+)?)S)?"
    r")?$"
)

# Unit letter per component, in display order
UNIT_LETTERS = {
    "years": "y",
    "months": "m",
    "weeks": "w",
    "days": "d",
    "hours": "h",
    "minutes": "m",
    "seconds": "s",
}

# Seconds per component; years and months use fixed 365 and 30 day lengths
UNIT_SECONDS = {
    "years": 365 * 86400,
    "months": 30 * 86400,
    "weeks": 7 * 86400,
    "days": 86400,
    "hours": 3600,
    "minutes": 60,
    "seconds": 1,
}


@dataclass(frozen=True)
class Duration:
    """A duration decomposed into calendar and clock components.

    Components are kept exactly as parsed; ``PT90M`` stays 90 minutes.
    """

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"Duration component {f.name} must not be negative")

    def is_zero(self) -> bool:
        return not any(astuple(self))


def parse_duration(text: str) -> Duration:
    """Parse an ISO-8601 duration such as ``PT1H2M3S`` or ``P1W``.

    Fractional values are truncated to whole units.

    Raises:
        ValueError: If ``text`` is not a valid duration.
    """
    match = DURATION_PATTERN.match(text.strip()) if text else None
    if not match:
        raise ValueError(f"Invalid ISO-8601 duration: {text!r}")

    values = {
        name: int(float(raw.replace(",", "."))) if raw else 0
        for name, raw in match.groupdict().items()
    }
    return Duration(**values)


def format_duration(duration: Duration) -> str:
    """Render non-zero components as e.g. ``"1h 2m 3s"``; zero gives ``""``."""
    parts = [
        f"{getattr(duration, name)}{letter}"
        for name, letter in UNIT_LETTERS.items()
        if getattr(duration, name) > 0
    ]
    return " ".join(parts)


def to_seconds(duration: Duration) -> int:
    """Total length of ``duration`` in seconds."""
    return sum(getattr(duration, name) * factor for name, factor in UNIT_SECONDS.items())
