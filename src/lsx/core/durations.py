"""Duration parsing for command-line timeouts.

Executor commands accept timeouts either as plain seconds ("30", "0.5") or
with a unit suffix ("500ms", "30s", "2m", "1h").
"""

from __future__ import annotations

import re

# Supported unit suffixes and their size in seconds
_UNIT_SECONDS: dict[str, float] = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PATTERN = re.compile(r"(?P<value>\d+(?:\.\d+)?)(?P<unit>ms|s|m|h)?")


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Args:
        value: Duration string (case-insensitive), e.g. "500ms" or "30".

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the value is not a valid non-negative duration.

    Examples:
        >>> parse_duration("500ms")
        0.5
        >>> parse_duration("2m")
        120.0
    """
    match = _DURATION_PATTERN.fullmatch(value.strip().lower())
    if match is None:
        raise ValueError(
            f"Invalid duration: {value!r}. "
            "Use seconds or a number with ms, s, m or h suffix."
        )
    unit = match.group("unit") or "s"
    return float(match.group("value")) * _UNIT_SECONDS[unit]


def format_duration(seconds: float) -> str:
    """Format seconds as a millisecond duration string.

    The result is always accepted by parse_duration().

    Args:
        seconds: Non-negative duration in seconds.

    Returns:
        Duration string such as "1500ms".
    """
    return f"{max(0, round(seconds * 1000))}ms"
