"""Duration parsing for the scan_interval setting."""

import re

_ISO_PATTERN = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$")
_HUMAN_PATTERN = re.compile(r"(\d+)([smhd])")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed or is out of range."""


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string to seconds.

    Accepts human-readable values ("30m", "1h30m", "2d") and ISO-8601
    durations ("PT30M", "P1D", "P1DT12H").

    Raises:
        DurationParseError: If the value is empty, malformed or zero

    Examples:
        >>> parse_duration("1h30m")
        5400
        >>> parse_duration("P1DT12H")
        129600
    """
    value = re.sub(r"\s+", "", duration_str or "")
    if not value:
        raise DurationParseError("Duration string cannot be empty")

    if value.upper().startswith("P"):
        match = _ISO_PATTERN.match(value.upper())
        if not match or value.upper() in ("P", "PT") or value.upper().endswith("T"):
            raise DurationParseError(
                f"Invalid ISO-8601 duration: '{duration_str}'. Expected e.g. 'PT15M', 'PT1H', 'P1D'"
            )
        days, hours, minutes, seconds = (int(part or 0) for part in match.groups())
        total = days * 86400 + hours * 3600 + minutes * 60 + seconds
    else:
        pairs = _HUMAN_PATTERN.findall(value.lower())
        if not pairs or "".join(n + u for n, u in pairs) != value.lower():
            raise DurationParseError(
                f"Invalid duration: '{duration_str}'. "
                "Use digits with units s, m, h, d (e.g. '15m', '1h30m', '2d')"
            )
        total = sum(int(number) * _UNIT_SECONDS[unit] for number, unit in pairs)

    if total == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")

    return total


def validate_duration_range(seconds: int, min_seconds: int, max_seconds: int) -> None:
    """
    Raise DurationParseError unless min_seconds <= seconds <= max_seconds.
    """
    if seconds < min_seconds:
        raise DurationParseError(
            f"Scan interval too short: {_humanize(seconds)}. Minimum is {_humanize(min_seconds)}."
        )
    if seconds > max_seconds:
        raise DurationParseError(
            f"Scan interval too long: {_humanize(seconds)}. Maximum is {_humanize(max_seconds)}."
        )


def _humanize(seconds: int) -> str:
    for unit_seconds, label in ((86400, "day"), (3600, "hour"), (60, "minute")):
        if seconds >= unit_seconds:
            count = seconds // unit_seconds
            return f"{count} {label}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
