"""Date formatting for Google Wallet passes.

Callers send dates as plain day strings (``31.12.2024``). Google Wallet
expects RFC 3339 timestamps, and a pass whose end is truncated to midnight
UTC disappears a day early for holders west of Greenwich. Dates are therefore
anchored to the end of the day in the input timezone before converting to UTC.
"""

import re
from datetime import datetime
from datetime import timezone as dt_timezone
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta

from wallet.exceptions import InvalidDateError

DEFAULT_INPUT_FORMAT = "d.m.Y"
DEFAULT_INPUT_TIMEZONE = "UTC"
ZERO_INTERVAL = "P0D"

OUTPUT_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Day/month/year tokens accepted in input formats, mapped to strptime directives.
FORMAT_TOKENS = {
    "d": "%d",
    "j": "%d",
    "m": "%m",
    "n": "%m",
    "Y": "%Y",
    "y": "%y",
    "H": "%H",
    "G": "%H",
    "i": "%M",
    "s": "%S",
}

_DURATION_RE = re.compile(
    r"^P(?!$)"
    r"(?:(?P<years>\d+)Y)?"
    r"(?:(?P<months>\d+)M)?"
    r"(?:(?P<weeks>\d+)W)?"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T(?=\d)(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def to_strptime_format(input_format: str) -> str:
    """Translate a day/month/year token format (``d.m.Y``) into a strptime pattern.

    A backslash escapes the following character. Characters that are not
    tokens are kept as literals.
    """
    parts: list[str] = []
    escaped = False
    for char in input_format:
        if escaped:
            parts.append("%%" if char == "%" else char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in FORMAT_TOKENS:
            parts.append(FORMAT_TOKENS[char])
        elif char == "%":
            parts.append("%%")
        else:
            parts.append(char)
    return "".join(parts)


def parse_duration(duration: str) -> relativedelta:
    """Parse an ISO 8601 duration such as ``P7D`` or ``P1MT12H``.

    Raises:
        InvalidDateError: If the duration is malformed.
    """
    match = _DURATION_RE.match(duration or "")
    if match is None:
        raise InvalidDateError(f"Invalid interval: {duration}")
    parts = {name: int(value) for name, value in match.groupdict().items() if value is not None}
    return relativedelta(**parts)  # type: ignore[arg-type]


def get_timezone(name: str) -> tzinfo:
    """Resolve a timezone name.

    Raises:
        InvalidDateError: If the timezone is unknown.
    """
    if name.upper() in ("UTC", "Z"):
        return dt_timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidDateError(f"Unknown timezone: {name}")


class DateIntervalFormatter:
    """Formats caller dates as end-of-day UTC timestamps."""

    def __init__(
        self,
        input_format: str = DEFAULT_INPUT_FORMAT,
        input_timezone: str = DEFAULT_INPUT_TIMEZONE,
    ) -> None:
        self.input_format = input_format
        self.input_timezone = input_timezone

    def format(
        self,
        date_string: str,
        input_format: str | None = None,
        input_timezone: str | None = None,
        grace_interval: str = ZERO_INTERVAL,
    ) -> str:
        """Format a date string as the last second of its day, in UTC.

        Args:
            date_string: The date to format, e.g. ``31.12.2024``.
            input_format: Token format of ``date_string``. Defaults to the formatter's format.
            input_timezone: Timezone the date is expressed in. Defaults to the formatter's timezone.
            grace_interval: ISO 8601 duration added before anchoring to the end of the day.

        Returns:
            A timestamp such as ``2024-12-31T23:59:59.000000Z``.

        Raises:
            InvalidDateError: If the date, timezone or interval cannot be parsed.
        """
        if not isinstance(date_string, str):
            raise InvalidDateError(f"Invalid date: {date_string!r}")

        pattern = to_strptime_format(input_format or self.input_format)
        tz = get_timezone(input_timezone or self.input_timezone)
        interval = parse_duration(grace_interval)

        try:
            parsed = datetime.strptime(date_string, pattern)
        except ValueError:
            raise InvalidDateError(f"Invalid date: {date_string}")

        shifted = parsed.replace(tzinfo=tz) + interval
        end_of_day = shifted.replace(hour=23, minute=59, second=59, microsecond=0)
        return end_of_day.astimezone(dt_timezone.utc).strftime(OUTPUT_FORMAT)
