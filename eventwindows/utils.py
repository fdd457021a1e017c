import math
from datetime import datetime, timedelta, timezone

UNIT_MILLISECONDS = {
    "minutes": 60 * 1000,
    "hours": 60 * 60 * 1000,
    "days": 24 * 60 * 60 * 1000,
}
DIRECTIONS = ("before", "after")

# a window with no close definition is held open this long past the event start
NEVER_CLOSES_DELTA = timedelta(days=365 * 100)


class WindowInputError(ValueError):
    """Raised for malformed instants, offsets or event timings."""


def parse_instant(value) -> datetime:
    """
    Converts a caller-supplied instant into an aware UTC datetime.

    Args:
        value: An aware or naive datetime (naive is taken as UTC), an ISO-8601
            string (a trailing 'Z' is accepted) or a millisecond epoch number.

    Returns:
        datetime: The instant in UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    # bool is an int subclass but never a meaningful timestamp
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise WindowInputError(f"Epoch milliseconds must be finite: {value!r}")
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise WindowInputError(f"Not an ISO-8601 instant: {value!r}")
        return parse_instant(parsed)

    raise WindowInputError(f"Unsupported instant: {value!r}")


def to_epoch_ms(instant) -> int:
    """Returns the instant as whole milliseconds since the Unix epoch."""
    return round(parse_instant(instant).timestamp() * 1000)


def pluralize(n, unit: str) -> str:
    """
    Pluralizes a time unit: "1 hour" vs "2 hours".

    Args:
        n: Quantity to display. Whole floats are shown without a decimal.
        unit (str): Plural unit name (minutes, hours or days).

    Returns:
        str: The quantity and the unit, singular when `n` is exactly 1.
    """
    if isinstance(n, float) and n.is_integer():
        n = int(n)
    if n == 1:
        return f"1 {unit[:-1]}"
    return f"{n} {unit}"


def format_datetime(dt: datetime) -> str:
    """Formats an instant the way window timelines show it: 'Sat Nov 1, 6:00 PM'."""
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt:%a %b} {dt.day}, {hour}:{dt:%M} {meridiem}"
