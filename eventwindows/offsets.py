import math
from datetime import datetime, timedelta

from eventwindows.config import WindowDefinition
from eventwindows.utils import (
    DIRECTIONS,
    UNIT_MILLISECONDS,
    WindowInputError,
    parse_instant,
)


def resolve(event_start, amount, unit: str, direction: str) -> datetime:
    """
    Converts an offset relative to the event start into an absolute instant.

    Args:
        event_start: Event start as a datetime, ISO-8601 string or epoch ms.
        amount (float): Non-negative magnitude of the offset.
        unit (str): One of minutes, hours or days.
        direction (str): 'before' subtracts the offset, 'after' adds it.

    Returns:
        datetime: The resolved instant in UTC.
    """
    if unit not in UNIT_MILLISECONDS:
        raise WindowInputError(f"Unknown unit: {unit!r}")
    if direction not in DIRECTIONS:
        raise WindowInputError(f"Unknown direction: {direction!r}")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise WindowInputError(f"Amount must be a number: {amount!r}")
    if not math.isfinite(amount):
        raise WindowInputError(f"Amount must be finite: {amount}")
    if amount < 0:
        raise WindowInputError(f"Amount must not be negative: {amount}")

    start = parse_instant(event_start)
    try:
        offset = timedelta(milliseconds=amount * UNIT_MILLISECONDS[unit])
        return start - offset if direction == "before" else start + offset
    except OverflowError as e:
        raise WindowInputError(
            f"Offset of {amount} {unit} {direction} {start.isoformat()} "
            "is out of range"
        ) from e


def resolve_definition(event_start, definition: WindowDefinition) -> datetime:
    """Resolves a single window definition against the event start."""
    return resolve(
        event_start, definition.amount, definition.unit, definition.direction
    )
