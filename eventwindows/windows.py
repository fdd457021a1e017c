import logging
import math
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict

from eventwindows.config import (
    DEFAULT_WINDOWS,
    WINDOW_TYPE_LABELS,
    EventRecord,
    WindowDefinition,
    normalize_window_type,
)
from eventwindows.offsets import resolve_definition
from eventwindows.utils import (
    NEVER_CLOSES_DELTA,
    WindowInputError,
    parse_instant,
    pluralize,
)

logger = logging.getLogger(__name__)

LATEST_INSTANT = datetime.max.replace(tzinfo=timezone.utc)


class WindowStatus(str, Enum):
    BEFORE = "before"
    OPEN = "open"
    CLOSED = "closed"


class ResolvedWindow(BaseModel):
    """
    Absolute open/close instants for one window of one event.

    Recomputed for every decision; never cache it across calls.

    Attributes:
        window_type (str): 'rsvp' or 'checkin'.
        open_at (datetime or None): None when no open definition resolved,
            meaning the window is already open.
        close_at (datetime): The close instant, or a far-future sentinel when
            no close definition resolved.
        closes_never (bool): True when `close_at` is the sentinel.
    """

    model_config = ConfigDict(frozen=True)

    window_type: str
    open_at: datetime | None = None
    close_at: datetime
    closes_never: bool = False


def as_event(event) -> EventRecord:
    """Accepts an EventRecord or its plain-data form."""
    if isinstance(event, EventRecord):
        return event
    return EventRecord.model_validate(event)


def as_window(window) -> ResolvedWindow:
    """Accepts a ResolvedWindow or its plain-data form."""
    if isinstance(window, ResolvedWindow):
        return window
    return ResolvedWindow.model_validate(window)


def as_definitions(definitions) -> list[WindowDefinition]:
    """Accepts WindowDefinitions or their plain-data forms."""
    return [
        d if isinstance(d, WindowDefinition) else WindowDefinition.model_validate(d)
        for d in definitions or ()
    ]


def resolve_window(event, definitions, window_type: str) -> ResolvedWindow:
    """
    Resolves the open and close instants of one window type for an event.

    An event with no definitions at all uses DEFAULT_WINDOWS. Otherwise the
    first definition of each role wins, and a missing role falls back to
    'already open' or 'never closes'.

    Args:
        event: EventRecord (or plain data) carrying the start time.
        definitions: Window definitions configured for the event.
        window_type (str): 'rsvp' or 'checkin'; configurator labels such
            as 'Check-in' are accepted.

    Returns:
        ResolvedWindow: The resolved window.

    Raises:
        WindowInputError: For any other window type.
    """
    key = normalize_window_type(window_type)
    if key not in WINDOW_TYPE_LABELS:
        raise WindowInputError(f"Unknown window type: {window_type!r}")
    window_type = key

    event = as_event(event)
    definitions = as_definitions(definitions)
    if not definitions:
        logger.debug("Event %s has no window definitions; using defaults", event.id)
        definitions = list(DEFAULT_WINDOWS)

    roles = {}
    for definition in definitions:
        if definition.window_type == window_type:
            roles.setdefault(definition.role, definition)

    open_at = None
    if "open" in roles:
        open_at = resolve_definition(event.start_time, roles["open"])

    if "close" in roles:
        close_at = resolve_definition(event.start_time, roles["close"])
        closes_never = False
    else:
        # starts within a century of datetime.max get the latest instant instead
        if event.start_time > LATEST_INSTANT - NEVER_CLOSES_DELTA:
            close_at = LATEST_INSTANT
        else:
            close_at = event.start_time + NEVER_CLOSES_DELTA
        closes_never = True

    logger.debug(
        "Resolved %s window for event %s: open=%s close=%s never_closes=%s",
        window_type,
        event.id,
        open_at,
        close_at,
        closes_never,
    )
    return ResolvedWindow(
        window_type=window_type,
        open_at=open_at,
        close_at=close_at,
        closes_never=closes_never,
    )


def evaluate(open_at, close_at, now) -> WindowStatus:
    """
    Derives the window status at `now`.

    A missing `open_at` is treated as already open; a missing `close_at`
    never closes. Both bounds are inclusive.
    """
    now = parse_instant(now)
    if open_at is not None and now < parse_instant(open_at):
        return WindowStatus.BEFORE
    if close_at is not None and now > parse_instant(close_at):
        return WindowStatus.CLOSED
    return WindowStatus.OPEN


def evaluate_window(window, now) -> WindowStatus:
    """Status of a ResolvedWindow (or its plain-data form) at `now`."""
    window = as_window(window)
    close_at = None if window.closes_never else window.close_at
    return evaluate(window.open_at, close_at, now)


def countdown(target, now, label: str = "Opens in") -> str:
    """
    Phrases the time remaining until `target`, e.g. 'Closes in 12 minutes'.

    Remaining time is rounded up to the whole minute and shown in the largest
    unit that fits (days, then hours, then minutes), truncating the rest.
    A target that has already passed reads as 0 minutes.
    """
    seconds = (parse_instant(target) - parse_instant(now)).total_seconds()
    minutes = max(math.ceil(seconds / 60), 0)
    if minutes >= 24 * 60:
        return f"{label} {pluralize(minutes // (24 * 60), 'days')}"
    if minutes >= 60:
        return f"{label} {pluralize(minutes // 60, 'hours')}"
    return f"{label} {pluralize(minutes, 'minutes')}"


def status_message(window, now, noun: str | None = None) -> str:
    """
    The one-line status shown next to a window, such as 'Opens in 3 hours',
    'Check-in open (No close time)' or 'RSVP closed'.
    """
    window = as_window(window)
    noun = noun or WINDOW_TYPE_LABELS.get(window.window_type, window.window_type)
    status = evaluate_window(window, now)
    if status is WindowStatus.BEFORE:
        return countdown(window.open_at, now, "Opens in")
    if status is WindowStatus.CLOSED:
        return f"{noun} closed"
    if window.closes_never:
        return f"{noun} open (No close time)"
    return countdown(window.close_at, now, "Closes in")
