"""
Validation of operator-configured window definitions.

Everything here is diagnostic: inputs are never mutated and problems come
back as human-readable strings for inline display next to the form.
"""

from datetime import timedelta

from pydantic import ValidationError

from eventwindows.config import WINDOW_TYPE_LABELS, WindowDefinition
from eventwindows.offsets import resolve_definition
from eventwindows.utils import UNIT_MILLISECONDS, WindowInputError, parse_instant

MAX_CHECKIN_LEAD = timedelta(hours=24)
CHECKIN_WARNING_LEAD = timedelta(hours=12)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


def _coerce(windows) -> tuple[list[WindowDefinition], list[str]]:
    """Split raw input into usable definitions and per-item errors."""
    definitions = []
    errors = []
    for index, window in enumerate(windows or (), start=1):
        if isinstance(window, WindowDefinition):
            definitions.append(window)
            continue
        try:
            definitions.append(WindowDefinition.model_validate(window))
        except ValidationError as e:
            errors.append(f"Window {index}: {_describe_validation_error(e)}")
    return definitions, errors


def _group_roles(definitions: list[WindowDefinition]):
    """
    Groups definitions as {window_type: {role: [definitions]}} in input order.
    """
    grouped: dict[str, dict[str, list[WindowDefinition]]] = {}
    for d in definitions:
        grouped.setdefault(d.window_type, {}).setdefault(d.role, []).append(d)
    return grouped


def validate(windows, event_start) -> list[str]:
    """
    Checks a window set for structural and temporal sanity.

    Checks:
    1. Each entry is a well-formed window definition
    2. At most one open and one close definition per window type
    3. Open precedes close for each window type that has both
    4. Check-in does not open more than 24 hours before the event

    Args:
        windows: WindowDefinitions or their plain-data forms.
        event_start: Event start as a datetime, ISO-8601 string or epoch ms.

    Returns:
        list[str]: Error messages; empty when the set is valid.
    """
    event_start = parse_instant(event_start)
    definitions, errors = _coerce(windows)
    grouped = _group_roles(definitions)

    for window_type in WINDOW_TYPE_LABELS:
        roles = grouped.get(window_type, {})
        label = WINDOW_TYPE_LABELS[window_type]

        for role in ("open", "close"):
            if len(roles.get(role, [])) > 1:
                errors.append(f"{label} window: more than one {role} definition")

        # ordering only applies when both ends are configured
        if not (roles.get("open") and roles.get("close")):
            continue

        try:
            open_at = resolve_definition(event_start, roles["open"][0])
            close_at = resolve_definition(event_start, roles["close"][0])
        except WindowInputError as e:
            errors.append(f"{label} window: {e}")
            continue
        if open_at >= close_at:
            errors.append(f"{label} window: open must precede close")

        if window_type == "checkin" and open_at < event_start - MAX_CHECKIN_LEAD:
            errors.append(
                "Check-in should not open more than 24 hours before the event"
            )

    return errors


def validation_warnings(windows) -> list[str]:
    """
    Non-blocking advice about a window set.

    The early check-in warning compares the lead time itself, so 721 minutes
    or 0.6 days before the start warn just like 13 hours do.
    """
    definitions, _ = _coerce(windows)
    warnings = []

    checkin_opens = [
        d for d in definitions if d.window_type == "checkin" and d.role == "open"
    ]
    if checkin_opens:
        first = checkin_opens[0]
        # compared in ms; a timedelta overflows for very large amounts
        lead_ms = first.amount * UNIT_MILLISECONDS[first.unit]
        limit_ms = CHECKIN_WARNING_LEAD / timedelta(milliseconds=1)
        if first.direction == "before" and lead_ms > limit_ms:
            warnings.append("Check-in opens more than 12 hours before event start.")

    return warnings
