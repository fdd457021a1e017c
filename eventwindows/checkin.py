import logging
import math
from typing import Literal

from pydantic import BaseModel, ConfigDict

from eventwindows.config import DEFAULT_RADIUS_METERS
from eventwindows.geo import distance_meters
from eventwindows.utils import WindowInputError
from eventwindows.windows import (
    WindowStatus,
    as_event,
    evaluate_window,
    resolve_window,
)

logger = logging.getLogger(__name__)

Reason = Literal[
    "window_before",
    "window_closed",
    "no_coordinates",
    "too_far",
    "location_unavailable",
]

REASON_MESSAGES = {
    "window_before": "Check-in is not open yet.",
    "window_closed": "Check-in window has closed.",
    "no_coordinates": "This event does not have location coordinates set.",
    "location_unavailable": "Please allow location access to check in.",
    "too_far": "You are too far from the event location to check in.",
}


class CheckInDecision(BaseModel):
    """
    Outcome of one check-in attempt.

    Attributes:
        eligible (bool): Whether the check-in may proceed.
        reason (str or None): Why not, when `eligible` is False.
        distance_meters (float or None): Distance to the venue, when computed.
        radius_meters (float): The radius the distance was judged against.
    """

    model_config = ConfigDict(frozen=True)

    eligible: bool
    reason: Reason | None = None
    distance_meters: float | None = None
    radius_meters: float = DEFAULT_RADIUS_METERS


def decide(
    checkin_window,
    now,
    user_location=None,
    event_location=None,
    radius_meters: float = DEFAULT_RADIUS_METERS,
) -> CheckInDecision:
    """
    Decides whether a check-in may proceed.

    Rules are applied in order and the first match wins, so a time-window
    problem is always reported ahead of a location problem:

    1. window not open yet -> window_before
    2. window closed -> window_closed
    3. event has no coordinates -> no_coordinates
    4. no location fix for the user -> location_unavailable
    5. user farther than `radius_meters` -> too_far
    6. otherwise eligible

    Args:
        checkin_window: The event's resolved check-in window, as a
            ResolvedWindow or its plain-data form.
        now: Current instant, obtained once by the caller.
        user_location: GeoPoint (or plain data) for the user, or None.
        event_location: GeoPoint (or plain data) for the venue, or None.
        radius_meters (float): Allowed distance from the venue.

    Returns:
        CheckInDecision: The decision.
    """
    if not math.isfinite(radius_meters) or radius_meters < 0:
        raise WindowInputError(
            f"Radius must be a finite, non-negative distance: {radius_meters}"
        )

    def refuse(reason, distance=None):
        logger.debug("Check-in refused: %s (distance=%s)", reason, distance)
        return CheckInDecision(
            eligible=False,
            reason=reason,
            distance_meters=distance,
            radius_meters=radius_meters,
        )

    status = evaluate_window(checkin_window, now)
    if status is WindowStatus.BEFORE:
        return refuse("window_before")
    if status is WindowStatus.CLOSED:
        return refuse("window_closed")

    if event_location is None:
        return refuse("no_coordinates")
    if user_location is None:
        return refuse("location_unavailable")

    distance = distance_meters(user_location, event_location)
    if distance > radius_meters:
        return refuse("too_far", distance)

    logger.debug("Check-in allowed at %.1fm of %sm", distance, radius_meters)
    return CheckInDecision(
        eligible=True, distance_meters=distance, radius_meters=radius_meters
    )


def decide_for_event(
    event,
    definitions,
    now,
    user_location=None,
    radius_meters: float = DEFAULT_RADIUS_METERS,
) -> CheckInDecision:
    """Resolves the event's check-in window and venue, then calls `decide`."""
    event = as_event(event)
    window = resolve_window(event, definitions, "checkin")
    return decide(window, now, user_location, event.coordinates, radius_meters)


def describe(decision: CheckInDecision) -> str:
    """User-facing text for a decision."""
    if decision.eligible:
        return f"Check-in available ({round(decision.distance_meters)}m away)."
    message = REASON_MESSAGES[decision.reason]
    if decision.reason == "too_far":
        message += (
            f" ({round(decision.distance_meters)}m away,"
            f" must be within {round(decision.radius_meters)}m)"
        )
    return message
