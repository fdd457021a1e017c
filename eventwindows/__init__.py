from eventwindows.checkin import CheckInDecision, decide, decide_for_event
from eventwindows.config import (
    DEFAULT_RADIUS_METERS,
    DEFAULT_WINDOWS,
    EventRecord,
    EventTiming,
    GeoPoint,
    WindowDefinition,
)
from eventwindows.geo import distance_meters
from eventwindows.offsets import resolve
from eventwindows.utils import WindowInputError
from eventwindows.validation import validate
from eventwindows.windows import (
    ResolvedWindow,
    WindowStatus,
    countdown,
    evaluate,
    resolve_window,
)
