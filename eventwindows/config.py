from datetime import datetime
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from eventwindows.utils import WindowInputError, parse_instant, pluralize

WindowType = Literal["rsvp", "checkin"]
WindowRole = Literal["open", "close"]
TimeUnit = Literal["minutes", "hours", "days"]
Direction = Literal["before", "after"]

DEFAULT_RADIUS_METERS = 200

# display names used in validation messages and status lines
WINDOW_TYPE_LABELS = {"rsvp": "RSVP", "checkin": "Check-in"}


def normalize_window_type(value):
    """Maps configurator labels such as 'Check-in' or 'RSVP' to their keys."""
    if isinstance(value, str):
        return value.strip().lower().replace("-", "").replace("_", "")
    return value


class _Record(BaseModel):
    """Base for records that cross the library boundary as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class WindowDefinition(_Record):
    """One operator-configured window offset relative to the event start."""

    window_type: WindowType = Field(
        ...,
        validation_alias=AliasChoices("type", "windowType", "window_type"),
        serialization_alias="type",
        description="Which window the offset belongs to.",
    )
    role: WindowRole = Field(..., description="Whether the offset opens or closes it.")
    amount: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Magnitude of the offset."
    )
    unit: TimeUnit = Field(..., description="Unit of `amount`.")
    direction: Direction = Field(
        ..., description="Whether the offset falls before or after the start."
    )

    @field_validator("window_type", mode="before")
    @classmethod
    def _normalize_window_type(cls, value):
        return normalize_window_type(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_is_number(cls, value):
        # "3" from a form field is a caller error, not an amount
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("amount must be a number")
        return value

    def sentence(self) -> str:
        """Reads the definition back as the configurator does, e.g.
        'Check-in opens 3 hours before event start.'"""
        verb = "opens" if self.role == "open" else "closes"
        return (
            f"{WINDOW_TYPE_LABELS[self.window_type]} {verb} "
            f"{pluralize(self.amount, self.unit)} {self.direction} event start."
        )


class GeoPoint(_Record):
    """WGS-84 coordinate in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)


def _check_order(start: datetime, end: datetime | None) -> None:
    if end is not None and end < start:
        raise WindowInputError(f"Event ends ({end}) before it starts ({start})")


class EventTiming(_Record):
    """Start and optional end of an event."""

    start: datetime
    end: datetime | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse(cls, value):
        return None if value is None else parse_instant(value)

    @model_validator(mode="after")
    def _end_after_start(self):
        _check_order(self.start, self.end)
        return self


class EventRecord(_Record):
    """An event as read from the event store."""

    id: int | str | None = None
    title: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    location: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90, allow_inf_nan=False)
    longitude: float | None = Field(None, ge=-180, le=180, allow_inf_nan=False)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse(cls, value):
        return None if value is None else parse_instant(value)

    @model_validator(mode="after")
    def _end_after_start(self):
        _check_order(self.start_time, self.end_time)
        return self

    @property
    def timing(self) -> EventTiming:
        return EventTiming(start=self.start_time, end=self.end_time)

    @property
    def coordinates(self) -> GeoPoint | None:
        """The venue coordinates, or None unless both are set."""
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(lat=self.latitude, lng=self.longitude)


def _windows(*rows) -> tuple[WindowDefinition, ...]:
    return tuple(
        WindowDefinition(window_type=t, role=r, amount=a, unit=u, direction=d)
        for t, r, a, u, d in rows
    )


DEFAULT_WINDOWS = _windows(
    ("rsvp", "open", 72, "hours", "before"),
    ("rsvp", "close", 24, "hours", "before"),
    ("checkin", "open", 3, "hours", "before"),
    ("checkin", "close", 15, "minutes", "after"),
)

PRESETS = {
    "Typical Youth Event": _windows(
        ("rsvp", "open", 7, "days", "before"),
        ("rsvp", "close", 1, "days", "before"),
        ("checkin", "open", 30, "minutes", "before"),
        ("checkin", "close", 15, "minutes", "after"),
    ),
    "One-Day Camp": _windows(
        ("rsvp", "open", 14, "days", "before"),
        ("rsvp", "close", 1, "days", "before"),
        ("checkin", "open", 1, "hours", "before"),
        ("checkin", "close", 15, "minutes", "after"),
    ),
}


class Config(BaseModel):
    """Configuration file for evaluating one event's windows."""

    event: EventRecord = Field(..., description="The event record.")
    windows: list[WindowDefinition] = Field(
        default_factory=list,
        description="Window definitions. Empty means the documented defaults.",
    )
    radius_meters: float = Field(
        DEFAULT_RADIUS_METERS,
        gt=0,
        allow_inf_nan=False,
        description="Maximum distance from the venue at which check-in is allowed.",
    )

    def to_yaml_data(self) -> dict:
        """Plain data suitable for `yaml.safe_dump`."""
        return {
            "event": self.event.model_dump(
                mode="json", by_alias=True, exclude_none=True
            ),
            "windows": [
                w.model_dump(mode="json", by_alias=True) for w in self.windows
            ],
            "radius_meters": self.radius_meters,
        }
