"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest
import yaml

from eventwindows.windows import resolve_window

EVENT_START = datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)
VENUE = {"lat": 33.7, "lng": -117.9}

CHECKIN_WINDOWS = [
    {"type": "checkin", "role": "open", "amount": 3, "unit": "hours", "direction": "before"},
    {"type": "checkin", "role": "close", "amount": 15, "unit": "minutes", "direction": "after"},
]


def at(text: str) -> datetime:
    """Shorthand for a UTC instant on the event day, e.g. at('14:59')."""
    hour, minute = (int(part) for part in text.split(":"))
    return EVENT_START.replace(hour=hour, minute=minute)


@pytest.fixture
def sample_event():
    """Event record as the event store returns it."""
    return {
        "id": 42,
        "title": "U12 Practice",
        "startTime": "2025-06-01T18:00:00Z",
        "endTime": "2025-06-01T19:30:00Z",
        "location": "Central Park Field 3",
        "latitude": VENUE["lat"],
        "longitude": VENUE["lng"],
    }


@pytest.fixture
def checkin_window(sample_event):
    """Check-in window opening 3 hours before and closing 15 minutes after start."""
    return resolve_window(sample_event, CHECKIN_WINDOWS, "checkin")


@pytest.fixture
def write_config(tmp_path, sample_event):
    """Factory writing a YAML config file and returning its path."""

    def _write(windows=None, event=None, **extra):
        data = {"event": event or sample_event, "windows": windows or [], **extra}
        path = tmp_path / "event.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
