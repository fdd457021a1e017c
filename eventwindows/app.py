import logging
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import ValidationError

from eventwindows.checkin import CheckInDecision, decide_for_event
from eventwindows.config import WINDOW_TYPE_LABELS, Config
from eventwindows.utils import format_datetime, parse_instant
from eventwindows.windows import evaluate_window, resolve_window, status_message

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded."""


def load_config(path: Path) -> Config:
    """
    Loads and validates an event window configuration file.

    Args:
        path: Path to a YAML file with `event`, `windows` and `radius_meters`.

    Returns:
        Config: The validated configuration.
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} does not contain a mapping")

    try:
        config = Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    logger.debug(
        "Loaded event %s with %d window definitions",
        config.event.id,
        len(config.windows),
    )
    return config


def save_config(config: Config, path: Path) -> None:
    with open(path, "w") as f:
        yaml.safe_dump(config.to_yaml_data(), f, sort_keys=False)
    logger.debug("Saved %d window definitions to %s", len(config.windows), path)


def current_instant(now=None) -> datetime:
    """The instant for one evaluation pass: `now` if given, else the clock."""
    if now is None:
        return datetime.now(timezone.utc)
    return parse_instant(now)


def summarize(config: Config, now) -> list[str]:
    """
    Status lines for every window type of the configured event.

    Returns:
        list[str]: e.g. 'Check-in: open (Closes in 2 hours)'
    """
    lines = []
    for window_type, label in WINDOW_TYPE_LABELS.items():
        window = resolve_window(config.event, config.windows, window_type)
        status = evaluate_window(window, now)
        opens = format_datetime(window.open_at) if window.open_at else "already open"
        closes = (
            "no close time" if window.closes_never else format_datetime(window.close_at)
        )
        lines.append(
            f"{label}: {status.value} ({status_message(window, now, label)})"
            f" [{opens} -> {closes}]"
        )
    return lines


def check_in(config: Config, now, user_location=None, radius_meters=None) -> CheckInDecision:
    """Decides a check-in attempt against the configured event."""
    radius = config.radius_meters if radius_meters is None else radius_meters
    return decide_for_event(config.event, config.windows, now, user_location, radius)
