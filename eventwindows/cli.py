import logging
import math
from pathlib import Path

import click
import questionary

from eventwindows.app import (
    ConfigError,
    check_in,
    current_instant,
    load_config,
    save_config,
    summarize,
)
from eventwindows.checkin import describe
from eventwindows.config import (
    PRESETS,
    WINDOW_TYPE_LABELS,
    GeoPoint,
    WindowDefinition,
)
from eventwindows.offsets import resolve_definition
from eventwindows.utils import WindowInputError, format_datetime
from eventwindows.validation import validate, validation_warnings


def _load_config(ctx, param, value: Path):
    if value is None:
        return None
    try:
        return load_config(value)
    except ConfigError as e:
        raise click.BadParameter(str(e))


def _parse_now(ctx, param, value):
    try:
        return current_instant(value)
    except WindowInputError as e:
        raise click.BadParameter(str(e))


def _check_radius(ctx, param, value):
    # FloatRange lets nan and inf through
    if value is not None and not math.isfinite(value):
        raise click.BadParameter(f"{value} is not a finite distance.")
    return value


config_option = click.option(
    "--config",
    "config",
    required=True,
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
    callback=_load_config,
    help="Path to event window configuration file.",
)
now_option = click.option(
    "--now",
    default=None,
    callback=_parse_now,
    help="Evaluate at this ISO-8601 instant instead of the current time.",
)


@click.group(context_settings={"max_content_width": 120})
@click.option("--verbose", is_flag=True, help="Log window resolution details.")
def cli(verbose: bool):
    """Evaluate RSVP and check-in windows for an event."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@now_option
def status(config, now):
    """Show RSVP and check-in window status."""
    try:
        lines = summarize(config, now)
    except WindowInputError as e:
        raise click.ClickException(str(e))
    for line in lines:
        click.echo(line)


@cli.command("check-in")
@config_option
@now_option
@click.option("--lat", type=float, default=None, help="User latitude.")
@click.option("--lng", type=float, default=None, help="User longitude.")
@click.option(
    "--radius",
    type=click.FloatRange(min=0),
    default=None,
    callback=_check_radius,
    help="Override the configured check-in radius in meters.",
)
def check_in_command(config, now, lat, lng, radius):
    """Decide whether a check-in may proceed."""
    if (lat is None) != (lng is None):
        raise click.BadParameter("--lat and --lng must be given together.")

    user_location = None
    if lat is not None:
        try:
            user_location = GeoPoint(lat=lat, lng=lng)
        except ValueError as e:
            raise click.BadParameter(f"Invalid location: {e}")

    try:
        decision = check_in(config, now, user_location, radius)
    except WindowInputError as e:
        raise click.ClickException(str(e))
    click.echo(describe(decision))
    if not decision.eligible:
        raise SystemExit(1)


def _report_validation(windows, event_start) -> bool:
    errors = validate(windows, event_start)
    for error in errors:
        click.echo(f"  Error: {error}")
    for warning in validation_warnings(windows):
        click.echo(f"  Warning: {warning}")
    if not errors:
        click.echo("  All checks passed.")
    return not errors


@cli.command("validate")
@config_option
def validate_command(config):
    """Check the configured window definitions."""
    if not _report_validation(config.windows, config.event.start_time):
        raise SystemExit(1)


# =============================================================================
# interactive editor
# =============================================================================

ADD = "Add a window"
UPDATE = "Update a window"
DELETE = "Delete a window"
PRESET = "Apply a preset"
CHECK = "Run validation checks"
SAVE = "Save and quit"
QUIT = "Quit without saving"


def _is_amount(text: str) -> bool:
    try:
        amount = float(text)
    except ValueError:
        return False
    return math.isfinite(amount) and amount >= 0


def _prompt_window(default: WindowDefinition | None = None) -> WindowDefinition | None:
    """Ask for each field of a window definition. None if any prompt is cancelled."""
    labels = {label: key for key, label in WINDOW_TYPE_LABELS.items()}
    prompts = [
        lambda: questionary.select(
            "\nWindow:",
            choices=list(labels),
            default=WINDOW_TYPE_LABELS[default.window_type] if default else None,
            qmark="",
            instruction=" ",
        ),
        lambda: questionary.select(
            "\nRole:",
            choices=["open", "close"],
            default=default.role if default else None,
            qmark="",
            instruction=" ",
        ),
        lambda: questionary.text(
            "\nAmount:",
            default=f"{default.amount:g}" if default else "",
            qmark="",
            validate=_is_amount,
        ),
        lambda: questionary.select(
            "\nUnit:",
            choices=["minutes", "hours", "days"],
            default=default.unit if default else None,
            qmark="",
            instruction=" ",
        ),
        lambda: questionary.select(
            "\nRelative to event start:",
            choices=["before", "after"],
            default=default.direction if default else None,
            qmark="",
            instruction=" ",
        ),
    ]

    answers = []
    for prompt in prompts:
        answer = prompt().ask()
        # ctrl-c makes ask() return None
        if answer is None:
            return None
        answers.append(answer)

    window_type, role, amount, unit, direction = answers
    return WindowDefinition(
        window_type=labels[window_type],
        role=role,
        amount=float(amount),
        unit=unit,
        direction=direction,
    )


def _choose_window(windows: list[WindowDefinition], message: str) -> int | None:
    choices = [f"{i + 1}. {w.sentence()}" for i, w in enumerate(windows)]
    choice = questionary.select(
        message, choices=choices, qmark="", instruction=" "
    ).ask()
    return None if choice is None else choices.index(choice)


def _print_timeline(windows, event_start):
    click.echo(f"\n  Event starts {format_datetime(event_start)}\n")
    if not windows:
        click.echo("  No windows configured; defaults apply.")
    for i, w in enumerate(windows):
        try:
            at = format_datetime(resolve_definition(event_start, w))
        except WindowInputError:
            at = "out of range"
        click.echo(f"  {i + 1}. {w.sentence().ljust(48)} {at}")


@cli.command()
@click.option(
    "--config",
    "path",
    required=True,
    type=click.Path(
        exists=True, dir_okay=False, readable=True, writable=True, path_type=Path
    ),
    help="Path to event window configuration file.",
)
def edit(path: Path):
    """Interactively edit the window definitions of a configuration file."""
    config = _load_config(None, None, path)
    windows = list(config.windows)
    event_start = config.event.start_time

    while True:
        _print_timeline(windows, event_start)
        click.echo("\n---")

        choices = [ADD, UPDATE, DELETE, PRESET, CHECK, SAVE, QUIT]
        if not windows:
            choices = [ADD, PRESET, CHECK, SAVE, QUIT]
        choice = questionary.select(
            "\nAction:", choices=choices, qmark="", instruction=" "
        ).ask()

        # a cancelled sub-prompt returns to this menu without changes
        if choice == ADD:
            window = _prompt_window()
            if window is not None:
                windows.append(window)

        if choice == UPDATE:
            index = _choose_window(windows, "\nUpdate which window?")
            window = None if index is None else _prompt_window(windows[index])
            if window is not None:
                windows[index] = window

        if choice == DELETE:
            index = _choose_window(windows, "\nDelete which window?")
            if index is not None:
                del windows[index]

        if choice == PRESET:
            name = questionary.select(
                "\nPreset:", choices=list(PRESETS), qmark="", instruction=" "
            ).ask()
            if name is not None:
                windows = list(PRESETS[name])

        if choice == CHECK:
            click.echo()
            _report_validation(windows, event_start)

        if choice == SAVE:
            click.echo()
            if not _report_validation(windows, event_start):
                click.echo("\n  Fix the errors above before saving.")
                continue
            save_config(config.model_copy(update={"windows": windows}), path)
            click.echo(f"\n  Windows saved to {path}\n")
            return

        if choice == QUIT or choice is None:
            click.echo("\n  Program terminated.\n")
            return


if __name__ == "__main__":
    cli()
