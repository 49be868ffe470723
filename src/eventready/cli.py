"""eventready CLI - event readiness, event lists and staff distances."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

import click

from . import distance as staff_distance
from .adapters import FileKeyValueStore, GoogleDistanceMatrixAdapter, JsonStaffDirectory
from .config import load_config
from .core.distance import (
    Coordinates,
    DistanceUnit,
    InvalidCoordinatesError,
    MissingCoordinatesError,
    calculate_haversine_distance,
)
from .core.events import (
    CoreTask,
    DateRange,
    Event,
    FilterState,
    SortOption,
    TaskFilter,
    build_event_list,
)
from .core.messages import SmsMessage
from .core.readiness import (
    ReadinessTask,
    calculate_bulk_event_readiness,
    calculate_event_readiness,
)
from .read_status import ThreadReadTracker


def _load_rows(path: Path) -> list[dict]:
    """Read a JSON array of rows (or ``{"data": [...]}``) from a file."""
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        click.echo(f"Error: {path} is not valid JSON: {e}", err=True)
        sys.exit(1)
    if isinstance(data, dict):
        data = data.get("data", [])
    return data


def _parse_point(value: str) -> Coordinates | str:
    """``"lat,lng"`` becomes Coordinates; anything else is an address."""
    lat, sep, lng = value.partition(",")
    if sep:
        try:
            return Coordinates(float(lat), float(lng))
        except ValueError:
            pass
    return value


def _directory(config) -> JsonStaffDirectory:
    if not config.staff_directory_file:
        click.echo("Error: STAFF_DIRECTORY_FILE is not configured.", err=True)
        sys.exit(1)
    return JsonStaffDirectory(config.staff_directory_file, tenant_id=config.tenant_id)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """eventready - event readiness and scheduling helpers."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--event-date", default=None, help="Only count tasks due on or before this date")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def readiness(tasks_file: Path, event_date: str | None, as_json: bool):
    """Show readiness for one event's tasks."""
    tasks = [ReadinessTask.from_record(r) for r in _load_rows(tasks_file)]
    result = calculate_event_readiness(tasks, event_date)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not result.has_tasks:
        click.echo("No pre-event tasks.")
        return

    marker = "READY" if result.is_ready else "NOT READY"
    click.echo(f"{result.completed}/{result.total} tasks complete ({result.percentage}%) - {marker}")


@main.command("readiness-bulk")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def readiness_bulk(tasks_file: Path, events_file: Path, as_json: bool):
    """Show readiness for every event in EVENTS_FILE."""
    tasks = [ReadinessTask.from_record(r) for r in _load_rows(tasks_file)]
    events = _load_rows(events_file)
    event_ids = [str(e["id"]) for e in events]
    event_dates = {str(e["id"]): e.get("start_date") for e in events}

    results = calculate_bulk_event_readiness(tasks, event_ids, event_dates)

    if as_json:
        click.echo(json.dumps({k: v.to_dict() for k, v in results.items()}, indent=2))
        return

    titles = {str(e["id"]): e.get("title") or e["id"] for e in events}
    for event_id, result in results.items():
        status = f"{result.percentage:3d}%" if result.has_tasks else "  --"
        click.echo(f"{status}  {titles[event_id]} ({result.completed}/{result.total})")


@main.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--search", default="", help="Match title, location or account")
@click.option(
    "--range",
    "date_range",
    type=click.Choice([d.value for d in DateRange]),
    default=None,
    help="Date bucket",
)
@click.option("--days", type=int, default=None, help="Window for --range custom_days")
@click.option("--status", default="all", help="Event status")
@click.option("--assigned-to", default="all", help="Staff user id")
@click.option("--incomplete", is_flag=True, help="Only events with incomplete core tasks")
@click.option(
    "--core-tasks",
    "core_tasks_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON list of core task templates",
)
@click.option("--task-days", type=int, default=None, help="Window for --incomplete")
@click.option("--task-id", "task_ids", multiple=True, help="Only these incomplete core tasks")
@click.option("--sort", "sort_by", type=click.Choice([s.value for s in SortOption]), default=None)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def events(
    events_file: Path,
    search: str,
    date_range: str | None,
    days: int | None,
    status: str,
    assigned_to: str,
    incomplete: bool,
    core_tasks_file: Path | None,
    task_days: int | None,
    task_ids: tuple[str, ...],
    sort_by: str | None,
    as_json: bool,
):
    """List events with filters and sorting."""
    config = load_config()
    event_list = [Event.from_record(r, config.tz()) for r in _load_rows(events_file)]
    core_tasks = []
    if core_tasks_file:
        core_tasks = [
            CoreTask(id=str(r["id"]), task_name=r.get("task_name", ""))
            for r in _load_rows(core_tasks_file)
        ]

    filters = FilterState(
        search_term=search,
        date_range=DateRange(date_range or config.default_date_range),
        custom_days=days,
        status=status,
        task_filter=TaskFilter.INCOMPLETE if incomplete else TaskFilter.ALL,
        task_date_range_days=task_days if task_days is not None else config.task_date_range_days,
        selected_task_ids=task_ids,
        assigned_to=assigned_to,
    )
    view = build_event_list(
        event_list,
        filters,
        SortOption(sort_by or config.default_sort),
        core_tasks,
        as_of=config.today(),
    )

    if as_json:
        click.echo(
            json.dumps(
                {
                    "events": [
                        {
                            "id": e.id,
                            "title": e.title,
                            "start_date": e.start_date.isoformat() if e.start_date else None,
                            "location": e.location,
                            "account_name": e.account_name,
                            "status": e.status,
                        }
                        for e in view.sorted
                    ],
                    "counts": asdict(view.counts),
                },
                indent=2,
            )
        )
        return

    counts = view.counts
    click.echo(
        f"{counts.filtered} of {counts.total} events "
        f"({counts.upcoming} upcoming, {counts.past} past)"
    )
    for event in view.sorted:
        when = event.start_date.isoformat() if event.start_date else "no date   "
        account = f" [{event.account_name}]" if event.account_name else ""
        loc = f" @ {event.location}" if event.location else ""
        click.echo(f"  {when}  {event.title or '(untitled)'}{account}{loc}")


@main.command()
@click.argument("origin")
@click.argument("destination")
@click.option("--unit", type=click.Choice([u.value for u in DistanceUnit]), default="miles")
@click.option("--driving", is_flag=True, help="Also fetch driving distance")
def distance(origin: str, destination: str, unit: str, driving: bool):
    """Distance between two "lat,lng" points."""
    start, end = _parse_point(origin), _parse_point(destination)
    if not isinstance(start, Coordinates) or not isinstance(end, Coordinates):
        click.echo('Error: ORIGIN and DESTINATION must be "lat,lng"', err=True)
        sys.exit(1)

    try:
        miles = calculate_haversine_distance(start.lat, start.lng, end.lat, end.lng, unit)
    except InvalidCoordinatesError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Straight line: {miles} {unit}")

    if driving:
        route = GoogleDistanceMatrixAdapter(load_config()).driving_distance(start, end)
        if route.ok:
            click.echo(f"Driving: {route.distance} mi, {route.duration} min")
        else:
            click.echo(f"Driving distance unavailable: {route.status.value}")


@main.command("staff-distance")
@click.argument("user_id")
@click.argument("location_id")
@click.option("--driving", is_flag=True, help="Also fetch driving distance")
def staff_distance_cmd(user_id: str, location_id: str, driving: bool):
    """Distance from a staff member's home to a location."""
    config = load_config()
    service = GoogleDistanceMatrixAdapter(config) if driving else None
    try:
        result = staff_distance.calculate_staff_to_location_distance(
            _directory(config), user_id, location_id, service
        )
    except (LookupError, MissingCoordinatesError, InvalidCoordinatesError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"{result.staff_name} -> {result.location_name}: {result.straight_line_distance} mi")
    if result.driving_distance is not None:
        click.echo(f"Driving: {result.driving_distance} mi, {result.driving_duration} min")


@main.command("staff-nearby")
@click.argument("location_id")
@click.option("--radius", type=float, required=True, help="Radius in miles")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def staff_nearby(location_id: str, radius: float, as_json: bool):
    """Active staff within a radius of a location, nearest first."""
    config = load_config()
    try:
        nearby = staff_distance.find_staff_within_radius(_directory(config), location_id, radius)
    except (LookupError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([asdict(s) for s in nearby], indent=2))
        return

    if not nearby:
        click.echo(f"No staff within {radius} miles.")
        return

    for s in nearby:
        click.echo(f"{s.distance_miles:8.2f} mi  {s.first_name} {s.last_name}".rstrip())


@main.command("sms-unread")
@click.argument("messages_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def sms_unread(messages_file: Path):
    """List SMS threads with unread inbound messages."""
    config = load_config()
    tracker = ThreadReadTracker(FileKeyValueStore(config.state_path()), config.tenant_id)
    messages = [SmsMessage.from_record(r) for r in _load_rows(messages_file)]
    threads = tracker.unread_threads(messages)

    if not threads:
        click.echo("No unread messages.")
        return

    for t in threads:
        click.echo(f"{t.phone_number}: {t.unread_count} unread (latest {t.last_message_date})")


@main.command("sms-read")
@click.argument("phone_number")
def sms_read(phone_number: str):
    """Mark an SMS thread as read."""
    config = load_config()
    tracker = ThreadReadTracker(FileKeyValueStore(config.state_path()), config.tenant_id)
    tracker.mark_read(phone_number)
    click.echo(f"Marked {phone_number} as read.")
