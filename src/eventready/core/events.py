"""Pure event list filtering, sorting and counting - no I/O dependencies.

All date comparisons use tenant-local calendar days. Callers pass ``as_of``
(today in the tenant's timezone); it defaults to ``date.today()``.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from enum import Enum
from typing import Iterable, Mapping, Sequence

from .dates import parse_local_date


class DateRange(str, Enum):
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    UPCOMING = "upcoming"
    PAST = "past"
    CUSTOM_DAYS = "custom_days"


class TaskFilter(str, Enum):
    ALL = "all"
    INCOMPLETE = "incomplete"


class SortOption(str, Enum):
    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    ACCOUNT_ASC = "account_asc"
    ACCOUNT_DESC = "account_desc"

    @property
    def descending(self) -> bool:
        return self.value.endswith("_desc")


def _text(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class TaskCompletion:
    """Completion of one core task template on an event."""

    template_id: str
    is_completed: bool = False

    @classmethod
    def from_record(cls, data: Mapping) -> "TaskCompletion":
        template_id = data.get("core_task_template_id") or data.get("core_task_id") or ""
        return cls(template_id=str(template_id), is_completed=bool(data.get("is_completed")))


@dataclass(frozen=True)
class CoreTask:
    """A task template every event is expected to complete."""

    id: str
    task_name: str = ""


@dataclass
class Event:
    """An event row as the list view sees it."""

    id: str
    title: str | None
    location: str | None = None
    account_name: str | None = None
    start_date: date | None = None
    status: str = ""
    created_at: str = ""
    task_completions: list[TaskCompletion] = field(default_factory=list)
    assigned_to: list[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, data: Mapping, tz: tzinfo | None = None) -> "Event":
        """
        Create from an event row.

        Timestamps with an offset land on their calendar day in ``tz`` (the
        tenant's zone). Unparseable start dates become None.
        """
        return cls(
            id=str(data.get("id", "")),
            title=_text(data.get("title")),
            location=_text(data.get("location")),
            account_name=_text(data.get("account_name")),
            start_date=parse_local_date(data.get("start_date"), tz),
            status=_text(data.get("status")) or "",
            created_at=_text(data.get("created_at")) or "",
            task_completions=[
                TaskCompletion.from_record(tc) for tc in data.get("task_completions") or []
            ],
            assigned_to=[str(u) for u in data.get("assigned_to") or []],
        )


@dataclass(frozen=True)
class FilterState:
    """User-selected criteria for the event list. Replace, don't mutate."""

    search_term: str = ""
    date_range: DateRange = DateRange.UPCOMING
    custom_days: int | None = None
    status: str = "all"
    task_filter: TaskFilter = TaskFilter.ALL
    task_date_range_days: int = 14
    selected_task_ids: tuple[str, ...] = ()
    assigned_to: str = "all"

    @classmethod
    def from_dict(cls, data: Mapping) -> "FilterState":
        """Build from UI-style camelCase keys, falling back to defaults."""
        defaults = cls()
        custom_days = data.get("customDaysFilter", defaults.custom_days)
        return cls(
            search_term=data.get("searchTerm") or "",
            date_range=DateRange(data.get("dateRangeFilter", defaults.date_range)),
            custom_days=int(custom_days) if custom_days is not None else None,
            status=data.get("statusFilter") or defaults.status,
            task_filter=TaskFilter(data.get("taskFilter", defaults.task_filter)),
            task_date_range_days=int(
                data.get("taskDateRangeFilter", defaults.task_date_range_days)
            ),
            selected_task_ids=tuple(data.get("selectedTaskIds") or ()),
            assigned_to=data.get("assignedToFilter") or defaults.assigned_to,
        )


@dataclass
class EventCounts:
    """Badge counts. Independent of the active date filter except ``filtered``."""

    total: int = 0
    filtered: int = 0
    today: int = 0
    this_week: int = 0
    this_month: int = 0
    upcoming: int = 0
    past: int = 0
    next_10_days: int = 0
    next_45_days: int = 0


@dataclass
class EventListView:
    """Result of one filter/sort/count pass."""

    filtered: list[Event]
    sorted: list[Event]
    counts: EventCounts


def incomplete_task_ids(event: Event, core_tasks: Sequence[CoreTask]) -> list[str]:
    """
    Ids of core task templates the event has not completed.

    No templates means nothing can be incomplete. An event with no
    completion records has every template outstanding.
    """
    if not core_tasks:
        return []
    if not event.task_completions:
        return [t.id for t in core_tasks]

    done = {tc.template_id for tc in event.task_completions if tc.is_completed}
    return [t.id for t in core_tasks if t.id not in done]


def matches_search(event: Event, search_term: str) -> bool:
    """Case-insensitive substring match on title, location or account."""
    term = (search_term or "").strip().casefold()
    if not term:
        return True
    return any(
        term in value.casefold()
        for value in map(_text, (event.title, event.location, event.account_name))
        if value
    )


def matches_date_range(
    event: Event,
    date_range: DateRange,
    as_of: date,
    custom_days: int | None = None,
) -> bool:
    """
    Check an event against a date bucket.

    Any bucket other than ``all`` rejects events without a start date.
    Events on ``as_of`` count as upcoming.
    """
    if date_range == DateRange.ALL:
        return True

    start = event.start_date
    if start is None:
        return False

    match date_range:
        case DateRange.TODAY:
            return start == as_of
        case DateRange.THIS_WEEK:
            return as_of <= start <= as_of + timedelta(days=7)
        case DateRange.THIS_MONTH:
            return (start.year, start.month) == (as_of.year, as_of.month)
        case DateRange.UPCOMING:
            return start >= as_of
        case DateRange.PAST:
            return start < as_of
        case DateRange.CUSTOM_DAYS:
            if custom_days is None:
                return True
            return as_of <= start <= as_of + timedelta(days=custom_days)
    return True


def matches_status(event: Event, status: str) -> bool:
    if not status or status.lower() == "all":
        return True
    return (_text(event.status) or "").casefold() == status.casefold()


def matches_assignee(event: Event, assigned_to: str) -> bool:
    if not assigned_to or assigned_to.lower() == "all":
        return True
    return assigned_to in event.assigned_to


def matches_task_filter(
    event: Event,
    filters: FilterState,
    core_tasks: Sequence[CoreTask],
    as_of: date,
) -> bool:
    """
    Check an event against the task-completion filter.

    ``incomplete`` keeps events starting within the task date window that
    still have outstanding templates (restricted to ``selected_task_ids``
    when any are selected).
    """
    if filters.task_filter == TaskFilter.ALL:
        return True

    outstanding = incomplete_task_ids(event, core_tasks)
    if not outstanding:
        return False

    start = event.start_date
    if start is None or not as_of <= start <= as_of + timedelta(days=filters.task_date_range_days):
        return False

    if filters.selected_task_ids:
        return any(task_id in outstanding for task_id in filters.selected_task_ids)
    return True


def filter_events(
    events: Iterable[Event],
    filters: FilterState,
    core_tasks: Sequence[CoreTask] = (),
    as_of: date | None = None,
) -> list[Event]:
    """
    Apply every active filter. Input order is preserved.

    Pure function - no I/O.
    """
    as_of = as_of or date.today()
    return [
        e
        for e in events
        if matches_search(e, filters.search_term)
        and matches_status(e, filters.status)
        and matches_assignee(e, filters.assigned_to)
        and matches_date_range(e, filters.date_range, as_of, filters.custom_days)
        and matches_task_filter(e, filters, core_tasks, as_of)
    ]


def _sort_value(event: Event, sort_by: SortOption) -> date | str | None:
    match sort_by:
        case SortOption.DATE_ASC | SortOption.DATE_DESC:
            return event.start_date
        case SortOption.TITLE_ASC | SortOption.TITLE_DESC:
            title = _text(event.title)
            return title.casefold() if title else None
        case SortOption.ACCOUNT_ASC | SortOption.ACCOUNT_DESC:
            account = _text(event.account_name)
            return account.casefold() if account else None
    return event.start_date


def sort_events(events: Iterable[Event], sort_by: SortOption = SortOption.DATE_ASC) -> list[Event]:
    """
    Sort events by the chosen option. Returns a new list.

    Events missing the sort value go last in both directions. Equal keys
    keep their input order.
    Pure function - no I/O.
    """
    sort_by = SortOption(sort_by)
    keyed = [(_sort_value(e, sort_by), e) for e in events]

    present = [(value, e) for value, e in keyed if value is not None]
    missing = [e for value, e in keyed if value is None]

    present.sort(key=lambda pair: pair[0], reverse=sort_by.descending)
    return [e for _, e in present] + missing


def count_events(
    events: Sequence[Event],
    core_tasks: Sequence[CoreTask] = (),
    as_of: date | None = None,
    filtered: int = 0,
) -> EventCounts:
    """Count events per date bucket for filter badges."""
    as_of = as_of or date.today()
    week_end = as_of + timedelta(days=7)
    counts = EventCounts(total=len(events), filtered=filtered)

    for event in events:
        start = event.start_date
        if start is None:
            continue

        days_until = (start - as_of).days

        if start == as_of:
            counts.today += 1
        if as_of <= start <= week_end:
            counts.this_week += 1
        if (start.year, start.month) == (as_of.year, as_of.month):
            counts.this_month += 1
        if start >= as_of:
            counts.upcoming += 1
        else:
            counts.past += 1
        if 0 <= days_until <= 10:
            counts.next_10_days += 1
        if 0 <= days_until <= 45 and incomplete_task_ids(event, core_tasks):
            counts.next_45_days += 1

    return counts


def build_event_list(
    events: Sequence[Event],
    filters: FilterState,
    sort_by: SortOption = SortOption.DATE_ASC,
    core_tasks: Sequence[CoreTask] = (),
    as_of: date | None = None,
) -> EventListView:
    """
    Filter, sort and count in one pass.

    Pure function - no I/O.
    """
    as_of = as_of or date.today()
    filtered = filter_events(events, filters, core_tasks, as_of)
    return EventListView(
        filtered=filtered,
        sorted=sort_events(filtered, sort_by),
        counts=count_events(events, core_tasks, as_of, filtered=len(filtered)),
    )
