"""Pure event readiness logic - no I/O dependencies.

An event is ready when every pre-event task is completed. A task counts as
completed when its status is ``completed`` or ``approved``.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Mapping

from .dates import parse_local_datetime, round_half_up_percent

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Known task statuses."""

    NEW = "new"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    APPROVED = "approved"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: "TaskStatus | str | None") -> "TaskStatus | None":
        """Return the matching status, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


COMPLETED_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.APPROVED})


@dataclass
class ReadinessTask:
    """A task snapshot as far as readiness is concerned."""

    id: str
    status: TaskStatus | str
    entity_type: str | None = None
    entity_id: str | None = None
    due_date: date | datetime | str | None = None

    @property
    def is_completed(self) -> bool:
        return is_task_completed(self.status)

    @classmethod
    def from_record(cls, data: Mapping) -> "ReadinessTask":
        """Create from a task row (``id``, ``status``, ``entity_id``, ``due_date``)."""
        status = data.get("status") or ""
        parsed = TaskStatus.parse(status)
        if parsed is None:
            logger.warning(f"Task {data.get('id')!r} has unknown status {status!r}, counting it as not completed")
        return cls(
            id=str(data.get("id", "")),
            status=parsed or status,
            entity_type=data.get("entity_type"),
            entity_id=data.get("entity_id"),
            due_date=data.get("due_date"),
        )


@dataclass(frozen=True)
class EventReadiness:
    """Completion state of one event's tasks."""

    total: int
    completed: int
    percentage: int
    is_ready: bool
    has_tasks: bool

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "percentage": self.percentage,
            "isReady": self.is_ready,
            "hasTasks": self.has_tasks,
        }


NO_TASKS = EventReadiness(total=0, completed=0, percentage=0, is_ready=False, has_tasks=False)


def is_task_completed(status: TaskStatus | str | None) -> bool:
    """True if the status counts as completed. Unknown statuses never do."""
    parsed = TaskStatus.parse(status)
    if parsed is None:
        logger.debug(f"Unknown task status {status!r} treated as not completed")
        return False
    return parsed in COMPLETED_STATUSES


def filter_pre_event_tasks(
    tasks: Iterable[ReadinessTask],
    event_date: date | datetime | str | None = None,
) -> list[ReadinessTask]:
    """
    Keep tasks due on or before the event.

    Tasks without a due date are always kept. Tasks whose due date cannot
    be parsed are dropped. Without an event date every task is kept.
    Pure function - no I/O.
    """
    if event_date is None or event_date == "":
        return list(tasks)

    event_at = parse_local_datetime(event_date)

    def is_pre_event(task: ReadinessTask) -> bool:
        if task.due_date is None or task.due_date == "":
            return True
        due_at = parse_local_datetime(task.due_date)
        if due_at is None or event_at is None:
            return False
        return due_at <= event_at

    return [t for t in tasks if is_pre_event(t)]


def calculate_event_readiness(
    tasks: Iterable[ReadinessTask],
    event_date: date | datetime | str | None = None,
) -> EventReadiness:
    """
    Calculate readiness from an event's pre-event tasks.

    No tasks means not ready: callers must not read zero tasks as success.
    Pure function - no I/O.
    """
    pre_event = filter_pre_event_tasks(tasks, event_date)
    total = len(pre_event)
    if total == 0:
        return NO_TASKS

    completed = sum(1 for t in pre_event if is_task_completed(t.status))
    return EventReadiness(
        total=total,
        completed=completed,
        percentage=round_half_up_percent(completed, total),
        is_ready=completed == total,
        has_tasks=True,
    )


def calculate_bulk_event_readiness(
    tasks: Iterable[ReadinessTask],
    event_ids: Iterable[str],
    event_dates: Mapping[str, date | datetime | str | None] | None = None,
) -> dict[str, EventReadiness]:
    """
    Calculate readiness for many events from one flat task list.

    Every requested event id gets an entry. Tasks for other events are
    ignored.
    """
    event_dates = event_dates or {}
    by_event: dict[str, list[ReadinessTask]] = {event_id: [] for event_id in event_ids}

    for task in tasks:
        if task.entity_id in by_event:
            by_event[task.entity_id].append(task)

    return {
        event_id: calculate_event_readiness(event_tasks, event_dates.get(event_id))
        for event_id, event_tasks in by_event.items()
    }


def get_incomplete_tasks(tasks: Iterable[ReadinessTask]) -> list[ReadinessTask]:
    """Tasks not yet completed (no date filtering)."""
    return [t for t in tasks if not is_task_completed(t.status)]


def get_completed_tasks(tasks: Iterable[ReadinessTask]) -> list[ReadinessTask]:
    """Tasks completed or approved (no date filtering)."""
    return [t for t in tasks if is_task_completed(t.status)]
