"""Functional core - pure business logic with no I/O."""

from .readiness import (
    TaskStatus,
    ReadinessTask,
    EventReadiness,
    is_task_completed,
    filter_pre_event_tasks,
    calculate_event_readiness,
    calculate_bulk_event_readiness,
    get_incomplete_tasks,
    get_completed_tasks,
)
from .events import (
    Event,
    CoreTask,
    FilterState,
    DateRange,
    TaskFilter,
    SortOption,
    EventCounts,
    EventListView,
    filter_events,
    sort_events,
    count_events,
    build_event_list,
)
from .distance import (
    Coordinates,
    DistanceUnit,
    DrivingDistance,
    DrivingStatus,
    InvalidCoordinatesError,
    MissingCoordinatesError,
    calculate_haversine_distance,
)
from .messages import SmsMessage, UnreadThread, normalize_phone, find_unread_threads

__all__ = [
    # Readiness
    "TaskStatus",
    "ReadinessTask",
    "EventReadiness",
    "is_task_completed",
    "filter_pre_event_tasks",
    "calculate_event_readiness",
    "calculate_bulk_event_readiness",
    "get_incomplete_tasks",
    "get_completed_tasks",
    # Events
    "Event",
    "CoreTask",
    "FilterState",
    "DateRange",
    "TaskFilter",
    "SortOption",
    "EventCounts",
    "EventListView",
    "filter_events",
    "sort_events",
    "count_events",
    "build_event_list",
    # Distance
    "Coordinates",
    "DistanceUnit",
    "DrivingDistance",
    "DrivingStatus",
    "InvalidCoordinatesError",
    "MissingCoordinatesError",
    "calculate_haversine_distance",
    # Messages
    "SmsMessage",
    "UnreadThread",
    "normalize_phone",
    "find_unread_threads",
]
