"""Ports - interfaces/protocols for external dependencies."""

from .driving_distance import DrivingDistanceService
from .staff_directory import StaffDirectory
from .key_value_store import KeyValueStore

__all__ = [
    "DrivingDistanceService",
    "StaffDirectory",
    "KeyValueStore",
]
