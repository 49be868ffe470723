"""Staff-to-location distance lookups.

Joins directory records with the pure distance core and, optionally, a
driving distance service.
"""

import logging

from .core import distance as core
from .core.distance import (
    MissingCoordinatesError,
    StaffToLocationDistance,
    StaffWithDistance,
)
from .ports import DrivingDistanceService, StaffDirectory

logger = logging.getLogger(__name__)


class StaffNotFoundError(LookupError):
    """Raised when a staff member is not in the directory."""

    pass


class LocationNotFoundError(LookupError):
    """Raised when a location is not in the directory."""

    pass


def _require_location(directory: StaffDirectory, location_id: str) -> core.Location:
    location = directory.get_location(location_id)
    if location is None:
        logger.error(f"Location not found: {location_id}")
        raise LocationNotFoundError(f"Location not found: {location_id}")
    return location


def calculate_staff_to_location_distance(
    directory: StaffDirectory,
    user_id: str,
    location_id: str,
    driving: DrivingDistanceService | None = None,
) -> StaffToLocationDistance:
    """
    Straight-line (and optionally driving) distance from a staff member's
    home to a location.

    Driving figures are only filled in when the driving service answers OK;
    otherwise the straight-line result stands on its own.
    """
    staff = directory.get_staff(user_id)
    if staff is None:
        logger.error(f"Staff member not found: {user_id}")
        raise StaffNotFoundError(f"User not found: {user_id}")

    location = _require_location(directory, location_id)

    home = staff.home
    if home is None:
        logger.warning(f"User {user_id} does not have home coordinates")
        raise MissingCoordinatesError(f"User {staff.full_name} does not have home coordinates set")

    target = location.coordinates
    if target is None:
        logger.warning(f"Location {location_id} does not have coordinates")
        raise MissingCoordinatesError(f"Location {location.name} does not have coordinates set")

    result = StaffToLocationDistance(
        staff_name=staff.full_name,
        location_name=location.name,
        straight_line_distance=core.calculate_haversine_distance(
            home.lat, home.lng, target.lat, target.lng
        ),
    )

    if driving is not None:
        route = driving.driving_distance(home, target)
        if route.ok:
            result.driving_distance = route.distance
            result.driving_duration = route.duration
        else:
            logger.warning(f"Failed to get driving distance: {route.status.value}")

    return result


def find_staff_within_radius(
    directory: StaffDirectory,
    location_id: str,
    radius_miles: float,
) -> list[StaffWithDistance]:
    """Active staff within ``radius_miles`` of a location, nearest first."""
    if not radius_miles or radius_miles <= 0:
        raise ValueError("Invalid radius. Must be a positive number.")

    location = _require_location(directory, location_id)
    staff = directory.list_active_staff()
    nearby = core.find_staff_within_radius(location, staff, radius_miles)

    logger.debug(
        f"Found {len(nearby)} of {len(staff)} staff within {radius_miles} mi of {location_id}"
    )
    return nearby
