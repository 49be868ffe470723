"""Pure distance logic - no I/O dependencies."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

EARTH_RADIUS_MILES = 3959
EARTH_RADIUS_KM = 6371
METERS_PER_MILE = 1609.34
SECONDS_PER_MINUTE = 60


class DistanceUnit(str, Enum):
    MILES = "miles"
    KILOMETERS = "kilometers"


class DrivingStatus(str, Enum):
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    ZERO_RESULTS = "ZERO_RESULTS"
    ERROR = "ERROR"


class InvalidCoordinatesError(ValueError):
    """Raised when a latitude or longitude is out of range."""

    pass


class MissingCoordinatesError(ValueError):
    """Raised when a staff member or location has no coordinates on file."""

    pass


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class DrivingDistance:
    """Driving distance (miles) and duration (minutes) between two points."""

    distance: float
    duration: int
    distance_text: str
    duration_text: str
    status: DrivingStatus

    @property
    def ok(self) -> bool:
        return self.status == DrivingStatus.OK

    @classmethod
    def unavailable(cls, status: DrivingStatus = DrivingStatus.ERROR) -> "DrivingDistance":
        return cls(distance=0, duration=0, distance_text="", duration_text="", status=status)


@dataclass
class StaffMember:
    """A staff member and their home coordinates, if known."""

    id: str
    first_name: str = ""
    last_name: str = ""
    home_latitude: float | None = None
    home_longitude: float | None = None
    status: str = "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def home(self) -> Coordinates | None:
        if self.home_latitude is None or self.home_longitude is None:
            return None
        return Coordinates(self.home_latitude, self.home_longitude)

    @classmethod
    def from_record(cls, data: Mapping) -> "StaffMember":
        return cls(
            id=str(data["id"]),
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            home_latitude=data.get("home_latitude"),
            home_longitude=data.get("home_longitude"),
            status=data.get("status") or "active",
        )


@dataclass
class Location:
    """An event location and its coordinates, if geocoded."""

    id: str
    name: str = ""
    latitude: float | None = None
    longitude: float | None = None

    @property
    def coordinates(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

    @classmethod
    def from_record(cls, data: Mapping) -> "Location":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )


@dataclass
class StaffWithDistance:
    user_id: str
    first_name: str
    last_name: str
    distance_miles: float


@dataclass
class StaffToLocationDistance:
    staff_name: str
    location_name: str
    straight_line_distance: float
    driving_distance: float | None = None
    driving_duration: int | None = None


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def is_valid_latitude(lat: object) -> bool:
    return _is_number(lat) and -90 <= lat <= 90


def is_valid_longitude(lng: object) -> bool:
    return _is_number(lng) and -180 <= lng <= 180


def calculate_haversine_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    unit: DistanceUnit | str = DistanceUnit.MILES,
) -> float:
    """
    Great-circle distance between two points, rounded to 2 decimals.

    Raises:
        InvalidCoordinatesError: latitude outside [-90, 90] or longitude
            outside [-180, 180].
    """
    if not is_valid_latitude(lat1) or not is_valid_latitude(lat2):
        raise InvalidCoordinatesError(
            f"Invalid latitude. Must be between -90 and 90. Got: lat1={lat1}, lat2={lat2}"
        )
    if not is_valid_longitude(lng1) or not is_valid_longitude(lng2):
        raise InvalidCoordinatesError(
            f"Invalid longitude. Must be between -180 and 180. Got: lng1={lng1}, lng2={lng2}"
        )

    radius = EARTH_RADIUS_MILES if DistanceUnit(unit) == DistanceUnit.MILES else EARTH_RADIUS_KM

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(radius * c, 2)


def format_location(location: Coordinates | str) -> str:
    """Format coordinates or an address as a Distance Matrix origin/destination."""
    if isinstance(location, Coordinates):
        return f"{location.lat},{location.lng}"
    return location.strip()


def parse_distance_matrix(data: Mapping) -> DrivingDistance:
    """
    Interpret a Distance Matrix response for a single origin/destination.

    Shape: ``{"status", "rows": [{"elements": [{"status", "distance",
    "duration"}]}]}`` with distance in meters and duration in seconds.
    """
    if data.get("status") != "OK":
        return DrivingDistance.unavailable()

    try:
        element = data["rows"][0]["elements"][0]
    except (KeyError, IndexError, TypeError):
        return DrivingDistance.unavailable()

    if not isinstance(element, Mapping):
        return DrivingDistance.unavailable()

    element_status = element.get("status")
    if element_status == DrivingStatus.NOT_FOUND.value:
        return DrivingDistance.unavailable(DrivingStatus.NOT_FOUND)
    if element_status == DrivingStatus.ZERO_RESULTS.value:
        return DrivingDistance.unavailable(DrivingStatus.ZERO_RESULTS)

    distance = element.get("distance")
    duration = element.get("duration")
    if element_status != "OK" or not isinstance(distance, Mapping) or not isinstance(duration, Mapping):
        return DrivingDistance.unavailable()

    meters = distance.get("value")
    seconds = duration.get("value")
    if not _is_number(meters) or not _is_number(seconds):
        return DrivingDistance.unavailable()

    return DrivingDistance(
        distance=round(meters / METERS_PER_MILE, 1),
        duration=math.floor(seconds / SECONDS_PER_MINUTE + 0.5),
        distance_text=distance.get("text", ""),
        duration_text=duration.get("text", ""),
        status=DrivingStatus.OK,
    )


def find_staff_within_radius(
    location: Location,
    staff: Iterable[StaffMember],
    radius_miles: float,
) -> list[StaffWithDistance]:
    """
    Staff whose home is within ``radius_miles`` of the location, nearest first.

    Staff without home coordinates are skipped.

    Raises:
        MissingCoordinatesError: the location has no coordinates.
    """
    target = location.coordinates
    if target is None:
        raise MissingCoordinatesError(f"Location {location.name} does not have coordinates set")

    nearby = []
    for member in staff:
        home = member.home
        if home is None:
            continue
        distance = calculate_haversine_distance(home.lat, home.lng, target.lat, target.lng)
        if distance <= radius_miles:
            nearby.append(
                StaffWithDistance(
                    user_id=member.id,
                    first_name=member.first_name,
                    last_name=member.last_name,
                    distance_miles=distance,
                )
            )

    return sorted(nearby, key=lambda s: s.distance_miles)
