"""Tests for staff-to-location distance lookups and the JSON directory."""

import json
from unittest.mock import MagicMock

import pytest

from eventready.adapters.json_directory import JsonStaffDirectory
from eventready.core.distance import (
    Coordinates,
    DrivingDistance,
    DrivingStatus,
    Location,
    MissingCoordinatesError,
    StaffMember,
)
from eventready.distance import (
    LocationNotFoundError,
    StaffNotFoundError,
    calculate_staff_to_location_distance,
    find_staff_within_radius,
)


class FakeDirectory:
    """In-memory StaffDirectory."""

    def __init__(self, staff: list[StaffMember], locations: list[Location]):
        self.staff = {s.id: s for s in staff}
        self.locations = {loc.id: loc for loc in locations}

    def get_staff(self, user_id):
        return self.staff.get(user_id)

    def get_location(self, location_id):
        return self.locations.get(location_id)

    def list_active_staff(self):
        return [s for s in self.staff.values() if s.status == "active"]


@pytest.fixture
def directory():
    return FakeDirectory(
        staff=[
            StaffMember("u1", "Jane", "Smith", 40.72, -74.0),
            StaffMember("u2", "John", "Doe", 40.9, -74.2),
            StaffMember("u3", "No", "Home"),
            StaffMember("u4", "Gone", "Away", 40.7128, -74.006, status="inactive"),
        ],
        locations=[
            Location("loc", "Convention Center", 40.7128, -74.0060),
            Location("ungeocoded", "Pop-up Tent"),
        ],
    )


@pytest.fixture
def driving_ok():
    service = MagicMock()
    service.driving_distance.return_value = DrivingDistance(
        distance=1.4, duration=7, distance_text="1.4 mi", duration_text="7 mins", status=DrivingStatus.OK
    )
    return service


class TestStaffToLocationDistance:
    def test_straight_line_only(self, directory):
        result = calculate_staff_to_location_distance(directory, "u1", "loc")
        assert result.staff_name == "Jane Smith"
        assert result.location_name == "Convention Center"
        assert 0 < result.straight_line_distance < 2
        assert result.driving_distance is None
        assert result.driving_duration is None

    def test_with_driving(self, directory, driving_ok):
        result = calculate_staff_to_location_distance(directory, "u1", "loc", driving_ok)

        assert result.driving_distance == 1.4
        assert result.driving_duration == 7
        driving_ok.driving_distance.assert_called_once_with(
            Coordinates(40.72, -74.0), Coordinates(40.7128, -74.0060)
        )

    def test_driving_failure_keeps_straight_line(self, directory):
        service = MagicMock()
        service.driving_distance.return_value = DrivingDistance.unavailable(DrivingStatus.ZERO_RESULTS)

        result = calculate_staff_to_location_distance(directory, "u1", "loc", service)

        assert result.straight_line_distance > 0
        assert result.driving_distance is None

    def test_unknown_staff(self, directory):
        with pytest.raises(StaffNotFoundError, match="missing"):
            calculate_staff_to_location_distance(directory, "missing", "loc")

    def test_unknown_location(self, directory):
        with pytest.raises(LocationNotFoundError):
            calculate_staff_to_location_distance(directory, "u1", "missing")

    def test_staff_without_home(self, directory):
        with pytest.raises(MissingCoordinatesError, match="No Home"):
            calculate_staff_to_location_distance(directory, "u3", "loc")

    def test_location_without_coordinates(self, directory):
        with pytest.raises(MissingCoordinatesError, match="Pop-up Tent"):
            calculate_staff_to_location_distance(directory, "u1", "ungeocoded")

    def test_lookup_errors_are_lookup_errors(self, directory):
        with pytest.raises(LookupError):
            calculate_staff_to_location_distance(directory, "nobody", "loc")


class TestFindStaffWithinRadius:
    def test_active_staff_sorted(self, directory):
        result = find_staff_within_radius(directory, "loc", 30)
        assert [s.user_id for s in result] == ["u1", "u2"]

    def test_excludes_inactive(self, directory):
        result = find_staff_within_radius(directory, "loc", 30)
        assert "u4" not in [s.user_id for s in result]

    @pytest.mark.parametrize("radius", [0, -5])
    def test_rejects_non_positive_radius(self, directory, radius):
        with pytest.raises(ValueError, match="Invalid radius"):
            find_staff_within_radius(directory, "loc", radius)

    def test_unknown_location(self, directory):
        with pytest.raises(LocationNotFoundError):
            find_staff_within_radius(directory, "nowhere", 10)

    def test_location_without_coordinates(self, directory):
        with pytest.raises(MissingCoordinatesError):
            find_staff_within_radius(directory, "ungeocoded", 10)


class TestJsonStaffDirectory:
    @pytest.fixture
    def directory_file(self, tmp_path):
        path = tmp_path / "directory.json"
        path.write_text(
            json.dumps(
                {
                    "staff": [
                        {"id": "u1", "tenant_id": "t1", "first_name": "Jane", "home_latitude": 1, "home_longitude": 2},
                        {"id": "u2", "tenant_id": "t2", "first_name": "Other"},
                        {"id": "u3", "tenant_id": "t1", "first_name": "Old", "status": "inactive"},
                    ],
                    "locations": [
                        {"id": "l1", "tenant_id": "t1", "name": "Hall", "latitude": 1, "longitude": 2},
                        {"id": "l2", "tenant_id": "t2", "name": "Elsewhere"},
                    ],
                }
            )
        )
        return path

    def test_get_staff(self, directory_file):
        directory = JsonStaffDirectory(directory_file, tenant_id="t1")
        staff = directory.get_staff("u1")
        assert staff.first_name == "Jane"
        assert staff.home == Coordinates(1, 2)

    def test_tenant_scoping(self, directory_file):
        directory = JsonStaffDirectory(directory_file, tenant_id="t1")
        assert directory.get_staff("u2") is None
        assert directory.get_location("l2") is None
        assert directory.get_location("l1").name == "Hall"

    def test_no_tenant_sees_everything(self, directory_file):
        directory = JsonStaffDirectory(directory_file)
        assert directory.get_staff("u2").first_name == "Other"

    def test_list_active_staff(self, directory_file):
        directory = JsonStaffDirectory(directory_file, tenant_id="t1")
        assert [s.id for s in directory.list_active_staff()] == ["u1"]

    def test_works_with_radius_search(self, directory_file):
        directory = JsonStaffDirectory(directory_file, tenant_id="t1")
        result = find_staff_within_radius(directory, "l1", 5)
        assert [s.user_id for s in result] == ["u1"]
        assert result[0].distance_miles == 0
