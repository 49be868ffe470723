"""Staff and location lookup interface."""

from typing import Protocol

from eventready.core.distance import Location, StaffMember


class StaffDirectory(Protocol):
    """Interface for tenant-scoped staff and location records."""

    def get_staff(self, user_id: str) -> StaffMember | None:
        """Fetch one staff member. Returns None if not found."""
        ...

    def get_location(self, location_id: str) -> Location | None:
        """Fetch one location. Returns None if not found."""
        ...

    def list_active_staff(self) -> list[StaffMember]:
        """Fetch all active staff members."""
        ...
