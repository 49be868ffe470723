"""JSON file staff directory adapter."""

import json
from pathlib import Path

from eventready.core.distance import Location, StaffMember


class JsonStaffDirectory:
    """
    Staff directory backed by a JSON export.

    Implements StaffDirectory protocol. The file holds
    ``{"staff": [...], "locations": [...]}`` rows; rows carrying a
    ``tenant_id`` other than the configured one are ignored.
    """

    def __init__(self, path: Path | str, tenant_id: str = ""):
        self.path = Path(path).expanduser()
        self.tenant_id = tenant_id
        self._data: dict | None = None

    def _rows(self, kind: str) -> list[dict]:
        if self._data is None:
            self._data = json.loads(self.path.read_text())
        rows = self._data.get(kind, [])
        if not self.tenant_id:
            return rows
        return [r for r in rows if r.get("tenant_id", self.tenant_id) == self.tenant_id]

    def get_staff(self, user_id: str) -> StaffMember | None:
        """Fetch one staff member. Returns None if not found."""
        row = next((r for r in self._rows("staff") if str(r.get("id")) == user_id), None)
        return StaffMember.from_record(row) if row else None

    def get_location(self, location_id: str) -> Location | None:
        """Fetch one location. Returns None if not found."""
        row = next((r for r in self._rows("locations") if str(r.get("id")) == location_id), None)
        return Location.from_record(row) if row else None

    def list_active_staff(self) -> list[StaffMember]:
        """Fetch all active staff members."""
        staff = [StaffMember.from_record(r) for r in self._rows("staff")]
        return [s for s in staff if s.status == "active"]
