"""eventready - event readiness, event list filtering and staff distance tools."""
