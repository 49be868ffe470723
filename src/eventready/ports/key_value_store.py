"""Key-value storage interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for small string values that outlive a process."""

    def get(self, key: str) -> str | None:
        """Read a value. Returns None if not set."""
        ...

    def set(self, key: str, value: str) -> None:
        """Write/overwrite a value."""
        ...

    def delete(self, key: str) -> None:
        """Remove a value if present."""
        ...
