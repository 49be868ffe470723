"""Adapters - I/O implementations of ports."""

from .google_distance import GoogleDistanceMatrixAdapter
from .json_directory import JsonStaffDirectory
from .file_store import FileKeyValueStore, InMemoryKeyValueStore

__all__ = [
    "GoogleDistanceMatrixAdapter",
    "JsonStaffDirectory",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
]
