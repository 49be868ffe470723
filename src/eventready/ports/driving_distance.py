"""Driving distance service interface."""

from typing import Protocol

from eventready.core.distance import Coordinates, DrivingDistance


class DrivingDistanceService(Protocol):
    """Interface for road-distance lookups from any mapping backend."""

    def driving_distance(
        self,
        origin: Coordinates | str,
        destination: Coordinates | str,
    ) -> DrivingDistance:
        """Driving distance between two points. Never raises; check ``status``."""
        ...
