"""Google Distance Matrix adapter - HTTP client for driving distances."""

import logging

import requests

from eventready.config import Config, load_config
from eventready.core.distance import (
    Coordinates,
    DrivingDistance,
    DrivingStatus,
    format_location,
    parse_distance_matrix,
)

logger = logging.getLogger(__name__)

API_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"


class GoogleDistanceMatrixAdapter:
    """
    Google Distance Matrix adapter.

    Implements DrivingDistanceService protocol. Network and API failures
    come back as a zeroed result with an ERROR status. No business logic -
    just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        api_key: str | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or load_config()
        self.api_key = api_key if api_key is not None else self.config.google_maps_api_key
        self.timeout = self.config.request_timeout
        self._session = session or requests.Session()

    def _request(self, origin: str, destination: str) -> dict:
        """Call the Distance Matrix endpoint and return the JSON body."""
        resp = self._session.get(
            API_URL,
            params={
                "origins": origin,
                "destinations": destination,
                "units": "imperial",
                "key": self.api_key,
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def driving_distance(
        self,
        origin: Coordinates | str,
        destination: Coordinates | str,
    ) -> DrivingDistance:
        """Fetch driving distance (miles) and duration (minutes)."""
        if not self.api_key:
            logger.error("Google Maps API key not configured")
            return DrivingDistance.unavailable()

        origin_str = format_location(origin)
        destination_str = format_location(destination)
        logger.debug(f"Requesting driving distance {origin_str} -> {destination_str}")

        try:
            data = self._request(origin_str, destination_str)
        except requests.RequestException as e:
            logger.error(f"Distance Matrix request failed: {e}")
            return DrivingDistance.unavailable()
        except ValueError as e:
            logger.error(f"Distance Matrix returned invalid JSON: {e}")
            return DrivingDistance.unavailable()

        if not isinstance(data, dict):
            logger.error("Distance Matrix returned an unexpected payload")
            return DrivingDistance.unavailable()

        if data.get("status") != "OK":
            logger.error(
                f"Distance Matrix API error: {data.get('status')} {data.get('error_message', '')}".rstrip()
            )

        result = parse_distance_matrix(data)
        if result.status != DrivingStatus.OK:
            logger.debug(f"Driving distance unavailable: {result.status.value}")
        return result
