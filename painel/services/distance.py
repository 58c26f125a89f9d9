import logging
import math
from typing import Optional, Protocol

import httpx

logger = logging.getLogger("painel.maps")

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
ROUND_TRIP_MARGIN = 1.2

Point = tuple[float, float]


class DistanceLookupError(RuntimeError):
    pass


class DistanceLookup(Protocol):
    @property
    def is_configured(self) -> bool:
        ...

    async def driving_distance_meters(self, origin: Point, destination: Point) -> Optional[float]:
        ...


def round_trip_km(meters: float) -> int:
    """One-way meters doubled, plus the 20% margin, to the nearest km."""
    km = meters * 2 / 1000 * ROUND_TRIP_MARGIN
    return int(math.floor(km + 0.5))


def _point(value: Point) -> str:
    return f"{value[0]},{value[1]}"


class GoogleDistanceLookup:
    def __init__(self, api_key: Optional[str], timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def driving_distance_meters(self, origin: Point, destination: Point) -> Optional[float]:
        if not self.is_configured:
            logger.warning("GOOGLE_MAPS_API_KEY not configured")
            return None
        params = {
            "origins": _point(origin),
            "destinations": _point(destination),
            "mode": "driving",
            "key": self.api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(DISTANCE_MATRIX_URL, params=params)
        except httpx.HTTPError as exc:
            raise DistanceLookupError(f"request failed: {exc}") from exc
        if response.status_code >= 400:
            raise DistanceLookupError(f"HTTP {response.status_code}")
        try:
            data = response.json()
            status = data.get("status")
        except (ValueError, AttributeError) as exc:
            raise DistanceLookupError(f"invalid response: {exc}") from exc
        if status != "OK":
            raise DistanceLookupError(status or "ERROR")
        try:
            element = data["rows"][0]["elements"][0]
            element_status = element.get("status", "OK")
            meters = element.get("distance", {}).get("value")
        except (KeyError, IndexError, TypeError, AttributeError):
            raise DistanceLookupError("NO_RESULTS")
        if element_status != "OK":
            logger.info("distance element status=%s", element_status)
            return None
        return meters
