import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

logger = logging.getLogger("painel.maps")

AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class AddressLookupError(RuntimeError):
    pass


@dataclass
class AddressSuggestion:
    place_id: str
    description: str


@dataclass
class StructuredAddress:
    formatted: str
    street: Optional[str] = None
    number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class AddressLookup(Protocol):
    @property
    def is_configured(self) -> bool:
        ...

    async def suggest(self, text: str) -> list[AddressSuggestion]:
        ...

    async def details(self, place_id: str) -> Optional[StructuredAddress]:
        ...

    async def geocode(self, address: str) -> Optional[StructuredAddress]:
        ...


def _component(components: list[dict], key: str) -> Optional[str]:
    for comp in components:
        if key in comp.get("types", []):
            return comp.get("long_name")
    return None


def parse_place(result: dict) -> StructuredAddress:
    components = result.get("address_components", [])
    location = result.get("geometry", {}).get("location") or {}
    lat = location.get("lat")
    lng = location.get("lng")
    if lat is None or lng is None:
        lat = lng = None
    return StructuredAddress(
        formatted=result.get("formatted_address") or "",
        street=_component(components, "route"),
        number=_component(components, "street_number"),
        city=_component(components, "administrative_area_level_2") or _component(components, "locality"),
        state=_component(components, "administrative_area_level_1"),
        latitude=lat,
        longitude=lng,
    )


class GoogleAddressLookup:
    """Places autocomplete/details and geocoding, restricted to Brazil."""

    def __init__(self, api_key: Optional[str], timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get(self, url: str, params: dict) -> dict:
        params = {**params, "key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise AddressLookupError(f"request failed: {exc}") from exc
        if response.status_code >= 400:
            raise AddressLookupError(f"HTTP {response.status_code}")
        try:
            payload = response.json()
            status = payload.get("status") or "ERROR"
        except (ValueError, AttributeError) as exc:
            raise AddressLookupError(f"invalid response: {exc}") from exc
        if status not in {"OK", "ZERO_RESULTS"}:
            raise AddressLookupError(status)
        return payload

    async def suggest(self, text: str) -> list[AddressSuggestion]:
        if not self.is_configured:
            logger.warning("GOOGLE_MAPS_API_KEY not configured")
            return []
        text = (text or "").strip()
        if not text:
            return []
        payload = await self._get(
            AUTOCOMPLETE_URL,
            {
                "input": text,
                "types": "geocode",
                "components": "country:br",
                "language": "pt-BR",
            },
        )
        return [
            AddressSuggestion(place_id=p.get("place_id", ""), description=p.get("description", ""))
            for p in payload.get("predictions", [])
            if p.get("place_id")
        ]

    async def details(self, place_id: str) -> Optional[StructuredAddress]:
        if not self.is_configured:
            logger.warning("GOOGLE_MAPS_API_KEY not configured")
            return None
        payload = await self._get(
            DETAILS_URL,
            {
                "place_id": place_id,
                "fields": "address_component,formatted_address,geometry",
                "language": "pt-BR",
            },
        )
        result = payload.get("result")
        if not result:
            return None
        return parse_place(result)

    async def geocode(self, address: str) -> Optional[StructuredAddress]:
        if not self.is_configured:
            logger.warning("GOOGLE_MAPS_API_KEY not configured")
            return None
        payload = await self._get(
            GEOCODE_URL,
            {
                "address": address,
                "region": "br",
                "components": "country:BR",
                "language": "pt-BR",
            },
        )
        results = payload.get("results") or []
        if not results:
            logger.info("geocode returned no results")
            return None
        return parse_place(results[0])
