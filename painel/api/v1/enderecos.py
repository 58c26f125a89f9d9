import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from painel.api.deps import get_address_lookup
from painel.services.geocoding import AddressLookup, AddressLookupError

router = APIRouter(tags=["Enderecos"])
logger = logging.getLogger("painel.maps")


@router.get("/enderecos/sugestoes")
async def address_suggestions(
    q: str = "",
    lookup: AddressLookup = Depends(get_address_lookup),
):
    if not lookup.is_configured:
        return {"enabled": False, "items": []}
    try:
        items = await lookup.suggest(q)
    except AddressLookupError as exc:
        logger.warning("autocomplete failed: %s", exc)
        items = []
    return {"enabled": True, "items": [asdict(item) for item in items]}


@router.get("/enderecos/detalhes")
async def address_details(
    place_id: str,
    lookup: AddressLookup = Depends(get_address_lookup),
):
    if not lookup.is_configured:
        return {"enabled": False, "address": None}
    try:
        found = await lookup.details(place_id)
    except AddressLookupError as exc:
        logger.warning("place details failed: %s", exc)
        found = None
    return {"enabled": True, "address": asdict(found) if found else None}
