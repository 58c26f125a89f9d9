import logging

from fastapi import APIRouter, Depends

from painel.api.deps import get_distance_lookup
from painel.core.config import Settings, get_settings
from painel.core.firebase import credentials_configured
from painel.services.distance import DistanceLookup, DistanceLookupError

router = APIRouter()
logger = logging.getLogger("painel.doctor")

# Praca da Se -> Avenida Paulista
_PROBE_ORIGIN = (-23.5505, -46.6333)
_PROBE_DESTINATION = (-23.5614, -46.6559)


@router.get("/doctor/maps")
async def doctor_maps(lookup: DistanceLookup = Depends(get_distance_lookup)):
    try:
        meters = await lookup.driving_distance_meters(_PROBE_ORIGIN, _PROBE_DESTINATION)
    except DistanceLookupError as exc:
        logger.warning("doctor/maps failed: %s", exc)
        meters = None
    return {"status": "OK" if meters is not None else "ERROR"}


@router.get("/doctor")
def doctor(settings: Settings = Depends(get_settings)):
    maps_ok = bool(settings.GOOGLE_MAPS_API_KEY)
    store_ok = settings.LOCAL_STORE or credentials_configured()
    tech_base_ok = settings.tech_base is not None

    overall = all([maps_ok, store_ok, tech_base_ok])
    return {
        "status": "OK" if overall else "WARN",
        "maps": "OK" if maps_ok else "ERROR",
        "store": "LOCAL" if settings.LOCAL_STORE else ("OK" if store_ok else "ERROR"),
        "tech_base": "OK" if tech_base_ok else "ERROR",
        "cors": "OK" if settings.BACKEND_CORS_ORIGINS else "ERROR",
    }
