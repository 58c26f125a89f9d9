from functools import lru_cache

from fastapi import Depends

from painel.core.config import Settings, get_settings
from painel.core.firebase import get_firestore_client
from painel.core.session import SessionContext, get_session_context
from painel.gateway.base import DocumentGateway
from painel.gateway.firestore import FirestoreGateway
from painel.gateway.memory import MemoryGateway
from painel.managers.customers import CustomerManager
from painel.managers.inventory import PaintManager, SolventManager
from painel.managers.machines import MachineManager
from painel.managers.service_reports import ServiceReportManager
from painel.services.distance import DistanceLookup, GoogleDistanceLookup
from painel.services.geocoding import AddressLookup, GoogleAddressLookup


@lru_cache
def get_gateway() -> DocumentGateway:
    settings = get_settings()
    if settings.LOCAL_STORE:
        return MemoryGateway()
    return FirestoreGateway(get_firestore_client())


def get_address_lookup(settings: Settings = Depends(get_settings)) -> AddressLookup:
    return GoogleAddressLookup(settings.GOOGLE_MAPS_API_KEY, timeout=settings.MAPS_TIMEOUT_SECONDS)


def get_distance_lookup(settings: Settings = Depends(get_settings)) -> DistanceLookup:
    return GoogleDistanceLookup(settings.GOOGLE_MAPS_API_KEY, timeout=settings.MAPS_TIMEOUT_SECONDS)


def get_customer_manager(
    gateway: DocumentGateway = Depends(get_gateway),
    address_lookup: AddressLookup = Depends(get_address_lookup),
    settings: Settings = Depends(get_settings),
) -> CustomerManager:
    return CustomerManager(gateway, settings.COLLECTION_CUSTOMERS, address_lookup=address_lookup)


def get_machine_manager(
    gateway: DocumentGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> MachineManager:
    return MachineManager(gateway, settings.COLLECTION_MACHINES, settings.COLLECTION_CUSTOMERS)


def get_service_report_manager(
    gateway: DocumentGateway = Depends(get_gateway),
    distance_lookup: DistanceLookup = Depends(get_distance_lookup),
    session: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_settings),
) -> ServiceReportManager:
    return ServiceReportManager(
        gateway,
        settings.COLLECTION_SERVICE_REPORTS,
        settings.COLLECTION_CUSTOMERS,
        settings.COLLECTION_MACHINES,
        session=session,
        distance_lookup=distance_lookup,
        tech_base=settings.tech_base,
    )


def get_paint_manager(
    gateway: DocumentGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> PaintManager:
    return PaintManager(gateway, settings.COLLECTION_PAINTS)


def get_solvent_manager(
    gateway: DocumentGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> SolventManager:
    return SolventManager(gateway, settings.COLLECTION_SOLVENTS)
