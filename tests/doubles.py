from typing import Optional

from painel.gateway.base import GatewayError
from painel.gateway.memory import MemoryGateway
from painel.services.geocoding import AddressSuggestion, StructuredAddress


class FlakyGateway(MemoryGateway):
    """Memory store whose reads or writes can be switched off."""

    def __init__(self, seed=None, fail_reads: bool = False, fail_writes: bool = False) -> None:
        super().__init__(seed)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = 0

    def _check_write(self) -> None:
        if self.fail_writes:
            raise GatewayError("permission-denied")
        self.writes += 1

    async def list(self, collection, order_by=None):
        if self.fail_reads:
            raise GatewayError("unavailable")
        return await super().list(collection, order_by)

    async def list_group(self, collection):
        if self.fail_reads:
            raise GatewayError("unavailable")
        return await super().list_group(collection)

    async def create(self, collection, fields):
        self._check_write()
        return await super().create(collection, fields)

    async def set(self, collection, doc_id, fields):
        self._check_write()
        await super().set(collection, doc_id, fields)

    async def replace_at(self, path, fields):
        self._check_write()
        await super().replace_at(path, fields)

    async def delete_at(self, path):
        self._check_write()
        await super().delete_at(path)


class FakeDistanceLookup:
    def __init__(self, meters: Optional[float] = None, error: Optional[Exception] = None, configured: bool = True):
        self.meters = meters
        self.error = error
        self.configured = configured
        self.calls = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def driving_distance_meters(self, origin, destination):
        self.calls.append((origin, destination))
        if self.error is not None:
            raise self.error
        return self.meters


class FakeAddressLookup:
    def __init__(
        self,
        configured: bool = False,
        suggestions=(),
        place: Optional[StructuredAddress] = None,
        error: Optional[Exception] = None,
    ):
        self.configured = configured
        self.suggestions = [AddressSuggestion(place_id=p, description=d) for p, d in suggestions]
        self.place = place
        self.error = error
        self.geocoded = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def suggest(self, text):
        if self.error is not None:
            raise self.error
        return [s for s in self.suggestions if text.lower() in s.description.lower()]

    async def details(self, place_id):
        if self.error is not None:
            raise self.error
        return self.place

    async def geocode(self, address):
        self.geocoded.append(address)
        if self.error is not None:
            raise self.error
        return self.place
