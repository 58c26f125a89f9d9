import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from painel.codecs import customers as codec
from painel.gateway.base import Document, DocumentGateway
from painel.managers.base import EntityManager, SubmitGuard
from painel.models import Customer
from painel.services.geocoding import AddressLookup, AddressLookupError

logger = logging.getLogger("painel.customers")


class CustomerForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field("", min_length=1, validate_default=True)
    document: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    number: str = ""
    complement: str = ""
    city: str = ""
    state: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _coordinates_pair(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Latitude e longitude devem ser informadas juntas")
        return self


class CustomerManager(EntityManager[Customer, CustomerForm]):
    label = "cliente"
    plural = "clientes"
    order_by = "nome"
    search_fields = ("name", "document")
    form_class = CustomerForm

    def __init__(
        self,
        gateway: DocumentGateway,
        collection: str,
        address_lookup: Optional[AddressLookup] = None,
        guard: Optional[SubmitGuard] = None,
    ) -> None:
        super().__init__(gateway, collection, guard)
        self.address_lookup = address_lookup

    @property
    def address_autocomplete_enabled(self) -> bool:
        return bool(self.address_lookup and self.address_lookup.is_configured)

    def decode(self, doc: Document) -> Customer:
        return codec.decode(doc)

    def encode(self, record: Customer) -> dict:
        return codec.encode(record)

    def form_from_record(self, record: Customer) -> CustomerForm:
        return CustomerForm.model_construct(
            name=record.name,
            document=record.document,
            phone=record.phone or record.mobile,
            email=record.email,
            address=record.address,
            number=record.number,
            complement=record.complement,
            city=record.city,
            state=record.state,
            latitude=record.latitude,
            longitude=record.longitude,
        )

    async def build_record(self, form: CustomerForm) -> Customer:
        customer = Customer(
            id=self.editing.id if self.editing else "",
            name=form.name,
            document=form.document,
            phone=form.phone,
            mobile=form.phone,
            email=form.email,
            address=form.address,
            number=form.number,
            complement=form.complement,
            city=form.city,
            state=form.state,
            latitude=form.latitude,
            longitude=form.longitude,
        )
        if customer.address and customer.coordinates is None and self.address_autocomplete_enabled:
            await self._geocode(customer)
        return customer

    async def _geocode(self, customer: Customer) -> None:
        try:
            found = await self.address_lookup.geocode(customer.address)
        except AddressLookupError as exc:
            logger.warning("geocode failed customer=%s error=%s", customer.name, exc)
            return
        if not found or found.latitude is None or found.longitude is None:
            return
        customer.latitude = found.latitude
        customer.longitude = found.longitude
        customer.city = customer.city or (found.city or "")
        customer.state = customer.state or (found.state or "")
