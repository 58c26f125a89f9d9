import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from painel.codecs import customers as customer_codec
from painel.codecs import machines as codec
from painel.gateway.base import Document, DocumentGateway
from painel.managers.base import EntityManager, SubmitGuard
from painel.models import Customer, Machine, short_id

logger = logging.getLogger("painel.machines")


class MachineForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_id: str = ""
    manufacturer: str = Field("", min_length=1, validate_default=True)
    model: str = Field("", min_length=1, validate_default=True)
    serial_number: str = Field("", min_length=1, validate_default=True)
    identification: str = ""
    configuration_code: str = ""
    manufacture_year: Optional[int] = None
    active: bool = True

    @field_validator("manufacture_year", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MachineManager(EntityManager[Machine, MachineForm]):
    label = "maquina"
    plural = "maquinas"
    order_by = "modelo"
    search_fields = ("model", "manufacturer", "serial_number")
    form_class = MachineForm

    def __init__(
        self,
        gateway: DocumentGateway,
        collection: str,
        customers_collection: str,
        guard: Optional[SubmitGuard] = None,
    ) -> None:
        super().__init__(gateway, collection, guard)
        self.customers_collection = customers_collection
        self.customers: list[Customer] = []

    def decode(self, doc: Document) -> Machine:
        return codec.decode(doc)

    def encode(self, record: Machine) -> dict:
        return codec.encode(record)

    async def fetch(self) -> list[Machine]:
        machines = [codec.decode(doc) for doc in await self.gateway.list(self.collection, self.order_by)]
        customer_docs = await self.gateway.list(self.customers_collection)
        self.customers = sorted(
            (customer_codec.decode(doc) for doc in customer_docs), key=lambda c: c.name.lower()
        )
        orphans = [m for m in machines if m.is_orphan]
        if orphans:
            logger.warning(
                "%s maquina(s) sem cliente: %s",
                len(orphans),
                ", ".join(f"{m.id} ({m.label or '-'} / {m.serial_number or '-'})" for m in orphans),
            )
        return machines

    @property
    def orphans(self) -> list[Machine]:
        return [m for m in self.items if m.is_orphan]

    @property
    def orphan_count(self) -> int:
        return len(self.orphans)

    def customer_label(self, customer_id: str) -> str:
        if not customer_id:
            return "[Sem Cliente]"
        for customer in self.customers:
            if customer.id == customer_id:
                return customer.name
        logger.warning("cliente nao encontrado id=%s", customer_id)
        return short_id(customer_id)

    def form_from_record(self, record: Machine) -> MachineForm:
        return MachineForm.model_construct(
            customer_id=record.customer_id,
            manufacturer=record.manufacturer,
            model=record.model,
            serial_number=record.serial_number,
            identification=record.identification,
            configuration_code=record.configuration_code,
            manufacture_year=record.manufacture_year,
            active=record.active,
        )

    async def build_record(self, form: MachineForm) -> Machine:
        return Machine(
            id=self.editing.id if self.editing else "",
            customer_id=form.customer_id,
            manufacturer=form.manufacturer,
            model=form.model,
            serial_number=form.serial_number,
            identification=form.identification,
            configuration_code=form.configuration_code,
            manufacture_year=form.manufacture_year,
            active=form.active,
        )
