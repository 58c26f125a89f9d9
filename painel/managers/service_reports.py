import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from painel.codecs import customers as customer_codec
from painel.codecs import machines as machine_codec
from painel.codecs import service_reports as codec
from painel.core.errors import InvalidFormError
from painel.core.session import SessionContext
from painel.gateway.base import Document, DocumentGateway, GatewayError, document_path
from painel.managers.base import EntityManager, SubmitGuard, utcnow
from painel.models import (
    DEFAULT_REPORT_STATUS,
    REPORT_STATUSES,
    Customer,
    Machine,
    ServiceReport,
    short_id,
)
from painel.services.distance import DistanceLookup, DistanceLookupError, Point, round_trip_km

logger = logging.getLogger("painel.service_reports")

UNASSIGNED_TITLE = "[Sem Cliente]"


class ServiceReportForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_id: str = Field("", min_length=1, validate_default=True)
    machine_id: str = ""
    title: str = Field("", min_length=1, validate_default=True)
    description: str = Field("", min_length=1, validate_default=True)
    contact: str = ""
    status: str = DEFAULT_REPORT_STATUS
    service_date: Optional[date] = None
    next_preventive_date: Optional[date] = None
    hours_to_next_preventive: Optional[int] = None
    hourly_rate: Optional[float] = None
    travel_km: Optional[float] = None
    start_time: str = ""
    end_time: str = ""
    notes: str = ""

    @field_validator(
        "service_date",
        "next_preventive_date",
        "hours_to_next_preventive",
        "hourly_rate",
        "travel_km",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("status")
    @classmethod
    def _blank_status(cls, value: str) -> str:
        return value or DEFAULT_REPORT_STATUS


@dataclass
class ReportGroup:
    title: str
    customer: Optional[Customer] = None
    reports: list[ServiceReport] = field(default_factory=list)

    @property
    def unassigned(self) -> bool:
        return self.customer is None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


class ServiceReportManager(EntityManager[ServiceReport, ServiceReportForm]):
    label = "relatorio"
    plural = "relatorios"
    search_fields = ("title", "description")
    form_class = ServiceReportForm

    def __init__(
        self,
        gateway: DocumentGateway,
        collection: str,
        customers_collection: str,
        machines_collection: str,
        session: SessionContext,
        distance_lookup: Optional[DistanceLookup] = None,
        tech_base: Optional[Point] = None,
        guard: Optional[SubmitGuard] = None,
    ) -> None:
        super().__init__(gateway, collection, guard)
        self.customers_collection = customers_collection
        self.machines_collection = machines_collection
        self.session = session
        self.distance_lookup = distance_lookup
        self.tech_base = tech_base
        self.customers: list[Customer] = []
        self.machines: list[Machine] = []

    def decode(self, doc: Document) -> ServiceReport:
        return codec.decode(doc)

    def encode(self, record: ServiceReport) -> dict:
        return codec.encode(record)

    async def _report_documents(self) -> list[Document]:
        docs = await self.gateway.list(self.collection)
        if docs:
            return docs
        # The mobile app may keep reports nested under other documents.
        try:
            nested = await self.gateway.list_group(self.collection)
        except GatewayError as exc:
            logger.warning("collection group %s failed: %s", self.collection, exc)
            return docs
        if nested:
            logger.info("relatorios lidos via collection group count=%s", len(nested))
            return nested
        return docs

    async def fetch(self) -> list[ServiceReport]:
        reports = [codec.decode(doc) for doc in await self._report_documents()]
        customer_docs = await self.gateway.list(self.customers_collection)
        machine_docs = await self.gateway.list(self.machines_collection)
        self.customers = sorted(
            (customer_codec.decode(doc) for doc in customer_docs), key=lambda c: c.name.lower()
        )
        self.machines = [machine_codec.decode(doc) for doc in machine_docs]
        logger.info(
            "relatorios=%s clientes=%s maquinas=%s",
            len(reports),
            len(self.customers),
            len(self.machines),
        )
        return reports

    @property
    def counts(self) -> dict[str, int]:
        return {
            "relatorios": len(self.items),
            "clientes": len(self.customers),
            "maquinas": len(self.machines),
        }

    def find_customer(self, customer_id: str) -> Optional[Customer]:
        for customer in self.customers:
            if customer.id == customer_id:
                return customer
        return None

    def customer_label(self, customer_id: str) -> str:
        if not customer_id:
            return UNASSIGNED_TITLE
        customer = self.find_customer(customer_id)
        return customer.name if customer else short_id(customer_id)

    def machine_label(self, machine_id: str) -> str:
        if not machine_id:
            return "-"
        for machine in self.machines:
            if machine.id == machine_id:
                return machine.label
        return short_id(machine_id)

    def machines_for(self, customer_id: str) -> list[Machine]:
        if not customer_id:
            return []
        return [m for m in self.machines if m.customer_id == customer_id]

    def groups(self, term: Optional[str] = None) -> list[ReportGroup]:
        """One group per customer, then the reports no customer claims."""
        reports = self.filtered(term)
        known = {c.id for c in self.customers}
        groups = [
            ReportGroup(
                title=customer.name or "[Cliente sem nome]",
                customer=customer,
                reports=[r for r in reports if r.customer_id == customer.id],
            )
            for customer in self.customers
        ]
        unassigned = [r for r in reports if r.customer_id not in known]
        if unassigned:
            groups.append(ReportGroup(title=UNASSIGNED_TITLE, reports=unassigned))
        return groups

    async def estimate_travel_km(self, customer: Customer) -> Optional[int]:
        destination = customer.coordinates
        lookup = self.distance_lookup
        if destination is None or self.tech_base is None or not (lookup and lookup.is_configured):
            return None
        try:
            meters = await lookup.driving_distance_meters(self.tech_base, destination)
        except DistanceLookupError as exc:
            logger.warning("erro ao calcular distancia cliente=%s: %s", customer.id, exc)
            return None
        if meters is None:
            return None
        return round_trip_km(meters)

    async def select_customer(self, form: ServiceReportForm, customer_id: str) -> ServiceReportForm:
        updates: dict = {"customer_id": customer_id}
        if form.machine_id and form.machine_id not in {m.id for m in self.machines_for(customer_id)}:
            updates["machine_id"] = ""
        customer = self.find_customer(customer_id)
        if customer is not None:
            if not form.contact:
                updates["contact"] = customer.phone or customer.mobile
            km = await self.estimate_travel_km(customer)
            if km is not None:
                updates["travel_km"] = km
        self.form = form.model_copy(update=updates)
        return self.form

    async def open_form_for_customer(self, customer_id: str) -> ServiceReportForm:
        form = self.open_form()
        customer = self.find_customer(customer_id)
        if customer is not None:
            form = form.model_copy(update={"title": customer.name})
        return await self.select_customer(form, customer_id)

    def form_from_record(self, record: ServiceReport) -> ServiceReportForm:
        return ServiceReportForm.model_construct(
            customer_id=record.customer_id,
            machine_id=record.machine_id,
            title=record.title,
            description=record.description,
            contact=record.contact,
            status=record.status,
            service_date=record.service_date.date() if record.service_date else None,
            next_preventive_date=_parse_date(record.next_preventive_date),
            hours_to_next_preventive=record.hours_to_next_preventive,
            hourly_rate=record.hourly_rate,
            travel_km=record.travel_km,
            start_time=record.start_time,
            end_time=record.end_time,
            notes=record.notes,
        )

    def _service_date(self, form: ServiceReportForm) -> datetime:
        if form.service_date:
            return datetime.combine(form.service_date, time(), tzinfo=timezone.utc)
        if self.editing is not None and self.editing.service_date:
            return self.editing.service_date
        return utcnow()

    async def build_record(self, form: ServiceReportForm) -> ServiceReport:
        if form.machine_id and form.machine_id not in {m.id for m in self.machines_for(form.customer_id)}:
            raise InvalidFormError("A maquina selecionada nao pertence ao cliente")
        kept = self.editing is not None and form.status == self.editing.status
        if form.status not in REPORT_STATUSES and not kept:
            raise InvalidFormError(f"Status invalido: {form.status}")
        return ServiceReport(
            id=self.editing.id if self.editing else "",
            path=self.editing.path if self.editing else None,
            customer_id=form.customer_id,
            machine_id=form.machine_id,
            title=form.title,
            description=form.description,
            contact=form.contact,
            status=form.status,
            technician_id=self.session.uid,
            technician_name=self.session.label,
            service_date=self._service_date(form),
            next_preventive_date=form.next_preventive_date.isoformat() if form.next_preventive_date else None,
            hours_to_next_preventive=form.hours_to_next_preventive,
            hourly_rate=form.hourly_rate,
            travel_km=form.travel_km,
            start_time=form.start_time,
            end_time=form.end_time,
            notes=form.notes,
        )

    def _path(self, record: ServiceReport) -> str:
        return record.path or document_path(self.collection, record.id)

    async def write(self, record: ServiceReport) -> str:
        fields = self.encode(record)
        if self.editing is not None:
            await self.gateway.replace_at(self._path(self.editing), fields)
            return self.editing.id
        return await self.gateway.create(self.collection, {**fields, "created_at": utcnow()})

    async def remove(self, record: ServiceReport) -> None:
        await self.gateway.delete_at(self._path(record))
