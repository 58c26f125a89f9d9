"""What each tab shows: table columns, row cells and form fields."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel

from painel.api import deps
from painel.core.config import Settings
from painel.core.session import SessionContext
from painel.gateway.base import DocumentGateway
from painel.managers.base import EntityManager
from painel.managers.customers import CustomerManager
from painel.managers.inventory import PaintManager, SolventManager
from painel.managers.machines import MachineManager
from painel.managers.service_reports import ServiceReportManager
from painel.models import REPORT_STATUSES
from painel.services.distance import DistanceLookup
from painel.services.geocoding import AddressLookup


@dataclass
class FieldSpec:
    name: str
    label: str
    kind: str = "text"
    required: bool = False
    options: list[tuple[str, str]] = field(default_factory=list)
    readonly: bool = False
    placeholder: str = ""
    wide: bool = False


@dataclass
class Cell:
    text: str
    color: Optional[str] = None


def _dash(value: Any) -> str:
    return str(value) if value not in (None, "") else "-"


def format_date(value: Optional[datetime]) -> str:
    if not value:
        return "-"
    return value.strftime("%d/%m/%Y")


def form_values(form: Optional[BaseModel]) -> dict[str, Any]:
    if form is None:
        return {}
    values = {}
    for name in type(form).model_fields:
        value = getattr(form, name, None)
        if value is None:
            values[name] = ""
        elif isinstance(value, (date, datetime)):
            values[name] = value.isoformat()[:10]
        elif isinstance(value, float) and value.is_integer():
            values[name] = str(int(value))
        else:
            values[name] = value
    return values


class TabView:
    key = ""
    label = ""
    singular = ""
    headers: tuple[str, ...] = ()

    def __init__(self, manager: EntityManager) -> None:
        self.manager = manager

    def cells(self, record) -> list[Cell]:
        raise NotImplementedError

    def row_class(self, record) -> str:
        return ""

    def fields(self) -> list[FieldSpec]:
        raise NotImplementedError

    def banner(self) -> Optional[str]:
        return None

    def search_text(self, record) -> str:
        return " ".join(str(getattr(record, name, "") or "") for name in self.manager.search_fields).lower()


class CustomerView(TabView):
    key = "clientes"
    label = "Clientes"
    singular = "Cliente"
    headers = ("Nome", "Documento", "Telefone", "Email")
    manager: CustomerManager

    def cells(self, record) -> list[Cell]:
        return [
            Cell(record.name),
            Cell(_dash(record.document)),
            Cell(_dash(record.phone)),
            Cell(_dash(record.email)),
        ]

    def fields(self) -> list[FieldSpec]:
        autocomplete = self.manager.address_autocomplete_enabled
        return [
            FieldSpec("name", "Nome", required=True, wide=True),
            FieldSpec("document", "CPF/CNPJ"),
            FieldSpec("phone", "Telefone"),
            FieldSpec("email", "Email", kind="email", wide=True),
            FieldSpec(
                "address",
                "Endereco (Google)" if autocomplete else "Endereco",
                kind="address" if autocomplete else "text",
                placeholder="Digite a rua/avenida..." if autocomplete else "Configure GOOGLE_MAPS_API_KEY para autocompletar",
                wide=True,
            ),
            FieldSpec("number", "Numero"),
            FieldSpec("complement", "Complemento"),
            FieldSpec("city", "Cidade"),
            FieldSpec("state", "Estado"),
            FieldSpec("latitude", "Latitude", kind="hidden"),
            FieldSpec("longitude", "Longitude", kind="hidden"),
        ]


class MachineView(TabView):
    key = "maquinas"
    label = "Maquinas"
    singular = "Maquina"
    headers = ("Cliente", "Fabricante", "Modelo", "Numero de serie", "Ativa")
    manager: MachineManager

    def cells(self, record) -> list[Cell]:
        return [
            Cell(self.manager.customer_label(record.customer_id)),
            Cell(record.manufacturer),
            Cell(record.model),
            Cell(record.serial_number),
            Cell("Sim" if record.active else "Nao"),
        ]

    def row_class(self, record) -> str:
        return "orphan" if record.is_orphan else ""

    def banner(self) -> Optional[str]:
        count = self.manager.orphan_count
        if not count:
            return None
        return (
            f"Existem {count} maquina(s) sem cliente vinculado (destacadas em amarelo). "
            "Edite-as para associar um cliente."
        )

    def fields(self) -> list[FieldSpec]:
        customers = [("", "Selecione...")] + [(c.id, c.name) for c in self.manager.customers]
        return [
            FieldSpec("customer_id", "Cliente", kind="select", options=customers, wide=True),
            FieldSpec("manufacturer", "Fabricante", required=True),
            FieldSpec("model", "Modelo", required=True),
            FieldSpec("serial_number", "Numero de serie", required=True),
            FieldSpec("identification", "Identificacao"),
            FieldSpec("configuration_code", "Codigo de configuracao"),
            FieldSpec("manufacture_year", "Ano de fabricacao", kind="number"),
            FieldSpec("active", "Ativa", kind="checkbox"),
        ]


class ServiceReportView(TabView):
    key = "relatorios"
    label = "Relatorios"
    singular = "Relatorio"
    headers = ("Titulo", "Data", "Maquina", "Status")
    manager: ServiceReportManager

    def cells(self, record) -> list[Cell]:
        return [
            Cell(record.title or self.manager.customer_label(record.customer_id)),
            Cell(format_date(record.service_date or record.created_at)),
            Cell(self.manager.machine_label(record.machine_id)),
            Cell(record.status),
        ]

    def fields(self) -> list[FieldSpec]:
        customer_id = getattr(self.manager.form, "customer_id", "") or ""
        customers = [("", "Selecione...")] + [(c.id, c.name) for c in self.manager.customers]
        machines = [("", "Selecione...")] + [(m.id, m.label) for m in self.manager.machines_for(customer_id)]
        statuses = list(REPORT_STATUSES)
        current = getattr(self.manager.form, "status", "") or ""
        if current and current not in statuses:
            # label written by the mobile app, kept as is on edit
            statuses.append(current)
        return [
            FieldSpec("customer_id", "Cliente", kind="select", required=True, options=customers),
            FieldSpec("contact", "Contato"),
            FieldSpec("machine_id", "Maquina", kind="select", options=machines),
            FieldSpec("status", "Status", kind="select", options=[(s, s) for s in statuses]),
            FieldSpec("title", "Titulo", required=True, wide=True),
            FieldSpec("description", "Descricao", kind="textarea", required=True, wide=True),
            FieldSpec("service_date", "Data do servico", kind="date"),
            FieldSpec("next_preventive_date", "Data proxima manutencao preventiva", kind="date"),
            FieldSpec("hours_to_next_preventive", "Horas ate proxima preventiva", kind="number"),
            FieldSpec("start_time", "Hora inicio", kind="time"),
            FieldSpec("end_time", "Hora termino", kind="time"),
            FieldSpec("hourly_rate", "Valor hora tecnica (R$)", kind="number"),
            FieldSpec("travel_km", "Quantidade de KM", kind="number"),
            FieldSpec("notes", "Observacoes", kind="textarea", wide=True),
        ]

    def detail(self, record) -> dict[str, Any]:
        return {
            "titulo": record.title or "Relatorio",
            "campos": [
                ("Cliente", self.manager.customer_label(record.customer_id)),
                ("Maquina", self.manager.machine_label(record.machine_id)),
                ("Contato", _dash(record.contact)),
                ("Status", record.status),
                ("Data do servico", format_date(record.service_date or record.created_at)),
                ("Proxima preventiva", _dash(record.next_preventive_date)),
                ("Horas ate preventiva", _dash(record.hours_to_next_preventive)),
                ("Inicio", _dash(record.start_time)),
                ("Termino", _dash(record.end_time)),
                ("Valor hora (R$)", _dash(record.hourly_rate)),
                ("KM", _dash(record.travel_km)),
                ("Tecnico", _dash(record.technician_name)),
                ("Descricao", record.description),
                ("Observacoes", _dash(record.notes)),
            ],
        }


class PaintView(TabView):
    key = "tintas"
    label = "Tintas"
    singular = "Tinta"
    headers = ("Codigo", "Descricao", "Fabricante", "Cor")
    manager: PaintManager

    def cells(self, record) -> list[Cell]:
        return [
            Cell(record.code),
            Cell(_dash(record.description)),
            Cell(_dash(record.manufacturer)),
            Cell(_dash(record.color_hex), color=record.color_hex or None),
        ]

    def fields(self) -> list[FieldSpec]:
        return [
            FieldSpec("code", "Codigo", required=True, readonly=self.manager.editing is not None),
            FieldSpec("description", "Descricao"),
            FieldSpec("manufacturer", "Fabricante"),
            FieldSpec("color_hex", "Cor", kind="color"),
        ]


class SolventView(TabView):
    key = "solventes"
    label = "Solventes"
    singular = "Solvente"
    headers = ("Codigo", "Descricao", "Fabricante")
    manager: SolventManager

    def cells(self, record) -> list[Cell]:
        return [Cell(record.code), Cell(_dash(record.description)), Cell(_dash(record.manufacturer))]

    def fields(self) -> list[FieldSpec]:
        return [
            FieldSpec("code", "Codigo", required=True, readonly=self.manager.editing is not None),
            FieldSpec("description", "Descricao"),
            FieldSpec("manufacturer", "Fabricante"),
        ]


VIEWS: dict[str, type[TabView]] = {
    view.key: view for view in (CustomerView, MachineView, ServiceReportView, PaintView, SolventView)
}


def build_view(
    key: str,
    gateway: DocumentGateway,
    settings: Settings,
    session: SessionContext,
    address_lookup: AddressLookup,
    distance_lookup: DistanceLookup,
) -> TabView:
    if key == "clientes":
        manager = deps.get_customer_manager(gateway, address_lookup, settings)
    elif key == "maquinas":
        manager = deps.get_machine_manager(gateway, settings)
    elif key == "relatorios":
        manager = deps.get_service_report_manager(gateway, distance_lookup, session, settings)
    elif key == "tintas":
        manager = deps.get_paint_manager(gateway, settings)
    elif key == "solventes":
        manager = deps.get_solvent_manager(gateway, settings)
    else:
        raise KeyError(key)
    return VIEWS[key](manager)
