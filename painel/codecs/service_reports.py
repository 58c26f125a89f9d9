"""Service report documents: camelCase (mobile) is preferred on read, and
every write carries both camelCase and snake_case keys."""

from typing import Any

from painel.codecs.fields import (
    as_date_text,
    as_datetime,
    as_float,
    as_int,
    as_text,
    first_present,
)
from painel.gateway.base import Document
from painel.models import DEFAULT_REPORT_STATUS, ServiceReport

CAMEL_KEYS = {
    "customer_id": "clienteId",
    "contact": "contato",
    "machine_id": "maquinaId",
    "title": "titulo",
    "description": "descricao",
    "next_preventive_date": "dataProximaManutencaoPreventiva",
    "hours_to_next_preventive": "horasAteProximaManutencaoPreventiva",
    "hourly_rate": "valorHoraTecnica",
    "travel_km": "kmQuantidade",
    "status": "status",
    "technician_id": "tecnicoId",
    "technician_name": "tecnicoNome",
    "start_time": "horaInicio",
    "end_time": "horaTermino",
    "notes": "observacoes",
    "service_date": "dataServico",
}

SNAKE_KEYS = {
    "customer_id": "cliente_id",
    "contact": "contato",
    "machine_id": "maquina_id",
    "title": "titulo",
    "description": "descricao",
    "next_preventive_date": "data_proxima_manutencao_preventiva",
    "hours_to_next_preventive": "horas_ate_proxima_manutencao_preventiva",
    "hourly_rate": "valor_hora_tecnica",
    "travel_km": "km_quantidade",
    "status": "status",
    "technician_id": "tecnico_id",
    "technician_name": "tecnico_nome",
    "start_time": "hora_inicio",
    "end_time": "hora_termino",
    "notes": "observacoes",
    "service_date": "data_servico",
}


def _read(data: dict[str, Any], field: str, *extra: str, default: Any = None) -> Any:
    return first_present(data, CAMEL_KEYS[field], SNAKE_KEYS[field], *extra, default=default, skip_empty=True)


def decode(doc: Document) -> ServiceReport:
    data = doc.data
    return ServiceReport(
        id=doc.id,
        path=doc.path,
        customer_id=as_text(_read(data, "customer_id", default="")),
        machine_id=as_text(_read(data, "machine_id", default="")),
        title=as_text(_read(data, "title", default="")),
        description=as_text(_read(data, "description", default="")),
        contact=as_text(_read(data, "contact", default="")),
        status=as_text(_read(data, "status", default=DEFAULT_REPORT_STATUS)),
        technician_id=as_text(_read(data, "technician_id", default="")),
        technician_name=as_text(_read(data, "technician_name", default="")),
        service_date=as_datetime(_read(data, "service_date", "created_at")),
        next_preventive_date=as_date_text(_read(data, "next_preventive_date")),
        hours_to_next_preventive=as_int(_read(data, "hours_to_next_preventive")),
        hourly_rate=as_float(_read(data, "hourly_rate")),
        travel_km=as_float(_read(data, "travel_km")),
        start_time=as_text(_read(data, "start_time", default="")),
        end_time=as_text(_read(data, "end_time", default="")),
        notes=as_text(_read(data, "notes", default="")),
        created_at=as_datetime(data.get("created_at")),
    )


def encode(report: ServiceReport) -> dict[str, Any]:
    values = {
        "customer_id": report.customer_id,
        "contact": report.contact or "",
        "machine_id": report.machine_id or "",
        "title": report.title,
        "description": report.description,
        "next_preventive_date": report.next_preventive_date or None,
        "hours_to_next_preventive": report.hours_to_next_preventive,
        "hourly_rate": report.hourly_rate,
        "travel_km": report.travel_km,
        "status": report.status,
        "technician_id": report.technician_id,
        "technician_name": report.technician_name,
        "start_time": report.start_time or "",
        "end_time": report.end_time or "",
        "notes": report.notes or "",
        "service_date": report.service_date,
    }
    camel = {CAMEL_KEYS[field]: value for field, value in values.items()}
    snake = {SNAKE_KEYS[field]: value for field, value in values.items()}
    return {**camel, **snake}
