import asyncio
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from doubles import FakeDistanceLookup
from painel.core.errors import InvalidFormError
from painel.core.session import SessionContext
from painel.gateway.memory import MemoryGateway
from painel.managers.base import SubmitGuard
from painel.managers.service_reports import ServiceReportForm, ServiceReportManager
from painel.services.distance import DistanceLookupError, round_trip_km

SESSION = SessionContext(uid="tec-1", display_name="Ana Tecnica")
BASE = (-23.55, -46.63)


def run(coro):
    return asyncio.run(coro)


def _manager(gateway, distance_lookup=None, tech_base=BASE):
    return ServiceReportManager(
        gateway,
        "relatorios",
        "clientes",
        "maquinas",
        session=SESSION,
        distance_lookup=distance_lookup,
        tech_base=tech_base,
        guard=SubmitGuard(),
    )


def _acme_store():
    return MemoryGateway(
        {
            "clientes": {
                "c2": {"nome": "Beta"},
                "c1": {"nome": "Acme", "telefone": "1133334444", "latitude": -23.0, "longitude": -46.0},
            },
            "maquinas": {
                "m1": {"cliente_id": "c1", "fabricante": "Fab", "modelo": "Model"},
                "m2": {"clienteId": "c2", "fabricante": "Outra", "modelo": "Z"},
            },
            "relatorios": {
                "r1": {"clienteId": "c1", "maquinaId": "m1", "titulo": "Revisao", "descricao": "ok"},
                "r2": {"cliente_id": "", "titulo": "Sem dono", "descricao": "x"},
                "r3": {"clienteId": "fantasma", "titulo": "Perdido", "descricao": "y"},
            },
        }
    )


def test_groups_by_customer_with_unassigned_last():
    manager = _manager(_acme_store())
    run(manager.load())
    groups = manager.groups()

    assert [g.title for g in groups] == ["Acme", "Beta", "[Sem Cliente]"]
    assert [r.id for r in groups[0].reports] == ["r1"]
    assert groups[1].reports == []
    assert sorted(r.id for r in groups[2].reports) == ["r2", "r3"]
    assert groups[2].unassigned
    assert manager.machine_label("m1") == "Fab Model"
    assert manager.counts == {"relatorios": 3, "clientes": 2, "maquinas": 2}


def test_groups_follow_search():
    manager = _manager(_acme_store())
    run(manager.load())
    groups = manager.groups("revisao")
    assert [len(g.reports) for g in groups] == [1, 0]


def test_machines_for_customer():
    manager = _manager(_acme_store())
    run(manager.load())
    assert [m.id for m in manager.machines_for("c1")] == ["m1"]
    assert manager.machines_for("") == []


def test_nested_reports_are_read_edited_and_deleted_in_place():
    gateway = MemoryGateway(
        {
            "clientes": {"c1": {"nome": "Acme"}},
            "clientes/c1/relatorios": {"r9": {"clienteId": "c1", "titulo": "Antigo", "descricao": "x"}},
        }
    )
    manager = _manager(gateway)
    run(manager.load())

    assert [r.id for r in manager.items] == ["r9"]
    assert manager.items[0].path == "clientes/c1/relatorios/r9"

    manager.open_form(manager.find("r9"))
    run(manager.submit(ServiceReportForm(customer_id="c1", title="Novo", description="x")))
    assert gateway.raw("clientes/c1/relatorios", "r9")["titulo"] == "Novo"
    assert gateway.raw("relatorios", "r9") is None

    run(manager.delete("r9", confirmed=True))
    assert gateway.raw("clientes/c1/relatorios", "r9") is None


def test_round_trip_km():
    assert round_trip_km(10000) == 24
    assert round_trip_km(0) == 0
    assert round_trip_km(10417) == 25


def test_select_customer_fills_contact_and_km():
    lookup = FakeDistanceLookup(meters=10000)
    manager = _manager(_acme_store(), distance_lookup=lookup)
    run(manager.load())
    form = run(manager.open_form_for_customer("c1"))

    assert form.customer_id == "c1"
    assert form.title == "Acme"
    assert form.contact == "1133334444"
    assert form.travel_km == 24
    assert lookup.calls == [(BASE, (-23.0, -46.0))]


def test_select_customer_keeps_typed_contact_and_drops_foreign_machine():
    manager = _manager(_acme_store(), distance_lookup=FakeDistanceLookup(meters=1000))
    run(manager.load())
    form = manager.open_form().model_copy(update={"contact": "Joao", "machine_id": "m2"})
    form = run(manager.select_customer(form, "c1"))
    assert form.contact == "Joao"
    assert form.machine_id == ""


def test_distance_failure_is_silent():
    lookup = FakeDistanceLookup(error=DistanceLookupError("OVER_QUERY_LIMIT"))
    manager = _manager(_acme_store(), distance_lookup=lookup)
    run(manager.load())
    form = run(manager.select_customer(manager.open_form(), "c1"))
    assert form.travel_km is None
    assert form.contact == "1133334444"


def test_no_distance_without_base_or_coordinates():
    lookup = FakeDistanceLookup(meters=10000)
    manager = _manager(_acme_store(), distance_lookup=lookup, tech_base=None)
    run(manager.load())
    run(manager.select_customer(manager.open_form(), "c1"))

    manager.tech_base = BASE
    run(manager.select_customer(manager.open_form(), "c2"))
    assert lookup.calls == []


def test_technician_comes_from_session():
    gateway = _acme_store()
    manager = _manager(gateway)
    run(manager.load())
    manager.open_form()
    new_id = run(
        manager.submit(
            ServiceReportForm(
                customer_id="c1",
                machine_id="m1",
                title="Visita",
                description="Limpeza",
                service_date=date(2024, 5, 2),
                hourly_rate="150",
            )
        )
    )
    raw = gateway.raw("relatorios", new_id)
    assert raw["tecnicoId"] == "tec-1"
    assert raw["tecnico_id"] == "tec-1"
    assert raw["tecnicoNome"] == "Ana Tecnica"
    assert raw["dataServico"] == datetime(2024, 5, 2, tzinfo=timezone.utc)
    assert raw["valorHoraTecnica"] == 150.0
    assert raw["created_at"] is not None


def test_edit_without_date_keeps_stored_service_date():
    stored = datetime(2023, 1, 10, tzinfo=timezone.utc)
    gateway = MemoryGateway(
        {
            "clientes": {"c1": {"nome": "Acme"}},
            "relatorios": {"r1": {"clienteId": "c1", "titulo": "A", "descricao": "B", "dataServico": stored}},
        }
    )
    manager = _manager(gateway)
    run(manager.load())
    manager.open_form(manager.find("r1"))
    run(manager.submit(ServiceReportForm(customer_id="c1", title="A2", description="B")))
    assert gateway.raw("relatorios", "r1")["data_servico"] == stored


def test_machine_must_belong_to_customer():
    gateway = _acme_store()
    manager = _manager(gateway)
    run(manager.load())
    manager.open_form()
    with pytest.raises(InvalidFormError):
        run(manager.submit(ServiceReportForm(customer_id="c1", machine_id="m2", title="T", description="D")))
    assert manager.form_open is True
    assert len(run(gateway.list("relatorios"))) == 3


def test_form_requires_customer():
    with pytest.raises(ValidationError):
        ServiceReportForm(customer_id="", title="T", description="D")
    assert ServiceReportForm(customer_id="c1", title="T", description="D", status="").status == "RASCUNHO"


def test_unknown_status_rejected_on_new_report():
    gateway = _acme_store()
    manager = _manager(gateway)
    run(manager.load())
    manager.open_form()
    with pytest.raises(InvalidFormError):
        run(manager.submit(ServiceReportForm(customer_id="c1", title="T", description="D", status="ARQUIVADO")))
    assert len(run(gateway.list("relatorios"))) == 3


def test_foreign_status_kept_on_edit():
    gateway = _acme_store()
    stored = {"clienteId": "c1", "titulo": "App", "descricao": "x", "status": "AGUARDANDO PECA"}
    run(gateway.set("relatorios", "r5", stored))
    manager = _manager(gateway)
    run(manager.load())
    manager.open_form(manager.find("r5"))
    form = ServiceReportForm.model_validate({**manager.form.model_dump(), "title": "App 2"})
    run(manager.submit(form))

    raw = gateway.raw("relatorios", "r5")
    assert raw["status"] == "AGUARDANDO PECA"
    assert raw["titulo"] == "App 2"

    manager.open_form(manager.find("r5"))
    changed = ServiceReportForm.model_validate({**manager.form.model_dump(), "status": "OUTRO"})
    with pytest.raises(InvalidFormError):
        run(manager.submit(changed))
