from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from painel.api.deps import get_service_report_manager
from painel.api.handlers import delete_record, get_or_404, load_items, submit_form
from painel.managers.service_reports import ServiceReportForm, ServiceReportManager
from painel.models import REPORT_STATUSES, ServiceReport

router = APIRouter(tags=["Relatorios"])


def _item(manager: ServiceReportManager, report: ServiceReport) -> dict:
    return {
        **report.model_dump(),
        "cliente": manager.customer_label(report.customer_id),
        "maquina": manager.machine_label(report.machine_id),
    }


@router.get("/relatorios")
async def list_relatorios(
    q: Optional[str] = None,
    manager: ServiceReportManager = Depends(get_service_report_manager),
):
    await load_items(manager)
    items = manager.filtered(q or "")
    return {
        "items": [_item(manager, r) for r in items],
        "total": len(items),
        "counts": manager.counts,
        "status": list(REPORT_STATUSES),
        "groups": [
            {
                "titulo": group.title,
                "clienteId": group.customer.id if group.customer else None,
                "relatorios": [_item(manager, r) for r in group.reports],
            }
            for group in manager.groups()
        ],
    }


@router.get("/relatorios/derivados")
async def derived_fields(
    cliente_id: str,
    contato: str = "",
    maquina_id: str = "",
    manager: ServiceReportManager = Depends(get_service_report_manager),
):
    """Contact and round-trip km for the customer picked in the form."""
    await load_items(manager)
    form = manager.open_form().model_copy(update={"contact": contato, "machine_id": maquina_id})
    form = await manager.select_customer(form, cliente_id)
    return {
        "contato": form.contact,
        "kmQuantidade": form.travel_km,
        "maquinaId": form.machine_id,
        "maquinas": [{"id": m.id, "label": m.label} for m in manager.machines_for(cliente_id)],
    }


@router.post("/relatorios", status_code=status.HTTP_201_CREATED)
async def create_relatorio(
    payload: ServiceReportForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: ServiceReportManager = Depends(get_service_report_manager),
):
    await load_items(manager)
    manager.open_form()
    record_id = await submit_form(manager, payload, form_token)
    return {"id": record_id}


@router.put("/relatorios/{relatorio_id}")
async def update_relatorio(
    relatorio_id: str,
    payload: ServiceReportForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: ServiceReportManager = Depends(get_service_report_manager),
):
    await load_items(manager)
    manager.open_form(get_or_404(manager, relatorio_id))
    await submit_form(manager, payload, form_token)
    return _item(manager, manager.find(relatorio_id))


@router.delete("/relatorios/{relatorio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_relatorio(
    relatorio_id: str,
    manager: ServiceReportManager = Depends(get_service_report_manager),
):
    await delete_record(manager, relatorio_id)
    return None
