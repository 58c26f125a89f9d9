from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from painel.api.deps import get_machine_manager
from painel.api.handlers import delete_record, get_or_404, load_items, submit_form
from painel.managers.machines import MachineForm, MachineManager
from painel.models import Machine

router = APIRouter(tags=["Maquinas"])


def _item(manager: MachineManager, machine: Machine) -> dict:
    return {
        **machine.model_dump(),
        "cliente": manager.customer_label(machine.customer_id),
        "orphan": machine.is_orphan,
    }


@router.get("/maquinas")
async def list_maquinas(
    q: Optional[str] = None,
    manager: MachineManager = Depends(get_machine_manager),
):
    await load_items(manager)
    items = manager.filtered(q or "")
    return {
        "items": [_item(manager, m) for m in items],
        "total": len(items),
        "orphans": manager.orphan_count,
    }


@router.post("/maquinas", status_code=status.HTTP_201_CREATED)
async def create_maquina(
    payload: MachineForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: MachineManager = Depends(get_machine_manager),
):
    manager.open_form()
    record_id = await submit_form(manager, payload, form_token)
    return {"id": record_id}


@router.put("/maquinas/{maquina_id}")
async def update_maquina(
    maquina_id: str,
    payload: MachineForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: MachineManager = Depends(get_machine_manager),
):
    await load_items(manager)
    manager.open_form(get_or_404(manager, maquina_id))
    await submit_form(manager, payload, form_token)
    return _item(manager, manager.find(maquina_id))


@router.delete("/maquinas/{maquina_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maquina(
    maquina_id: str,
    manager: MachineManager = Depends(get_machine_manager),
):
    await delete_record(manager, maquina_id)
    return None
