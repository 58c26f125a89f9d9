from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from painel.api.deps import get_solvent_manager
from painel.api.handlers import delete_record, get_or_404, load_items, submit_form
from painel.managers.inventory import SolventForm, SolventManager

router = APIRouter(tags=["Solventes"])


@router.get("/solventes")
async def list_solventes(
    q: Optional[str] = None,
    manager: SolventManager = Depends(get_solvent_manager),
):
    await load_items(manager)
    items = manager.filtered(q or "")
    return {"items": items, "total": len(items)}


@router.post("/solventes", status_code=status.HTTP_201_CREATED)
async def save_solvente(
    payload: SolventForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: SolventManager = Depends(get_solvent_manager),
):
    manager.open_form()
    code = await submit_form(manager, payload, form_token)
    return {"id": code}


@router.put("/solventes/{codigo}")
async def update_solvente(
    codigo: str,
    payload: SolventForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: SolventManager = Depends(get_solvent_manager),
):
    await load_items(manager)
    manager.open_form(get_or_404(manager, codigo))
    await submit_form(manager, payload, form_token)
    return manager.find(codigo)


@router.delete("/solventes/{codigo}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_solvente(
    codigo: str,
    manager: SolventManager = Depends(get_solvent_manager),
):
    await delete_record(manager, codigo)
    return None
