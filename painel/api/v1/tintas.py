from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from painel.api.deps import get_paint_manager
from painel.api.handlers import delete_record, get_or_404, load_items, submit_form
from painel.managers.inventory import PaintForm, PaintManager

router = APIRouter(tags=["Tintas"])


@router.get("/tintas")
async def list_tintas(
    q: Optional[str] = None,
    manager: PaintManager = Depends(get_paint_manager),
):
    await load_items(manager)
    items = manager.filtered(q or "")
    return {"items": items, "total": len(items)}


@router.post("/tintas", status_code=status.HTTP_201_CREATED)
async def save_tinta(
    payload: PaintForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: PaintManager = Depends(get_paint_manager),
):
    manager.open_form()
    code = await submit_form(manager, payload, form_token)
    return {"id": code}


@router.put("/tintas/{codigo}")
async def update_tinta(
    codigo: str,
    payload: PaintForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: PaintManager = Depends(get_paint_manager),
):
    await load_items(manager)
    manager.open_form(get_or_404(manager, codigo))
    await submit_form(manager, payload, form_token)
    return manager.find(codigo)


@router.delete("/tintas/{codigo}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tinta(
    codigo: str,
    manager: PaintManager = Depends(get_paint_manager),
):
    await delete_record(manager, codigo)
    return None
