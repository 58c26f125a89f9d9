from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from painel.api.deps import get_customer_manager
from painel.api.handlers import delete_record, get_or_404, load_items, submit_form
from painel.managers.customers import CustomerForm, CustomerManager

router = APIRouter(tags=["Clientes"])


@router.get("/clientes")
async def list_clientes(
    q: Optional[str] = None,
    manager: CustomerManager = Depends(get_customer_manager),
):
    await load_items(manager)
    items = manager.filtered(q or "")
    return {"items": items, "total": len(items)}


@router.post("/clientes", status_code=status.HTTP_201_CREATED)
async def create_cliente(
    payload: CustomerForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: CustomerManager = Depends(get_customer_manager),
):
    manager.open_form()
    record_id = await submit_form(manager, payload, form_token)
    return {"id": record_id}


@router.put("/clientes/{cliente_id}")
async def update_cliente(
    cliente_id: str,
    payload: CustomerForm,
    form_token: Optional[str] = Header(None, alias="X-Form-Token"),
    manager: CustomerManager = Depends(get_customer_manager),
):
    await load_items(manager)
    manager.open_form(get_or_404(manager, cliente_id))
    await submit_form(manager, payload, form_token)
    return manager.find(cliente_id)


@router.delete("/clientes/{cliente_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cliente(
    cliente_id: str,
    manager: CustomerManager = Depends(get_customer_manager),
):
    await delete_record(manager, cliente_id)
    return None
