from typing import Optional

from fastapi import HTTPException, status
from pydantic import BaseModel

from painel.core.errors import DuplicateSubmitError, InvalidFormError, ReadError, WriteError
from painel.managers.base import EntityManager


async def load_items(manager: EntityManager) -> None:
    try:
        await manager.load()
    except ReadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


def get_or_404(manager: EntityManager, record_id: str):
    record = manager.find(record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{manager.label.capitalize()} nao encontrado",
        )
    return record


async def submit_form(manager: EntityManager, form: BaseModel, token: Optional[str] = None) -> str:
    try:
        return await manager.submit(form, token=token)
    except DuplicateSubmitError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except InvalidFormError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except (WriteError, ReadError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


async def delete_record(manager: EntityManager, record_id: str) -> None:
    await load_items(manager)
    get_or_404(manager, record_id)
    try:
        await manager.delete(record_id, confirmed=True)
    except (WriteError, ReadError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
