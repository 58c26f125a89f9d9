import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from painel.api.deps import get_address_lookup, get_distance_lookup, get_gateway
from painel.core.config import Settings, get_settings
from painel.core.errors import DuplicateSubmitError, InvalidFormError, ReadError, WriteError
from painel.core.session import SessionContext, get_session_context
from painel.dashboard.templates import render_shell
from painel.dashboard.views import VIEWS, ServiceReportView, TabView, build_view, form_values
from painel.gateway.base import DocumentGateway
from painel.services.distance import DistanceLookup
from painel.services.geocoding import AddressLookup

router = APIRouter(tags=["Painel"])
logger = logging.getLogger("painel.dashboard")

TABS = [(key, view.label) for key, view in VIEWS.items()]


class ShellDeps:
    """Everything a tab needs, resolved once per request."""

    def __init__(
        self,
        gateway: DocumentGateway = Depends(get_gateway),
        settings: Settings = Depends(get_settings),
        session: SessionContext = Depends(get_session_context),
        address_lookup: AddressLookup = Depends(get_address_lookup),
        distance_lookup: DistanceLookup = Depends(get_distance_lookup),
    ) -> None:
        self.gateway = gateway
        self.settings = settings
        self.session = session
        self.address_lookup = address_lookup
        self.distance_lookup = distance_lookup

    def view(self, key: str) -> TabView:
        try:
            return build_view(
                key,
                self.gateway,
                self.settings,
                self.session,
                self.address_lookup,
                self.distance_lookup,
            )
        except KeyError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aba nao encontrada")


def _row(view: TabView, record) -> dict[str, Any]:
    return {
        "id": record.id,
        "cells": view.cells(record),
        "row_class": view.row_class(record),
        "search": view.search_text(record),
    }


def _groups(view: ServiceReportView, term: str) -> list[dict[str, Any]]:
    groups = []
    for group in view.manager.groups(term):
        if term and not group.reports:
            continue
        groups.append(
            {
                "title": group.title,
                "customer_id": group.customer.id if group.customer else "",
                "rows": [_row(view, report) for report in group.reports],
            }
        )
    return groups


def _render(
    view: TabView,
    shell: ShellDeps,
    q: str = "",
    error: Optional[str] = None,
    values: Optional[dict[str, Any]] = None,
    confirm: Optional[dict[str, str]] = None,
    detail: Optional[dict[str, Any]] = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    manager = view.manager
    is_reports = isinstance(view, ServiceReportView)
    html = render_shell(
        app_name=shell.settings.APP_NAME,
        tabs=TABS,
        view=view,
        user_label=shell.session.label,
        error=error,
        banner=view.banner(),
        q=q,
        rows=[] if is_reports else [_row(view, record) for record in manager.filtered(q)],
        groups=_groups(view, q) if is_reports else None,
        counts=manager.counts if is_reports else None,
        form_open=manager.form_open,
        fields=view.fields() if manager.form_open else [],
        values=values if values is not None else form_values(manager.form),
        token=manager.form_token,
        editing_id=manager.editing.id if manager.editing is not None else None,
        technician=shell.session.label if is_reports else None,
        confirm=confirm,
        detail=detail,
    )
    return HTMLResponse(html, status_code=status_code)


def _form_payload(form_class, data) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for name, info in form_class.model_fields.items():
        if info.annotation is bool:
            # unchecked boxes are not posted at all
            payload[name] = name in data
        elif name in data:
            payload[name] = data.get(name)
    return payload


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err.get("loc", ())) or "formulario"
        parts.append(f"{where}: {err.get('msg')}")
    return "Formulario invalido - " + "; ".join(parts)


def _back_to(aba: str) -> RedirectResponse:
    return RedirectResponse(f"/?aba={aba}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse)
async def shell_page(
    aba: str = "clientes",
    q: str = "",
    novo: bool = False,
    editar: Optional[str] = None,
    excluir: Optional[str] = None,
    ver: Optional[str] = None,
    cliente: Optional[str] = None,
    shell: ShellDeps = Depends(),
):
    view = shell.view(aba)
    manager = view.manager
    error = None
    try:
        await manager.load()
    except ReadError as exc:
        error = str(exc)

    confirm = None
    detail = None
    if novo:
        if isinstance(view, ServiceReportView) and cliente:
            await manager.open_form_for_customer(cliente)
        else:
            manager.open_form()
    elif editar:
        record = manager.find(editar)
        if record is None:
            error = error or f"{manager.label.capitalize()} nao encontrado"
        else:
            manager.open_form(record)
    elif excluir:
        record = manager.find(excluir)
        if record is None:
            error = error or f"{manager.label.capitalize()} nao encontrado"
        else:
            confirm = {"id": record.id, "text": f"este {manager.label}"}
    elif ver and isinstance(view, ServiceReportView):
        record = manager.find(ver)
        if record is not None:
            detail = view.detail(record)

    return _render(view, shell, q=q, error=error, confirm=confirm, detail=detail)


@router.post("/painel/{aba}/salvar", response_class=HTMLResponse)
async def save_record(aba: str, request: Request, shell: ShellDeps = Depends()):
    view = shell.view(aba)
    manager = view.manager
    data = await request.form()
    token = data.get("_token") or None
    editing_id = data.get("_editing") or ""

    try:
        await manager.load()
    except ReadError as exc:
        return _render(view, shell, error=str(exc), status_code=status.HTTP_502_BAD_GATEWAY)

    record = manager.find(editing_id) if editing_id else None
    if editing_id and record is None:
        return _render(
            view,
            shell,
            error=f"{manager.label.capitalize()} nao encontrado",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    manager.open_form(record)
    if token:
        manager.form_token = token

    values = _form_payload(manager.form_class, data)
    try:
        form = manager.form_class.model_validate(values)
    except ValidationError as exc:
        return _render(
            view,
            shell,
            error=_validation_message(exc),
            values=values,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    try:
        await manager.submit(form, token)
    except DuplicateSubmitError as exc:
        logger.info("envio duplicado ignorado aba=%s: %s", aba, exc)
        return _back_to(aba)
    except InvalidFormError as exc:
        return _render(view, shell, error=str(exc), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    except WriteError as exc:
        return _render(view, shell, error=str(exc), status_code=status.HTTP_502_BAD_GATEWAY)
    except ReadError:
        # saved; the list page reports the reload failure
        return _back_to(aba)
    return _back_to(aba)


@router.post("/painel/{aba}/{record_id}/excluir", response_class=HTMLResponse)
async def delete_record(aba: str, record_id: str, request: Request, shell: ShellDeps = Depends()):
    view = shell.view(aba)
    manager = view.manager
    data = await request.form()
    confirmed = data.get("confirmado") == "1"

    try:
        await manager.load()
    except ReadError as exc:
        return _render(view, shell, error=str(exc), status_code=status.HTTP_502_BAD_GATEWAY)

    try:
        await manager.delete(record_id, confirmed=confirmed)
    except WriteError as exc:
        return _render(view, shell, error=str(exc), status_code=status.HTTP_502_BAD_GATEWAY)
    except ReadError:
        return _back_to(aba)
    return _back_to(aba)
