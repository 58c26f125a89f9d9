import logging
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from painel.core.errors import DuplicateSubmitError, InvalidFormError, ReadError, WriteError
from painel.gateway.base import Document, DocumentGateway, GatewayError

logger = logging.getLogger("painel.managers")

RecordT = TypeVar("RecordT", bound=BaseModel)
FormT = TypeVar("FormT", bound=BaseModel)


class SubmitGuard:
    """Remembers form tokens already submitted so a double click saves once."""

    def __init__(self, capacity: int = 4096) -> None:
        self.capacity = capacity
        self._seen: "OrderedDict[str, None]" = OrderedDict()

    def claim(self, token: str) -> bool:
        if token in self._seen:
            return False
        self._seen[token] = None
        while len(self._seen) > self.capacity:
            self._seen.popitem(last=False)
        return True

    def release(self, token: str) -> None:
        self._seen.pop(token, None)


submit_guard = SubmitGuard()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityManager(Generic[RecordT, FormT]):
    """List/filter/create/edit/delete over one remote collection.

    State mirrors one open tab: the loaded list, the search term, whether the
    form is open and which record it edits.
    """

    label = "registro"
    plural = "registros"
    order_by: Optional[str] = None
    search_fields: tuple[str, ...] = ()
    form_class: type[BaseModel]

    def __init__(
        self,
        gateway: DocumentGateway,
        collection: str,
        guard: Optional[SubmitGuard] = None,
    ) -> None:
        self.gateway = gateway
        self.collection = collection
        self.guard = guard or submit_guard
        self.items: list[RecordT] = []
        self.search_term = ""
        self.form_open = False
        self.editing: Optional[RecordT] = None
        self.form: Optional[FormT] = None
        self.form_token: Optional[str] = None
        self.error: Optional[str] = None
        self.saving = False

    # hooks

    def decode(self, doc: Document) -> RecordT:
        raise NotImplementedError

    def encode(self, record: RecordT) -> dict[str, Any]:
        raise NotImplementedError

    def blank_form(self) -> FormT:
        return self.form_class.model_construct()

    def form_from_record(self, record: RecordT) -> FormT:
        raise NotImplementedError

    async def build_record(self, form: FormT) -> RecordT:
        raise NotImplementedError

    async def fetch(self) -> list[RecordT]:
        docs = await self.gateway.list(self.collection, self.order_by)
        return [self.decode(doc) for doc in docs]

    async def write(self, record: RecordT) -> str:
        fields = self.encode(record)
        if self.editing is not None:
            await self.gateway.replace(self.collection, self.editing.id, fields)
            return self.editing.id
        return await self.gateway.create(self.collection, {**fields, "created_at": utcnow()})

    # operations

    async def load(self) -> list[RecordT]:
        try:
            items = await self.fetch()
        except GatewayError as exc:
            logger.exception("erro ao carregar %s", self.plural)
            self.items = []
            self.error = f"Erro ao carregar {self.plural}: {exc}"
            raise ReadError(self.error) from exc
        self.items = items
        return self.items

    def filtered(self, term: Optional[str] = None) -> list[RecordT]:
        if term is not None:
            self.search_term = term
        needle = (self.search_term or "").strip().lower()
        if not needle:
            return list(self.items)
        return [
            item
            for item in self.items
            if any(needle in str(getattr(item, name, "") or "").lower() for name in self.search_fields)
        ]

    def find(self, record_id: str) -> Optional[RecordT]:
        for item in self.items:
            if item.id == record_id:
                return item
        return None

    def open_form(self, record: Optional[RecordT] = None) -> FormT:
        self.editing = record
        self.form = self.form_from_record(record) if record is not None else self.blank_form()
        self.form_token = uuid.uuid4().hex
        self.form_open = True
        self.error = None
        return self.form

    def close_form(self) -> None:
        self.form_open = False
        self.editing = None
        self.form = None
        self.form_token = None

    async def submit(self, form: FormT, token: Optional[str] = None) -> str:
        if self.saving:
            raise DuplicateSubmitError("Envio ja em andamento")
        if token and not self.guard.claim(token):
            raise DuplicateSubmitError("Formulario ja enviado")
        self.saving = True
        self.form = form
        self.form_open = True
        try:
            record = await self.build_record(form)
            record_id = await self.write(record)
        except InvalidFormError as exc:
            if token:
                self.guard.release(token)
            self.error = str(exc)
            raise
        except GatewayError as exc:
            if token:
                self.guard.release(token)
            logger.exception("erro ao salvar %s", self.label)
            self.error = f"Erro ao salvar {self.label}: {exc}"
            raise WriteError(self.error) from exc
        finally:
            self.saving = False
        logger.info("%s salvo id=%s", self.label, record_id)
        try:
            await self.load()
        finally:
            self.close_form()
        return record_id

    async def remove(self, record: RecordT) -> None:
        await self.gateway.delete(self.collection, record.id)

    async def delete(self, record_id: str, confirmed: bool = False) -> bool:
        if not confirmed:
            return False
        record = self.find(record_id)
        try:
            if record is not None:
                await self.remove(record)
            else:
                await self.gateway.delete(self.collection, record_id)
        except GatewayError as exc:
            logger.exception("erro ao excluir %s id=%s", self.label, record_id)
            self.error = f"Erro ao excluir {self.label}: {exc}"
            raise WriteError(self.error) from exc
        logger.info("%s excluido id=%s", self.label, record_id)
        await self.load()
        return True
