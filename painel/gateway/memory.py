from __future__ import annotations

import copy
import uuid
from typing import Any, Optional

from painel.gateway.base import DOCUMENT_ID, Document, DocumentGateway, GatewayError


def _split(path: str) -> tuple[str, str]:
    collection, _, doc_id = path.rstrip("/").rpartition("/")
    if not collection or not doc_id:
        raise GatewayError(f"Caminho de documento invalido: {path}")
    return collection, doc_id


def _sort_value(value: Any) -> tuple:
    if value is None:
        return (0, "")
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    return (3, str(value))


class MemoryGateway(DocumentGateway):
    """Process-local store used with LOCAL_STORE=1 and in tests.

    Collections are keyed by their full path, so ``clientes/abc/relatorios``
    is a nested collection reachable through ``list_group("relatorios")``.
    """

    def __init__(self, seed: Optional[dict[str, dict[str, dict[str, Any]]]] = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        for collection, docs in (seed or {}).items():
            for doc_id, data in docs.items():
                self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def _documents(self, collection: str) -> list[Document]:
        docs = self._collections.get(collection, {})
        return [
            Document(id=doc_id, data=copy.deepcopy(data), path=f"{collection}/{doc_id}")
            for doc_id, data in docs.items()
        ]

    async def list(self, collection: str, order_by: Optional[str] = None) -> list[Document]:
        docs = self._documents(collection)
        if order_by == DOCUMENT_ID:
            return sorted(docs, key=lambda d: d.id)
        if order_by:
            # Firestore leaves out documents that lack the ordering field.
            docs = [d for d in docs if order_by in d.data]
            return sorted(docs, key=lambda d: _sort_value(d.data.get(order_by)))
        return docs

    async def list_group(self, collection: str) -> list[Document]:
        found: list[Document] = []
        for path in self._collections:
            if path.rsplit("/", 1)[-1] == collection:
                found.extend(self._documents(path))
        return found

    async def create(self, collection: str, fields: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(fields)
        return doc_id

    async def set(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        if not doc_id:
            raise GatewayError("Identificador do documento vazio")
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(fields)

    async def replace_at(self, path: str, fields: dict[str, Any]) -> None:
        collection, doc_id = _split(path)
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            raise GatewayError(f"Documento nao encontrado: {path}")
        docs[doc_id].update(copy.deepcopy(fields))

    async def delete_at(self, path: str) -> None:
        collection, doc_id = _split(path)
        self._collections.get(collection, {}).pop(doc_id, None)

    def raw(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        data = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(data) if data is not None else None
