from __future__ import annotations

import logging
from typing import Any, Optional

from google.api_core.exceptions import GoogleAPICallError
from google.cloud.firestore_v1.field_path import FieldPath

from painel.gateway.base import DOCUMENT_ID, Document, DocumentGateway, GatewayError

logger = logging.getLogger("painel.gateway")


def _to_document(snapshot) -> Document:
    return Document(
        id=snapshot.id,
        data=snapshot.to_dict() or {},
        path=snapshot.reference.path,
    )


class FirestoreGateway(DocumentGateway):
    def __init__(self, client) -> None:
        self._client = client

    async def list(self, collection: str, order_by: Optional[str] = None) -> list[Document]:
        query = self._client.collection(collection)
        if order_by == DOCUMENT_ID:
            query = query.order_by(FieldPath.document_id())
        elif order_by:
            query = query.order_by(order_by)
        try:
            snapshots = await query.get()
        except GoogleAPICallError as exc:
            logger.warning("firestore list failed collection=%s error=%s", collection, exc)
            raise GatewayError(str(exc)) from exc
        return [_to_document(s) for s in snapshots]

    async def list_group(self, collection: str) -> list[Document]:
        try:
            snapshots = await self._client.collection_group(collection).get()
        except GoogleAPICallError as exc:
            logger.warning("firestore collection group failed collection=%s error=%s", collection, exc)
            raise GatewayError(str(exc)) from exc
        return [_to_document(s) for s in snapshots]

    async def create(self, collection: str, fields: dict[str, Any]) -> str:
        try:
            _, ref = await self._client.collection(collection).add(fields)
        except GoogleAPICallError as exc:
            raise GatewayError(str(exc)) from exc
        return ref.id

    async def set(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        if not doc_id:
            raise GatewayError("Identificador do documento vazio")
        try:
            await self._client.collection(collection).document(doc_id).set(fields)
        except GoogleAPICallError as exc:
            raise GatewayError(str(exc)) from exc

    async def replace_at(self, path: str, fields: dict[str, Any]) -> None:
        try:
            await self._client.document(path).update(fields)
        except GoogleAPICallError as exc:
            raise GatewayError(str(exc)) from exc

    async def delete_at(self, path: str) -> None:
        try:
            await self._client.document(path).delete()
        except GoogleAPICallError as exc:
            raise GatewayError(str(exc)) from exc
