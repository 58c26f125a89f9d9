from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

DOCUMENT_ID = "__name__"


class GatewayError(RuntimeError):
    pass


@dataclass
class Document:
    id: str
    data: dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None


def document_path(collection: str, doc_id: str) -> str:
    return f"{collection}/{doc_id}"


class DocumentGateway(ABC):
    """Single-shot async access to a document store.

    Callers re-invoke ``list`` to observe new data; nothing is pushed.
    """

    @abstractmethod
    async def list(self, collection: str, order_by: Optional[str] = None) -> list[Document]:
        ...

    @abstractmethod
    async def list_group(self, collection: str) -> list[Document]:
        """Every document of every nested collection named ``collection``."""

    @abstractmethod
    async def create(self, collection: str, fields: dict[str, Any]) -> str:
        ...

    @abstractmethod
    async def set(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def replace_at(self, path: str, fields: dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def delete_at(self, path: str) -> None:
        ...

    async def replace(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        await self.replace_at(document_path(collection, doc_id), fields)

    async def delete(self, collection: str, doc_id: str) -> None:
        await self.delete_at(document_path(collection, doc_id))
