"""Document store interface consumed by the binding controllers."""

from __future__ import annotations

from typing import Any, Protocol

from pydocbind.models.document import IdentifiedDocument
from pydocbind.models.query import Query
from pydocbind.models.ref import DocumentRef


class DocumentStore(Protocol):
    """Single-shot async access to a document store.

    Implementations raise :class:`pydocbind.exceptions.StoreError` (or a
    subclass) when the store rejects a call. A missing document is not an
    error: :meth:`fetch_one` returns ``None``.
    """

    async def fetch_one(self, ref: DocumentRef) -> Any | None:
        ...

    async def fetch_many(self, query: Query) -> list[IdentifiedDocument]:
        ...

    async def write_one(self, ref: DocumentRef, document: Any) -> None:
        ...
