"""Single-document binding."""

from __future__ import annotations

import dataclasses
from typing import Any, TypeVar

from pydocbind.binding._base import BindingController, ErrorReporter
from pydocbind.models.ref import DocumentRef
from pydocbind.models.state import FetchState
from pydocbind.store.base import DocumentStore

S = TypeVar("S")


class SingleDocumentBinding(BindingController[DocumentRef, S]):
    """Fetch lifecycle for anything whose state carries one document ``value``."""

    _context = "fetch_one"

    async def _fetch(self, key: DocumentRef) -> Any:
        return await self._store.fetch_one(key)

    def _loaded(self, state: S, result: Any) -> S:
        return dataclasses.replace(state, value=result, is_loading=False)


class DocumentController(SingleDocumentBinding[FetchState]):
    """Live ``{value, is_loading}`` for one document.

    Usage::

        async with DocumentController(store) as doc:
            await doc.bind(DocumentRef(collection="users", id="u1"))
            print(doc.state.value)

    A failed fetch keeps whatever ``value`` a previous fetch produced.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        on_error: ErrorReporter | None = None,
    ) -> None:
        super().__init__(store, FetchState(), on_error=on_error)
