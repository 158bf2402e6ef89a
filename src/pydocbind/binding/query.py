"""Query result binding."""

from __future__ import annotations

import dataclasses
from typing import Any

from pydocbind.binding._base import BindingController, ErrorReporter
from pydocbind.models.query import Query
from pydocbind.models.state import QueryState
from pydocbind.store.base import DocumentStore


class QueryController(BindingController[Query, QueryState]):
    """Live ``{data, is_loading}`` for a query; ``data`` starts out empty."""

    _context = "fetch_many"

    def __init__(
        self,
        store: DocumentStore,
        *,
        on_error: ErrorReporter | None = None,
    ) -> None:
        super().__init__(store, QueryState(), on_error=on_error)

    async def _fetch(self, key: Query) -> Any:
        return await self._store.fetch_many(key)

    def _loaded(self, state: QueryState, result: Any) -> QueryState:
        return dataclasses.replace(state, data=tuple(result), is_loading=False)
