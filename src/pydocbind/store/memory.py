"""In-process document store.

Documents are deep-copied on the way in and on the way out, so nothing a
caller holds can alias stored state. Queries support the same filter
operators as the HTTP backend.
"""

from __future__ import annotations

import copy
import logging
import operator
from collections.abc import Callable
from typing import Any

from pydocbind.exceptions import MalformedPathError, StoreError
from pydocbind.models.document import IdentifiedDocument
from pydocbind.models.query import Direction, Filter, FilterOp, Query
from pydocbind.models.ref import DocumentRef
from pydocbind.mutation import get_path
from pydocbind.paths import parse_path

_logger = logging.getLogger(__name__)

_MISSING = object()

_COMPARATORS: dict[FilterOp, Callable[[Any, Any], bool]] = {
    FilterOp.EQ: operator.eq,
    FilterOp.NE: operator.ne,
    FilterOp.LT: operator.lt,
    FilterOp.LE: operator.le,
    FilterOp.GT: operator.gt,
    FilterOp.GE: operator.ge,
    FilterOp.IN: lambda value, options: value in options,
    FilterOp.NOT_IN: lambda value, options: value not in options,
    FilterOp.ARRAY_CONTAINS: lambda value, item: isinstance(value, (list, tuple)) and item in value,
}


def _matches(document: Any, flt: Filter) -> bool:
    """Evaluate one filter; documents without the field never match."""
    try:
        value = get_path(document, flt.field, _MISSING)
    except MalformedPathError as exc:
        raise StoreError(f"invalid filter field {flt.field!r}") from exc
    if value is _MISSING:
        return False
    try:
        return bool(_COMPARATORS[flt.op](value, flt.value))
    except TypeError:
        # Incomparable types (e.g. str < int) are a non-match, not a failure.
        return False


def _sort_key(field: str) -> Callable[[IdentifiedDocument], tuple[bool, Any]]:
    try:
        segments = parse_path(field)
    except MalformedPathError as exc:
        raise StoreError(f"invalid order field {field!r}") from exc

    def key(doc: IdentifiedDocument) -> tuple[bool, Any]:
        value = get_path(doc.data, segments)
        return (value is not None, value)

    return key


class MemoryDocumentStore:
    """Dict-backed :class:`~pydocbind.store.base.DocumentStore`.

    Usage::

        store = MemoryDocumentStore()
        await store.write_one(DocumentRef(collection="users", id="u1"), {"name": "Ada"})
    """

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None) -> None:
        self._collections: dict[str, dict[str, Any]] = {}
        for collection, documents in (initial or {}).items():
            self._collections[collection] = {doc_id: copy.deepcopy(doc) for doc_id, doc in documents.items()}

    async def fetch_one(self, ref: DocumentRef) -> Any | None:
        document = self._collections.get(ref.collection, {}).get(ref.id)
        return copy.deepcopy(document)

    async def fetch_many(self, query: Query) -> list[IdentifiedDocument]:
        documents = self._collections.get(query.collection, {})
        results = [
            IdentifiedDocument(id=doc_id, data=copy.deepcopy(doc))
            for doc_id, doc in documents.items()
            if all(_matches(doc, flt) for flt in query.filters)
        ]

        # Stable sorts applied last-key-first yield a multi-key ordering.
        for order in reversed(query.order_by):
            key = _sort_key(order.field)
            try:
                results.sort(key=key, reverse=order.direction is Direction.DESC)
            except TypeError as exc:
                raise StoreError(f"cannot order {query.collection!r} by {order.field!r}: mixed value types") from exc

        if query.limit is not None:
            results = results[: query.limit]
        _logger.debug("query %s matched %d document(s)", query.collection, len(results))
        return results

    async def write_one(self, ref: DocumentRef, document: Any) -> None:
        self._collections.setdefault(ref.collection, {})[ref.id] = copy.deepcopy(document)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Deep copy of every stored collection."""
        return copy.deepcopy(self._collections)
