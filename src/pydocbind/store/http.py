"""Document store backed by the JSON REST API.

Endpoints (relative to ``DocBindConfig.base_url``):

* ``GET  /v1/collections/{collection}/documents/{id}`` -> ``{"id", "data"}``
* ``PUT  /v1/collections/{collection}/documents/{id}`` <- ``{"data"}``
* ``POST /v1/collections/{collection}:query`` -> ``{"documents": [...]}``
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from pydocbind._constants import API_PREFIX
from pydocbind._transport import Transport
from pydocbind.exceptions import StoreTransportError
from pydocbind.models.document import IdentifiedDocument
from pydocbind.models.query import Query
from pydocbind.models.ref import DocumentRef

_logger = logging.getLogger(__name__)


def document_endpoint(ref: DocumentRef) -> str:
    return f"{API_PREFIX}/{quote(ref.collection, safe='')}/documents/{quote(ref.id, safe='')}"


def query_endpoint(query: Query) -> str:
    return f"{API_PREFIX}/{quote(query.collection, safe='')}:query"


def _parse_record(raw: Any, endpoint: str) -> IdentifiedDocument:
    try:
        return IdentifiedDocument.model_validate(raw)
    except ValidationError as exc:
        raise StoreTransportError(f"Malformed document record from {endpoint}", endpoint=endpoint) from exc


class HttpDocumentStore:
    """:class:`~pydocbind.store.base.DocumentStore` over a :class:`Transport`."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def fetch_one(self, ref: DocumentRef) -> Any | None:
        endpoint = document_endpoint(ref)
        try:
            body = await self._transport.request_json("GET", endpoint)
        except StoreTransportError as exc:
            if exc.status_code == 404:
                _logger.debug("document %s not found", ref)
                return None
            raise
        if body is None:
            return None
        return _parse_record(body, endpoint).data

    async def fetch_many(self, query: Query) -> list[IdentifiedDocument]:
        endpoint = query_endpoint(query)
        body = await self._transport.request_json("POST", endpoint, query.to_wire())
        if body is None:
            return []
        raw_documents = body.get("documents") if isinstance(body, dict) else None
        if not isinstance(raw_documents, list):
            raise StoreTransportError(f"Missing 'documents' list from {endpoint}", endpoint=endpoint)
        return [_parse_record(raw, endpoint) for raw in raw_documents]

    async def write_one(self, ref: DocumentRef, document: Any) -> None:
        await self._transport.request_json("PUT", document_endpoint(ref), {"data": document})
