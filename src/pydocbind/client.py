"""High-level async client tying a document store to binding controllers."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import aiohttp
from pydantic import BaseModel

from pydocbind._transport import HttpTransport
from pydocbind.binding import DocumentController, ErrorReporter, FormController, QueryController
from pydocbind.binding._base import BindingController
from pydocbind.config import DocBindConfig
from pydocbind.exceptions import DocBindError
from pydocbind.models.document import IdentifiedDocument
from pydocbind.models.query import Query
from pydocbind.models.ref import DocumentRef
from pydocbind.mutation import MismatchPolicy
from pydocbind.store.base import DocumentStore
from pydocbind.store.http import HttpDocumentStore

_logger = logging.getLogger(__name__)

C = TypeVar("C", bound=BindingController[Any, Any])


class DocBindClient:
    """Async client for a document store.

    Usage::

        async with DocBindClient(DocBindConfig.from_env()) as client:
            form = client.form(DocumentRef(collection="users", id="u1"))
            await form.wait()
            form.update("profile.name", "Ada")
            await form.save()

    Controllers created through the factories are closed together with
    the client. Pass ``store=`` to bind against something other than the
    HTTP API (e.g. :class:`~pydocbind.store.MemoryDocumentStore`).
    """

    def __init__(
        self,
        config: DocBindConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        store: DocumentStore | None = None,
        on_error: ErrorReporter | None = None,
    ) -> None:
        self._config = config or DocBindConfig()
        self._external_session = session is not None
        self._http_session = session
        self._injected_store = store
        self._store: DocumentStore | None = store
        self._on_error = on_error
        self._controllers: list[BindingController[Any, Any]] = []

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DocBindClient:
        if self._injected_store is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._store = HttpDocumentStore(HttpTransport(self._config, self._http_session))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        for controller in self._controllers:
            controller.close()
        self._controllers.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._injected_store is None:
            self._store = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_store(self) -> DocumentStore:
        if self._store is None:
            raise DocBindError("Client not initialized. Use 'async with DocBindClient(...) as client:'")
        return self._store

    def _track(self, controller: C) -> C:
        # Drop controllers the caller already closed.
        self._controllers = [c for c in self._controllers if not c.closed]
        self._controllers.append(controller)
        return controller

    # ------------------------------------------------------------------
    # Bindings
    # ------------------------------------------------------------------

    def document(self, ref: DocumentRef) -> DocumentController:
        """Bound, loading controller for one document."""
        controller = self._track(DocumentController(self._require_store(), on_error=self._on_error))
        controller.bind(ref)
        return controller

    def query(self, query: Query) -> QueryController:
        """Bound, loading controller for a query."""
        controller = self._track(QueryController(self._require_store(), on_error=self._on_error))
        controller.bind(query)
        return controller

    def form(
        self,
        ref: DocumentRef,
        *,
        schema: type[BaseModel] | None = None,
        policy: MismatchPolicy = MismatchPolicy.REPLACE,
    ) -> FormController:
        """Bound, loading read-modify-write controller for one document."""
        controller = self._track(
            FormController(self._require_store(), schema=schema, policy=policy, on_error=self._on_error)
        )
        controller.bind(ref)
        return controller

    # ------------------------------------------------------------------
    # Direct store access
    # ------------------------------------------------------------------

    async def fetch_one(self, ref: DocumentRef) -> Any | None:
        return await self._require_store().fetch_one(ref)

    async def fetch_many(self, query: Query) -> list[IdentifiedDocument]:
        return await self._require_store().fetch_many(query)

    async def write_one(self, ref: DocumentRef, document: Any) -> None:
        _logger.debug("write_one %s", ref)
        await self._require_store().write_one(ref, document)
