"""Shared plumbing for binding controllers.

A controller owns one state value and one in-flight request at a time.
Each request runs under a :class:`_Lease`; re-binding or closing the
controller revokes the current lease, and a completion whose lease was
revoked is dropped without touching state or notifying anyone.

All transitions happen on the running asyncio loop, so no locking is
needed: the lease check and the state write cannot interleave with
another transition.
"""

from __future__ import annotations

import abc
import asyncio
import dataclasses
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydocbind.exceptions import DocBindError
from pydocbind.store.base import DocumentStore

_logger = logging.getLogger(__name__)

K = TypeVar("K")
S = TypeVar("S")

ErrorReporter = Callable[[str, BaseException], None]
"""Observability hook: ``(context, error)``. Must not block."""


def log_error(context: str, error: BaseException) -> None:
    """Default :data:`ErrorReporter`: log at ERROR with the traceback."""
    _logger.error("%s failed: %s", context, error, exc_info=error)


@dataclasses.dataclass(slots=True)
class _Lease:
    key: Any
    active: bool = True


class BindingController(abc.ABC, Generic[K, S]):
    """Fetch lifecycle shared by document, query and form controllers.

    Subclasses supply the fetch call and the three state transitions
    (loading, loaded, failed).
    """

    _context: str = "fetch"

    def __init__(
        self,
        store: DocumentStore,
        initial_state: S,
        *,
        on_error: ErrorReporter | None = None,
    ) -> None:
        self._store = store
        self._state = initial_state
        self._on_error = on_error or log_error
        self._listeners: list[Callable[[S], None]] = []
        self._key: K | None = None
        self._lease: _Lease | None = None
        self._task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def _fetch(self, key: K) -> Any: ...

    @abc.abstractmethod
    def _loaded(self, state: S, result: Any) -> S: ...

    def _loading(self, state: S) -> S:
        return dataclasses.replace(state, is_loading=True)  # type: ignore[type-var]

    def _failed(self, state: S) -> S:
        return dataclasses.replace(state, is_loading=False)  # type: ignore[type-var]

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    @property
    def state(self) -> S:
        return self._state

    @property
    def key(self) -> K | None:
        """The currently bound reference or query, if any."""
        return self._key

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Callable[[S], None]) -> Callable[[], None]:
        """Call *listener* with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def bind(self, key: K) -> asyncio.Task[None]:
        """Bind to *key*, fetching it unless it equals the current binding.

        Must be called with a running event loop. The returned task
        completes once the fetch has been applied (or dropped).
        """
        self._require_open()
        if self._task is not None and key == self._key:
            return self._task
        return self._start(key)

    def reload(self) -> asyncio.Task[None]:
        """Fetch the current binding again."""
        self._require_open()
        if self._key is None:
            raise DocBindError("Nothing bound. Call bind() first.")
        return self._start(self._key)

    async def wait(self) -> S:
        """Wait for the in-flight fetch (if any) and return the state."""
        if self._task is not None:
            await self._task
        return self._state

    def close(self) -> None:
        """Tear down: revoke the in-flight fetch and stop notifying."""
        self._closed = True
        if self._lease is not None:
            self._lease.active = False
        self._listeners.clear()

    async def __aenter__(self) -> BindingController[K, S]:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_open(self) -> None:
        if self._closed:
            raise DocBindError(f"{type(self).__name__} is closed")

    def _set_state(self, state: S) -> None:
        self._state = state
        if self._closed:
            return
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.debug("state listener failed", exc_info=True)

    def _report(self, context: str, error: BaseException) -> None:
        try:
            self._on_error(context, error)
        except Exception:
            _logger.debug("error reporter failed", exc_info=True)

    def _start(self, key: K) -> asyncio.Task[None]:
        loop = asyncio.get_running_loop()
        if self._lease is not None:
            self._lease.active = False
        lease = _Lease(key)
        self._lease = lease
        self._key = key
        self._set_state(self._loading(self._state))
        task = loop.create_task(self._run(lease))
        # Superseded fetches stay referenced until they finish.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task
        return task

    async def _run(self, lease: _Lease) -> None:
        try:
            result = await self._fetch(lease.key)
        except Exception as exc:
            if not lease.active:
                _logger.debug("dropping stale %s failure for %s", self._context, lease.key)
                return
            self._report(f"{self._context} {lease.key}", exc)
            self._set_state(self._failed(self._state))
            return

        if not lease.active:
            _logger.debug("dropping stale %s result for %s", self._context, lease.key)
            return
        self._set_state(self._loaded(self._state, result))
