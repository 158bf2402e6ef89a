"""Read-modify-write binding for one document."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from pydantic import BaseModel

from pydocbind.binding._base import ErrorReporter
from pydocbind.binding.document import SingleDocumentBinding
from pydocbind.models.state import FormState
from pydocbind.mutation import MismatchPolicy, apply, get_path
from pydocbind.paths import PathLike, parse_path, validate_path_for_model
from pydocbind.store.base import DocumentStore

_logger = logging.getLogger(__name__)


class FormController(SingleDocumentBinding[FormState]):
    """Fetch a document, stage nested edits, write it back.

    ``update`` is synchronous and raises on malformed paths (and, under
    ``MismatchPolicy.STRICT``, on type mismatches) without touching the
    staged snapshot. ``save`` never raises for store failures; they go to
    the error reporter and ``is_saving`` drops back to ``False``.

    Usage::

        form = FormController(store, schema=UserDoc)
        await form.bind(ref)
        form.update("address.lines.0", "1 Main St")
        await form.save()

    Parameters
    ----------
    schema : type[BaseModel] or None
        When set, paths passed to ``update`` are checked against the
        model's fields. Values are not validated.
    policy : MismatchPolicy
        What ``update`` does when an interior node has the wrong kind.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        schema: type[BaseModel] | None = None,
        policy: MismatchPolicy = MismatchPolicy.REPLACE,
        on_error: ErrorReporter | None = None,
    ) -> None:
        super().__init__(store, FormState(), on_error=on_error)
        self._schema = schema
        self._policy = policy
        self._pending_saves = 0

    def update(self, path: PathLike, value: Any) -> None:
        """Stage *value* at *path* on top of the current snapshot."""
        self._require_open()
        if self._schema is not None:
            segments = validate_path_for_model(self._schema, path)
        else:
            segments = parse_path(path)
        current = self._state.value
        staged = apply(current if current is not None else {}, segments, value, policy=self._policy)
        self._set_state(dataclasses.replace(self._state, value=staged))

    def get(self, path: PathLike, default: Any = None) -> Any:
        """Read from the staged snapshot."""
        return get_path(self._state.value, path, default)

    async def save(self) -> None:
        """Write the snapshot as it is now; later ``update`` calls are not included."""
        ref = self._key
        snapshot = self._state.value
        if ref is None or snapshot is None:
            _logger.debug("save skipped: nothing staged")
            return

        self._pending_saves += 1
        self._set_state(dataclasses.replace(self._state, is_saving=True))
        try:
            await self._store.write_one(ref, snapshot)
        except Exception as exc:
            self._report(f"write_one {ref}", exc)
        finally:
            self._pending_saves -= 1
            if self._pending_saves == 0:
                self._set_state(dataclasses.replace(self._state, is_saving=False))
