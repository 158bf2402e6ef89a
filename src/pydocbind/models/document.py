"""Documents annotated with their store identity."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict


class IdentifiedDocument(BaseModel):
    """A query result: the document as stored plus the id it is stored under.

    The identity is carried next to the document, never inside it, so
    ``data`` is exactly what :meth:`DocumentStore.fetch_one` would return
    for the same document.

    Parameters
    ----------
    id : str
        Store-assigned document id.
    data : Any
        The document tree. Kept by reference, not copied or validated.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    data: Any = None

    def as_dict(self) -> dict[str, Any]:
        """Flattened ``{**data, "id": id}`` view of a map document.

        The ``id`` key wins over a field of the same name in ``data``.
        """
        if not isinstance(self.data, Mapping):
            raise TypeError(f"document {self.id!r} is not a mapping")
        return {**self.data, "id": self.id}
