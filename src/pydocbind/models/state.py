"""Binding state snapshots.

Controllers never mutate a state object; each transition replaces it
with :func:`dataclasses.replace`, so a subscriber can keep the instance it
was handed and compare it by identity with the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydocbind.models.document import IdentifiedDocument


@dataclass(frozen=True, slots=True)
class FetchState:
    """``value`` is ``None`` until a fetch succeeds (and when the document is missing)."""

    value: Any = None
    is_loading: bool = True


@dataclass(frozen=True, slots=True)
class QueryState:
    data: tuple[IdentifiedDocument, ...] = ()
    is_loading: bool = True


@dataclass(frozen=True, slots=True)
class FormState:
    """Fetch state plus the save flag; ``value`` is the staged snapshot."""

    value: Any = None
    is_loading: bool = True
    is_saving: bool = False
