"""Query descriptors.

A :class:`Query` is an immutable value. The builder methods
(:meth:`Query.where`, :meth:`Query.order_by_field`, :meth:`Query.take`)
return new instances, so a query can be shared between controllers and
compared for equality when a binding is refreshed.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field, field_validator

from pydocbind.models._base import DocBindModel, non_empty


class FilterOp(enum.StrEnum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"


class Direction(enum.StrEnum):
    ASC = "asc"
    DESC = "desc"


def _field_path(value: str) -> str:
    if not value.strip():
        raise ValueError("field must be non-empty")
    return value.strip()


class Filter(DocBindModel):
    """``field op value``; *field* is a dot-delimited document path."""

    field: str
    op: FilterOp = FilterOp.EQ
    value: Any = None

    check_field = field_validator("field")(_field_path)


class OrderBy(DocBindModel):
    field: str
    direction: Direction = Direction.ASC

    check_field = field_validator("field")(_field_path)


class Query(DocBindModel):
    """Filters, ordering and limit over one collection."""

    collection: str
    filters: tuple[Filter, ...] = ()
    order_by: tuple[OrderBy, ...] = ()
    limit: int | None = Field(default=None, ge=1)

    @field_validator("collection")
    @classmethod
    def _collection_non_empty(cls, value: str) -> str:
        return non_empty(value, "collection")

    def where(self, field: str, op: FilterOp | str, value: Any) -> Query:
        return self.model_copy(update={"filters": (*self.filters, Filter(field=field, op=FilterOp(op), value=value))})

    def order_by_field(self, field: str, direction: Direction | str = Direction.ASC) -> Query:
        return self.model_copy(update={"order_by": (*self.order_by, OrderBy(field=field, direction=Direction(direction)))})

    def take(self, limit: int) -> Query:
        # model_copy skips validation; go through the constructor so ``ge=1`` applies.
        return Query.model_validate({**dict(self), "limit": limit})

    def to_wire(self) -> dict[str, Any]:
        """JSON body for the HTTP query endpoint (camelCase keys)."""
        body = self.model_dump(mode="json", by_alias=True, exclude={"collection"})
        if body.get("limit") is None:
            body.pop("limit", None)
        return body
