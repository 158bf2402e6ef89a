"""Base model for pydocbind descriptors.

Every descriptor (document references, queries, wire records) inherits
from :class:`DocBindModel` which provides:

* ``frozen=True`` so descriptors are immutable and compare by value;
  controllers use equality to decide whether a binding changed.
* ``alias_generator=to_camel`` so the HTTP wire format is camelCase while
  Python code uses snake_case field names.
* Whitespace stripping on string fields.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocBindModel(BaseModel):
    """Base for immutable pydocbind descriptors."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
        validate_default=True,
    )


def non_empty(value: str, name: str) -> str:
    """Shared validator body: reject blank identifiers."""
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{name} must be non-empty")
    if "/" in stripped:
        raise ValueError(f"{name} must not contain '/'")
    return stripped
