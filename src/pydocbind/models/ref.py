"""Single-document reference."""

from __future__ import annotations

from pydantic import field_validator

from pydocbind.models._base import DocBindModel, non_empty


class DocumentRef(DocBindModel):
    """Address of one document: ``collection`` plus document ``id``."""

    collection: str
    id: str

    @field_validator("collection")
    @classmethod
    def _collection_non_empty(cls, value: str) -> str:
        return non_empty(value, "collection")

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, value: str) -> str:
        return non_empty(value, "id")

    @property
    def path(self) -> str:
        return f"{self.collection}/{self.id}"

    def __str__(self) -> str:
        return self.path
