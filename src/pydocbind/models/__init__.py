"""Data models for documents, references and queries."""

from pydocbind.models._base import DocBindModel
from pydocbind.models.document import IdentifiedDocument
from pydocbind.models.query import Direction, Filter, FilterOp, OrderBy, Query
from pydocbind.models.ref import DocumentRef
from pydocbind.models.state import FetchState, FormState, QueryState

__all__ = [
    "Direction",
    "DocBindModel",
    "DocumentRef",
    "FetchState",
    "Filter",
    "FilterOp",
    "FormState",
    "IdentifiedDocument",
    "OrderBy",
    "Query",
    "QueryState",
]
