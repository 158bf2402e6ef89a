"""pydocbind - Async document-store bindings with copy-on-write nested edits."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pydocbind")
except PackageNotFoundError:
    __version__ = "0+local"
from pydocbind.binding import DocumentController, FormController, QueryController
from pydocbind.client import DocBindClient
from pydocbind.config import DocBindConfig
from pydocbind.exceptions import (
    DocBindConfigError,
    DocBindError,
    MalformedPathError,
    StoreError,
    StoreTransportError,
    TypeMismatchError,
)
from pydocbind.models import (
    Direction,
    DocumentRef,
    FetchState,
    Filter,
    FilterOp,
    FormState,
    IdentifiedDocument,
    OrderBy,
    Query,
    QueryState,
)
from pydocbind.mutation import MismatchPolicy, NodeKind, apply, apply_many, get_path
from pydocbind.paths import parse_path
from pydocbind.store import DocumentStore, HttpDocumentStore, MemoryDocumentStore

__all__ = [
    "__version__",
    "Direction",
    "DocBindClient",
    "DocBindConfig",
    "DocBindConfigError",
    "DocBindError",
    "DocumentController",
    "DocumentRef",
    "DocumentStore",
    "FetchState",
    "Filter",
    "FilterOp",
    "FormController",
    "FormState",
    "HttpDocumentStore",
    "IdentifiedDocument",
    "MalformedPathError",
    "MemoryDocumentStore",
    "MismatchPolicy",
    "NodeKind",
    "OrderBy",
    "Query",
    "QueryController",
    "QueryState",
    "StoreError",
    "StoreTransportError",
    "TypeMismatchError",
    "apply",
    "apply_many",
    "get_path",
    "parse_path",
]
