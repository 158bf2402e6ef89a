"""Document store collaborators."""

from pydocbind.store.base import DocumentStore
from pydocbind.store.http import HttpDocumentStore
from pydocbind.store.memory import MemoryDocumentStore

__all__ = ["DocumentStore", "HttpDocumentStore", "MemoryDocumentStore"]
