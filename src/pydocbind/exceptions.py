"""Custom exception hierarchy for pydocbind."""

from __future__ import annotations

from collections.abc import Sequence


class DocBindError(Exception):
    """Base exception for all pydocbind errors."""


class DocBindConfigError(DocBindError):
    """Invalid or missing configuration."""


class MalformedPathError(DocBindError, ValueError):
    """A path string could not be parsed into segments.

    Raised for the empty path, for empty segments (leading, trailing or
    doubled dots) and, when a schema is attached to a form, for fields the
    schema does not declare.
    """

    def __init__(self, message: str, *, path: object = None) -> None:
        self.path = path
        super().__init__(message)


class TypeMismatchError(DocBindError, TypeError):
    """A path write met a container of the wrong kind.

    ``position`` holds the segments walked up to (and including) the
    segment whose container could not be used.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        position: Sequence[str | int] = (),
    ) -> None:
        self.path = path
        self.position = tuple(position)
        super().__init__(message)


class StoreError(DocBindError):
    """The document store rejected a fetch or a write."""


class StoreTransportError(StoreError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
