"""Dot-delimited document paths.

A path such as ``"address.lines.0"`` is parsed into a tuple of segments:
``str`` keys select into keyed maps and ``int`` indices select into
ordered sequences. A token made only of ASCII digits is an index,
everything else is a key.

The optional :func:`validate_path_for_model` walks a parsed path against a
pydantic model so that forms bound to a known document shape reject paths
the shape does not declare.
"""

from __future__ import annotations

import re
import types
import typing
from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Union

from pydantic import BaseModel

from pydocbind._constants import PATH_SEPARATOR
from pydocbind.exceptions import MalformedPathError

Segment = str | int
"""One component of a parsed path: a map key or a sequence index."""

PathLike = str | Sequence[Segment]

_INDEX_RE = re.compile(r"[0-9]+")


def is_index(segment: Segment) -> bool:
    """Return ``True`` when *segment* selects into an ordered sequence."""
    return isinstance(segment, int) and not isinstance(segment, bool)


def parse_segment(token: str) -> Segment:
    if _INDEX_RE.fullmatch(token):
        return int(token)
    return token


def parse_path(path: PathLike) -> tuple[Segment, ...]:
    """Parse *path* into segments.

    Accepts a dot-delimited string or an already-parsed sequence of
    segments (which is validated and returned as a tuple).

    Raises :class:`MalformedPathError` for the empty path and for empty
    segments produced by leading, trailing or doubled separators.
    """
    if isinstance(path, str):
        if not path:
            raise MalformedPathError("path must be non-empty", path=path)
        tokens = path.split(PATH_SEPARATOR)
        if any(token == "" for token in tokens):
            raise MalformedPathError(f"path {path!r} contains an empty segment", path=path)
        return tuple(parse_segment(token) for token in tokens)

    if isinstance(path, (bytes, bytearray)) or not isinstance(path, Sequence):
        raise MalformedPathError(f"path must be a string or a sequence of segments, got {type(path).__name__}", path=path)

    segments = tuple(path)
    if not segments:
        raise MalformedPathError("path must be non-empty", path=path)
    for segment in segments:
        if is_index(segment):
            if segment < 0:
                raise MalformedPathError(f"index segments must be non-negative, got {segment}", path=path)
        elif not isinstance(segment, str) or not segment:
            raise MalformedPathError(f"invalid path segment {segment!r}", path=path)
    return segments


def format_path(segments: Sequence[Segment]) -> str:
    """Inverse of :func:`parse_path` for string keys without separators."""
    return PATH_SEPARATOR.join(str(segment) for segment in segments)


# ---------------------------------------------------------------------------
# Schema-aware validation
# ---------------------------------------------------------------------------


def _unwrap(annotation: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` wrappers.

    Returns ``Any`` for unions of several concrete types: the walk stops
    validating there rather than guessing a branch.
    """
    while True:
        origin = typing.get_origin(annotation)
        if origin is Annotated:
            annotation = typing.get_args(annotation)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(members) != 1:
                return Any
            annotation = members[0]
            continue
        return annotation


def _model_field(model: type[BaseModel], key: str) -> Any:
    fields = model.model_fields
    info = fields.get(key)
    if info is None:
        for candidate in fields.values():
            if candidate.alias == key:
                info = candidate
                break
    if info is None:
        return None
    return info.annotation if info.annotation is not None else Any


def validate_path_for_model(model: type[BaseModel], path: PathLike) -> tuple[Segment, ...]:
    """Parse *path* and check each segment against *model*'s declared shape.

    Nested models, ``list``/``tuple`` and ``dict`` annotations are followed.
    ``Any`` or ambiguous unions end the check and accept the remainder.
    """
    segments = parse_path(path)
    current: Any = model
    for position, segment in enumerate(segments):
        current = _unwrap(current)
        if current is Any:
            break

        origin = typing.get_origin(current) or current
        walked = format_path(segments[: position + 1])

        if isinstance(origin, type) and issubclass(origin, BaseModel):
            if is_index(segment):
                raise MalformedPathError(f"{walked!r}: {origin.__name__} is not a sequence", path=path)
            annotation = _model_field(origin, segment)
            if annotation is None:
                raise MalformedPathError(f"{walked!r}: {origin.__name__} has no field {segment!r}", path=path)
            current = annotation
        elif isinstance(origin, type) and issubclass(origin, Mapping):
            if is_index(segment):
                raise MalformedPathError(f"{walked!r}: mapping expects a key", path=path)
            args = typing.get_args(current)
            current = args[1] if len(args) == 2 else Any
        elif isinstance(origin, type) and issubclass(origin, (list, tuple)):
            if not is_index(segment):
                raise MalformedPathError(f"{walked!r}: sequence expects an index", path=path)
            args = typing.get_args(current)
            current = args[0] if args else Any
        else:
            raise MalformedPathError(f"{walked!r}: cannot descend into {getattr(origin, '__name__', origin)!s}", path=path)
    return segments
