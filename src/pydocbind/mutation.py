"""Copy-on-write edits of nested documents.

:func:`apply` returns a new root in which only the spine (the nodes on
the path from the root to the edited leaf) is copied. Every subtree off
the spine is the very same object in the input and the output, so
callers can detect changes by identity and an edit costs O(depth) shallow
copies rather than a deep copy of the document.

Nodes are classified once into a :class:`NodeKind` and every clone or
write dispatches on that tag:

* ``MAP`` -- any :class:`collections.abc.Mapping`, cloned into a ``dict``
* ``SEQUENCE`` -- ``list`` or ``tuple``, cloned into a ``list``
* ``ABSENT`` -- ``None``
* ``LEAF`` -- everything else, including ``str`` and ``bytes``

When an interior position holds the wrong kind of node the
:class:`MismatchPolicy` decides: ``REPLACE`` (the default) swaps in a fresh
empty container, ``STRICT`` raises :class:`TypeMismatchError`. The root
itself can never be replaced; a root of the wrong kind always raises.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydocbind.exceptions import MalformedPathError, TypeMismatchError
from pydocbind.paths import PathLike, Segment, format_path, is_index, parse_path


class NodeKind(enum.Enum):
    MAP = "map"
    SEQUENCE = "sequence"
    LEAF = "leaf"
    ABSENT = "absent"


class MismatchPolicy(enum.StrEnum):
    REPLACE = "replace"
    STRICT = "strict"


def node_kind(node: Any) -> NodeKind:
    """Classify *node* for clone/descend dispatch."""
    if node is None:
        return NodeKind.ABSENT
    if isinstance(node, Mapping):
        return NodeKind.MAP
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.LEAF


def required_kind(segment: Segment) -> NodeKind:
    """Container kind a segment selects into."""
    return NodeKind.SEQUENCE if is_index(segment) else NodeKind.MAP


_CLONERS: dict[NodeKind, Callable[[Any], Any]] = {
    NodeKind.MAP: dict,
    NodeKind.SEQUENCE: list,
}


MAX_SEQUENCE_GAP = 10_000
"""Most ``None`` padding a single write may append to a sequence."""


def _set_item(
    container: Any,
    segment: Segment,
    value: Any,
    *,
    path: str,
    position: tuple[Segment, ...],
) -> None:
    """Write into a freshly cloned container, growing sequences with ``None``."""
    if isinstance(container, list):
        index = int(segment)
        gap = index - len(container)
        if gap > MAX_SEQUENCE_GAP:
            raise MalformedPathError(
                f"{path!r}: index {index} at {format_path(position)!r} would pad {gap} elements "
                f"(limit {MAX_SEQUENCE_GAP})",
                path=path,
            )
        if gap >= 0:
            container.extend([None] * (gap + 1))
        container[index] = value
    else:
        container[segment] = value


def _get_item(container: Any, segment: Segment) -> Any:
    if isinstance(container, list):
        index = int(segment)
        return container[index] if index < len(container) else None
    return container.get(segment)


def _prepare_child(
    child: Any,
    wanted: NodeKind,
    *,
    policy: MismatchPolicy,
    path: str,
    position: tuple[Segment, ...],
) -> Any:
    """Return a fresh container of kind *wanted* to stand in for *child*."""
    kind = node_kind(child)
    if kind is wanted:
        return _CLONERS[wanted](child)
    if kind is not NodeKind.ABSENT and policy is MismatchPolicy.STRICT:
        raise TypeMismatchError(
            f"{path!r}: expected a {wanted.value} at {format_path(position)!r}, found a {kind.value}",
            path=path,
            position=position,
        )
    return _CLONERS[wanted](())


def apply(
    root: Any,
    path: PathLike,
    value: Any,
    *,
    policy: MismatchPolicy = MismatchPolicy.REPLACE,
) -> Any:
    """Return a copy of *root* with *value* written at *path*.

    The input is never mutated. Sequences written or descended past their
    end are padded with ``None``.

    Raises
    ------
    MalformedPathError
        The path is empty, has an empty segment, or has an index that
        would pad a sequence by more than :data:`MAX_SEQUENCE_GAP`.
    TypeMismatchError
        The root is not the kind of container the first segment selects
        into, or (``STRICT`` only) an interior node is of the wrong kind.
    """
    segments = parse_path(path)
    path_text = path if isinstance(path, str) else format_path(segments)

    root_kind = node_kind(root)
    wanted = required_kind(segments[0])
    if root_kind is NodeKind.ABSENT:
        new_root = _CLONERS[wanted](())
    elif root_kind is wanted:
        new_root = _CLONERS[wanted](root)
    else:
        raise TypeMismatchError(
            f"{path_text!r}: root is a {root_kind.value}, segment {segments[0]!r} needs a {wanted.value}",
            path=path_text,
            position=(),
        )

    current = new_root
    for depth, segment in enumerate(segments[:-1]):
        child = _prepare_child(
            _get_item(current, segment),
            required_kind(segments[depth + 1]),
            policy=policy,
            path=path_text,
            position=segments[: depth + 1],
        )
        _set_item(current, segment, child, path=path_text, position=segments[: depth + 1])
        current = child

    _set_item(current, segments[-1], value, path=path_text, position=segments)
    return new_root


def apply_many(
    root: Any,
    edits: Iterable[tuple[PathLike, Any]],
    *,
    policy: MismatchPolicy = MismatchPolicy.REPLACE,
) -> Any:
    """Apply ``(path, value)`` edits in order; later edits win on overlap."""
    for path, value in edits:
        root = apply(root, path, value, policy=policy)
    return root


def get_path(root: Any, path: PathLike, default: Any = None) -> Any:
    """Read the value at *path* without copying anything.

    Missing keys, out-of-range indices and nodes of the wrong kind all
    yield *default*.
    """
    current = root
    for segment in parse_path(path):
        kind = node_kind(current)
        if kind is not required_kind(segment):
            return default
        if kind is NodeKind.SEQUENCE:
            if segment >= len(current):
                return default
            current = current[segment]
        else:
            if segment not in current:
                return default
            current = current[segment]
    return current
