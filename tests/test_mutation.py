from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any

import pytest

from pydocbind.exceptions import MalformedPathError, TypeMismatchError
from pydocbind.mutation import MAX_SEQUENCE_GAP, MismatchPolicy, NodeKind, apply, apply_many, get_path, node_kind


def _sample() -> dict[str, Any]:
    return {
        "title": "Draft",
        "author": {"name": "Ada", "emails": ["ada@example.com"]},
        "sections": [
            {"heading": "Intro", "tags": ["a"]},
            {"heading": "Body", "tags": ["b", "c"]},
        ],
        "meta": {"views": 3},
    }


def test_creates_nested_maps_from_empty_root() -> None:
    assert apply({}, "a.b.c", 5) == {"a": {"b": {"c": 5}}}


def test_sets_sequence_element_and_clones_only_the_spine() -> None:
    root = {"list": [1, 2, 3], "other": {"k": 1}}

    result = apply(root, "list.1", 9)

    assert result == {"list": [1, 9, 3], "other": {"k": 1}}
    assert result is not root
    assert result["list"] is not root["list"]
    assert result["other"] is root["other"]
    assert root == {"list": [1, 2, 3], "other": {"k": 1}}


def test_sets_map_key_and_replaces_parent_object() -> None:
    root = {"a": {"x": 1, "y": 2}}

    result = apply(root, "a.x", 10)

    assert result == {"a": {"x": 10, "y": 2}}
    assert result["a"] is not root["a"]
    assert root["a"]["x"] == 1


def test_pads_sequence_gaps_with_none() -> None:
    assert apply({"list": []}, "list.3", "v") == {"list": [None, None, None, "v"]}


def test_pads_when_descending_past_the_end() -> None:
    assert apply({"l": []}, "l.2.name", "x") == {"l": [None, None, {"name": "x"}]}


@pytest.mark.parametrize("path", ["l.10000000000", "l.10000000000.name"])
def test_huge_index_is_rejected_before_padding(path: str) -> None:
    root = {"l": []}

    with pytest.raises(MalformedPathError, match="limit"):
        apply(root, path, 1)
    assert root == {"l": []}


def test_padding_up_to_the_gap_limit_is_allowed() -> None:
    result = apply({"l": [0]}, ["l", 1 + MAX_SEQUENCE_GAP], "end")

    assert len(result["l"]) == MAX_SEQUENCE_GAP + 2
    assert result["l"][-1] == "end"
    assert result["l"][1] is None


def test_input_is_never_mutated() -> None:
    root = _sample()
    before = copy.deepcopy(root)

    apply(root, "sections.1.tags.5", "z")
    apply(root, "author.emails.0", "other@example.com")
    apply(root, "brand.new.path", 1)

    assert root == before


def test_siblings_off_the_spine_keep_identity() -> None:
    root = _sample()

    result = apply(root, "sections.1.tags.0", "B")

    assert result["author"] is root["author"]
    assert result["meta"] is root["meta"]
    assert result["sections"][0] is root["sections"][0]
    # Spine nodes are fresh copies.
    assert result["sections"] is not root["sections"]
    assert result["sections"][1] is not root["sections"][1]
    assert result["sections"][1]["tags"] is not root["sections"][1]["tags"]
    assert result["sections"][1]["tags"] == ["B", "c"]


def test_same_edit_twice_is_deep_equal_but_not_identical() -> None:
    root = _sample()

    once = apply(root, "author.name", "Grace")
    twice = apply(once, "author.name", "Grace")

    assert once == twice
    assert once is not twice
    assert once["author"] is not twice["author"]
    assert twice["meta"] is root["meta"]


@pytest.mark.parametrize(
    ("first", "second"),
    [
        (("author.name", "Grace"), ("meta.views", 4)),
        (("sections.0.heading", "Start"), ("sections.1.tags.0", "x")),
        (("title", "Final"), ("fresh.key", [1])),
    ],
)
def test_disjoint_edits_commute(first: tuple[str, Any], second: tuple[str, Any]) -> None:
    root = _sample()

    forward = apply(apply(root, *first), *second)
    backward = apply(apply(root, *second), *first)

    assert forward == backward


def test_overlapping_edits_last_write_wins() -> None:
    root = _sample()

    result = apply_many(root, [("author", {"name": "X"}), ("author.name", "Y")])
    assert result["author"] == {"name": "Y"}

    reversed_order = apply_many(root, [("author.name", "Y"), ("author", {"name": "X"})])
    assert reversed_order["author"] == {"name": "X"}


def test_replace_policy_swaps_mismatched_interior_nodes() -> None:
    assert apply({"a": 5}, "a.b", 1) == {"a": {"b": 1}}
    assert apply({"a": {"x": 1}}, "a.0", "v") == {"a": ["v"]}
    assert apply({"a": [1, 2]}, "a.k", "v") == {"a": {"k": "v"}}
    # Strings are leaves, not sequences.
    assert apply({"s": "abc"}, "s.0", "x") == {"s": ["x"]}


def test_strict_policy_raises_on_mismatched_interior_nodes() -> None:
    with pytest.raises(TypeMismatchError) as excinfo:
        apply({"a": {"b": 5}}, "a.b.c", 1, policy=MismatchPolicy.STRICT)

    assert excinfo.value.position == ("a", "b")
    assert excinfo.value.path == "a.b.c"
    assert isinstance(excinfo.value, TypeError)


def test_strict_policy_still_fills_absent_nodes() -> None:
    root = {"a": None}
    assert apply(root, "a.b", 1, policy=MismatchPolicy.STRICT) == {"a": {"b": 1}}
    assert apply({}, "list.1.x", 1, policy=MismatchPolicy.STRICT) == {"list": [None, {"x": 1}]}


@pytest.mark.parametrize("policy", list(MismatchPolicy))
def test_root_of_wrong_kind_always_raises(policy: MismatchPolicy) -> None:
    with pytest.raises(TypeMismatchError):
        apply({"a": 1}, "0", "x", policy=policy)
    with pytest.raises(TypeMismatchError):
        apply([1, 2], "k", "x", policy=policy)
    with pytest.raises(TypeMismatchError):
        apply("leaf", "k", "x", policy=policy)


def test_sequence_and_absent_roots() -> None:
    assert apply([1, 2], "1", 9) == [1, 9]
    assert apply(None, "a", 1) == {"a": 1}
    assert apply(None, "0", "x") == ["x"]


def test_tuples_and_read_only_mappings_are_cloned_into_mutable_containers() -> None:
    assert apply({"t": (1, 2)}, "t.0", 9) == {"t": [9, 2]}

    frozen = MappingProxyType({"a": 1, "b": {"c": 2}})
    result = apply(frozen, "a", 5)
    assert result == {"a": 5, "b": {"c": 2}}
    assert isinstance(result, dict)
    assert result["b"] is frozen["b"]


def test_accepts_parsed_segments() -> None:
    assert apply({}, ("rows", 0, "id"), 7) == {"rows": [{"id": 7}]}


@pytest.mark.parametrize("path", ["", "a..b", ".a", "a."])
def test_malformed_paths_raise(path: str) -> None:
    with pytest.raises(MalformedPathError):
        apply({}, path, 1)


def test_node_kind_tags() -> None:
    assert node_kind(None) is NodeKind.ABSENT
    assert node_kind({}) is NodeKind.MAP
    assert node_kind([]) is NodeKind.SEQUENCE
    assert node_kind(()) is NodeKind.SEQUENCE
    assert node_kind("abc") is NodeKind.LEAF
    assert node_kind(b"abc") is NodeKind.LEAF
    assert node_kind(0) is NodeKind.LEAF


def test_get_path_reads_without_copying() -> None:
    root = _sample()

    assert get_path(root, "sections.1.tags.1") == "c"
    assert get_path(root, "author") is root["author"]
    assert get_path(root, "author.missing") is None
    assert get_path(root, "sections.9", "fallback") == "fallback"
    assert get_path(root, "title.0") is None
    assert get_path(root, "sections.key") is None
    assert get_path(None, "a", 1) == 1
