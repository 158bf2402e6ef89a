from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel, Field

from pydocbind.exceptions import MalformedPathError
from pydocbind.paths import format_path, is_index, parse_path, validate_path_for_model


def test_parse_path_classifies_keys_and_indices() -> None:
    assert parse_path("a.b.c") == ("a", "b", "c")
    assert parse_path("list.1") == ("list", 1)
    assert parse_path("rows.10.cells.0") == ("rows", 10, "cells", 0)


def test_parse_path_only_unsigned_digits_are_indices() -> None:
    assert parse_path("-1") == ("-1",)
    assert parse_path("1e3") == ("1e3",)
    assert parse_path("007") == (7,)
    assert parse_path("a b") == ("a b",)


@pytest.mark.parametrize("path", ["", ".a", "a.", "a..b", "."])
def test_parse_path_rejects_empty_segments(path: str) -> None:
    with pytest.raises(MalformedPathError) as excinfo:
        parse_path(path)
    assert excinfo.value.path == path
    # Programmer error: catchable as a plain ValueError too.
    assert isinstance(excinfo.value, ValueError)


def test_parse_path_accepts_parsed_segments() -> None:
    assert parse_path(("a", 0, "b")) == ("a", 0, "b")
    assert parse_path(["x"]) == ("x",)


@pytest.mark.parametrize("path", [(), ("a", -1), ("",), ("a", True), ("a", 1.5)])
def test_parse_path_rejects_bad_segment_sequences(path: Any) -> None:
    with pytest.raises(MalformedPathError):
        parse_path(path)


def test_parse_path_rejects_non_path_types() -> None:
    with pytest.raises(MalformedPathError):
        parse_path(5)  # type: ignore[arg-type]
    with pytest.raises(MalformedPathError):
        parse_path(b"a.b")  # type: ignore[arg-type]


def test_is_index_excludes_bool() -> None:
    assert is_index(0)
    assert not is_index("0")
    assert not is_index(True)


def test_format_path_round_trips_simple_paths() -> None:
    assert format_path(parse_path("a.0.b")) == "a.0.b"


class _Address(BaseModel):
    lines: list[str] = Field(default_factory=list)
    city: str | None = None


class _User(BaseModel):
    name: str
    address: _Address | None = None
    tags: dict[str, int] = Field(default_factory=dict)
    extra: Any = None
    nick: str = Field(default="", alias="nickName")


@pytest.mark.parametrize(
    "path",
    [
        "name",
        "address.city",
        "address.lines.0",
        "tags.anything",
        "extra.whatever.0.deep",
        "nick",
        "nickName",
    ],
)
def test_validate_path_for_model_accepts_declared_paths(path: str) -> None:
    assert validate_path_for_model(_User, path) == parse_path(path)


@pytest.mark.parametrize(
    "path",
    [
        "missing",
        "address.zip",
        "address.lines.first",
        "name.first",
        "0",
        "tags.a.b",
    ],
)
def test_validate_path_for_model_rejects_undeclared_paths(path: str) -> None:
    with pytest.raises(MalformedPathError):
        validate_path_for_model(_User, path)


def test_validate_path_for_model_still_rejects_malformed_paths() -> None:
    with pytest.raises(MalformedPathError):
        validate_path_for_model(_User, "address..city")
