from __future__ import annotations

import pytest

from lib_connection_resolver.domain.descriptors import (
    NamedReference,
    PartialMap,
    UrlString,
    as_descriptor,
    drop_blank,
    is_blank,
)


def test_as_descriptor_lifts_plain_values() -> None:
    assert as_descriptor("sqlite3:db") == UrlString("sqlite3:db")
    assert as_descriptor({"adapter": "sqlite3"}) == PartialMap({"adapter": "sqlite3"})
    reference = NamedReference("production")
    assert as_descriptor(reference) is reference


def test_as_descriptor_rejects_unknown_types() -> None:
    with pytest.raises(TypeError, match="unsupported connection descriptor: list"):
        as_descriptor(["sqlite3:db"])


def test_partial_map_is_detached_from_caller_dict() -> None:
    source = {"adapter": "sqlite3"}
    descriptor = PartialMap(source)
    source["database"] = "late"
    assert "database" not in descriptor.values
    with pytest.raises(TypeError):
        descriptor.values["adapter"] = "mysql2"  # type: ignore[index]


def test_descriptors_are_frozen() -> None:
    reference = NamedReference("production")
    with pytest.raises(AttributeError):
        reference.name = "test"  # type: ignore[misc]


def test_blank_policy() -> None:
    assert is_blank(None)
    assert is_blank("")
    assert is_blank(" \t")
    assert not is_blank(0)
    assert not is_blank("0")
    assert drop_blank({"a": "", "b": None, "c": 5, "d": "x"}) == {"c": 5, "d": "x"}
