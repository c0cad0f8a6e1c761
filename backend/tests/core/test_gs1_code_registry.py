"""GS1CodeRegistry tests — parent table and its per-code child sets.

Tests cover:
    - add/delete existence round-trip and duplicate rejection
    - delete blocked while child records exist
    - child accessors on missing codes and out-of-range rows
    - child sets removed with their code
"""

import pytest

from onsregistry.core.domain_types import EntityKey
from onsregistry.core.errors import (
    DuplicateKeyError, IndexOutOfRangeError, NotFoundError,
    ReferentialIntegrityError,
)
from onsregistry.core.gs1_code_registry import GS1CodeRegistry


def test_add_then_contains():
    codes = GS1CodeRegistry()
    codes.add(EntityKey("CODE1"))
    assert codes.contains("CODE1")
    assert codes.count() == 1
    assert codes.child_count("CODE1") == 0


def test_add_duplicate_raises():
    codes = GS1CodeRegistry()
    codes.add("CODE1")
    with pytest.raises(DuplicateKeyError):
        codes.add("CODE1")
    assert codes.count() == 1


def test_delete_removes_code_and_child_set():
    codes = GS1CodeRegistry()
    codes.add("CODE1")
    codes.delete("CODE1")
    assert not codes.contains("CODE1")
    with pytest.raises(NotFoundError):
        codes.child_count("CODE1")
    codes.check_consistency()


def test_delete_missing_raises_not_found():
    codes = GS1CodeRegistry()
    with pytest.raises(NotFoundError):
        codes.delete("CODE1")


def test_delete_with_children_raises_integrity_error():
    codes = GS1CodeRegistry()
    codes.add("CODE1")
    codes.attach_child("CODE1", "REC1")
    with pytest.raises(ReferentialIntegrityError) as exc:
        codes.delete("CODE1")
    assert exc.value.dependents == 1
    assert codes.contains("CODE1")
    assert codes.child_at("CODE1", 0) == "REC1"


def test_delete_allowed_after_children_detached():
    codes = GS1CodeRegistry()
    codes.add("CODE1")
    codes.attach_child("CODE1", "REC1")
    codes.detach_child("CODE1", "REC1")
    codes.delete("CODE1")
    assert codes.count() == 0


def test_child_at_out_of_range_raises():
    codes = GS1CodeRegistry()
    codes.add("CODE1")
    with pytest.raises(IndexOutOfRangeError):
        codes.child_at("CODE1", 0)


def test_child_accessors_on_missing_code_raise_not_found():
    codes = GS1CodeRegistry()
    with pytest.raises(NotFoundError):
        codes.child_count("MISSING")
    with pytest.raises(NotFoundError):
        codes.child_at("MISSING", 0)


def test_child_sets_are_independent_per_code():
    codes = GS1CodeRegistry()
    codes.add("CODE1")
    codes.add("CODE2")
    codes.attach_child("CODE1", "REC1")
    codes.attach_child("CODE2", "REC2")
    codes.attach_child("CODE2", "REC3")
    assert codes.child_count("CODE1") == 1
    assert codes.child_keys("CODE2") == ["REC2", "REC3"]
    assert not codes.has_child("CODE1", "REC2")


def test_swap_delete_of_codes_keeps_child_sets_attached():
    codes = GS1CodeRegistry()
    for code in ("A", "B", "C"):
        codes.add(code)
    codes.attach_child("C", "REC1")
    codes.delete("A")
    assert codes.keys() == ["C", "B"]
    assert codes.child_keys("C") == ["REC1"]
    codes.check_consistency()
