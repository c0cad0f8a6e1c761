"""ServiceTypeRegistry tests — descriptive entries with per-language documentation.

Tests cover:
    - add succeeds on first insert and fails on duplicate
    - delete succeeds when present and fails when absent
    - documentation lookup returns None for unset languages
    - obsoletes / obsoleted_by append-only behaviour

The guards tested here deliberately differ from the registry this one replaces,
whose add required the key to already exist and whose delete required it to be
absent; those inverted checks could never admit a first entry.
"""

import pytest

from onsregistry.core.errors import DuplicateKeyError, NotFoundError
from onsregistry.core.service_type_registry import ServiceTypeRegistry


def _add_default(types: ServiceTypeRegistry, key: str = "SVC1") -> None:
    types.add(
        key, is_abstract=False, extends="BASE",
        wsdl_uri="http://example.com/svc.wsdl",
        homepage_uri="http://example.com",
        language_code="en", location="http://example.com/doc/en",
        obsoletes=["OLD1"], obsoleted_by=[],
    )


def test_first_insert_succeeds():
    types = ServiceTypeRegistry()
    _add_default(types)
    assert types.contains("SVC1")
    assert types.count() == 1


def test_duplicate_insert_fails():
    types = ServiceTypeRegistry()
    _add_default(types)
    with pytest.raises(DuplicateKeyError):
        _add_default(types)
    assert types.count() == 1


def test_delete_present_succeeds():
    types = ServiceTypeRegistry()
    _add_default(types)
    types.delete("SVC1")
    assert not types.contains("SVC1")
    types.check_consistency()


def test_delete_absent_fails():
    types = ServiceTypeRegistry()
    with pytest.raises(NotFoundError):
        types.delete("SVC1")


def test_get_returns_fields_and_language_location():
    types = ServiceTypeRegistry()
    _add_default(types)
    view = types.get("SVC1", "en")
    assert view.extends == "BASE"
    assert view.wsdl_uri == "http://example.com/svc.wsdl"
    assert view.documentation_location == "http://example.com/doc/en"
    assert view.languages == ("en",)
    assert view.obsoletes == ("OLD1",)


def test_documentation_for_unset_language_is_none():
    types = ServiceTypeRegistry()
    _add_default(types)
    assert types.get_documentation("SVC1", "fr") is None
    assert types.get("SVC1", "fr").documentation_location is None


def test_add_without_language_stores_no_documentation():
    types = ServiceTypeRegistry()
    types.add("SVC1")
    assert types.get("SVC1").languages == ()


def test_set_documentation_adds_language():
    types = ServiceTypeRegistry()
    _add_default(types)
    types.set_documentation("SVC1", "fr", "http://example.com/doc/fr")
    assert types.get_documentation("SVC1", "fr") == "http://example.com/doc/fr"
    assert types.get_documentation("SVC1", "en") == "http://example.com/doc/en"


def test_obsoletes_lists_only_grow():
    types = ServiceTypeRegistry()
    _add_default(types)
    types.append_obsoletes("SVC1", "OLD2")
    types.append_obsoleted_by("SVC1", "NEW1")
    view = types.get("SVC1")
    assert view.obsoletes == ("OLD1", "OLD2")
    assert view.obsoleted_by == ("NEW1",)


def test_view_is_detached_from_stored_lists():
    types = ServiceTypeRegistry()
    _add_default(types)
    view = types.get("SVC1")
    types.append_obsoletes("SVC1", "OLD2")
    assert view.obsoletes == ("OLD1",)


def test_get_missing_raises_not_found():
    types = ServiceTypeRegistry()
    with pytest.raises(NotFoundError):
        types.get("SVC1", "en")
