"""Service Type Registry — descriptions of how to consume a resolved endpoint.

Invariants:
    - add() fails on an already-present key and succeeds on first insert
    - delete() fails when the key is NOT present
    - extends / obsoletes / obsoleted_by are informational: never integrity-checked
    - obsoletes / obsoleted_by are append-only
    - get_documentation() returns None for an unset language, never raises for it

Design Decisions:
    - Guards follow the intended semantics, not the inverted existence checks of the
      registry this one replaces (ADR: the inverted form could never add a first entry)
    - Deleting a service type leaves referencing ONS records alone
      (ADR: service_type_key on records is an unchecked reference)
"""

from dataclasses import dataclass, field
from typing import Iterable

from onsregistry.core.domain_types import EntityKey, EntityType
from onsregistry.core.entity_set import IndexedEntitySet
from onsregistry.core.errors import NotFoundError, RegistryCorruptionError


@dataclass
class ServiceType:
    """Service-type description plus its per-language documentation map."""
    key: EntityKey
    is_abstract: bool = False
    extends: EntityKey | None = None
    wsdl_uri: str = ""
    homepage_uri: str = ""
    documentation: dict[str, str] = field(default_factory=dict)
    obsoletes: list[EntityKey] = field(default_factory=list)
    obsoleted_by: list[EntityKey] = field(default_factory=list)


@dataclass(frozen=True)
class ServiceTypeView:
    """Read-only answer to a (key, language) service-type query."""
    key: EntityKey
    is_abstract: bool
    extends: EntityKey | None
    wsdl_uri: str
    homepage_uri: str
    language_code: str | None
    documentation_location: str | None
    languages: tuple[str, ...]
    obsoletes: tuple[EntityKey, ...]
    obsoleted_by: tuple[EntityKey, ...]


class ServiceTypeRegistry:
    """Indexed set of service types."""

    def __init__(self):
        self._keys: IndexedEntitySet[EntityKey] = IndexedEntitySet(
            EntityType.SERVICE_TYPE.value,
        )
        self._types: dict[EntityKey, ServiceType] = {}

    def count(self) -> int:
        return self._keys.count()

    def contains(self, key: EntityKey) -> bool:
        return self._keys.contains(key)

    def key_at(self, row: int) -> EntityKey:
        return self._keys.key_at(row)

    def keys(self) -> list[EntityKey]:
        return self._keys.keys()

    def add(
        self,
        key: EntityKey,
        is_abstract: bool = False,
        extends: EntityKey | None = None,
        wsdl_uri: str = "",
        homepage_uri: str = "",
        language_code: str | None = None,
        location: str | None = None,
        obsoletes: Iterable[EntityKey] = (),
        obsoleted_by: Iterable[EntityKey] = (),
    ) -> ServiceType:
        """Insert a service type. Documentation entry only when a language is given."""
        service_type = ServiceType(
            key=key, is_abstract=is_abstract, extends=extends,
            wsdl_uri=wsdl_uri, homepage_uri=homepage_uri,
            obsoletes=list(obsoletes), obsoleted_by=list(obsoleted_by),
        )
        if language_code:
            service_type.documentation[language_code] = location or ""
        self._keys.append(key)
        self._types[key] = service_type
        return service_type

    def delete(self, key: EntityKey) -> ServiceType:
        service_type = self._get(key)
        self._keys.remove_by_swap(key)
        del self._types[key]
        return service_type

    def get(self, key: EntityKey, language_code: str | None = None) -> ServiceTypeView:
        service_type = self._get(key)
        return ServiceTypeView(
            key=service_type.key,
            is_abstract=service_type.is_abstract,
            extends=service_type.extends,
            wsdl_uri=service_type.wsdl_uri,
            homepage_uri=service_type.homepage_uri,
            language_code=language_code,
            documentation_location=(
                service_type.documentation.get(language_code) if language_code else None
            ),
            languages=tuple(service_type.documentation),
            obsoletes=tuple(service_type.obsoletes),
            obsoleted_by=tuple(service_type.obsoleted_by),
        )

    def get_documentation(self, key: EntityKey, language_code: str) -> str | None:
        return self._get(key).documentation.get(language_code)

    def set_documentation(self, key: EntityKey, language_code: str, location: str) -> None:
        self._get(key).documentation[language_code] = location

    def append_obsoletes(self, key: EntityKey, obsoleted_key: EntityKey) -> None:
        self._get(key).obsoletes.append(obsoleted_key)

    def append_obsoleted_by(self, key: EntityKey, successor_key: EntityKey) -> None:
        self._get(key).obsoleted_by.append(successor_key)

    def raw(self, key: EntityKey) -> ServiceType:
        """Stored entry itself — for snapshotting only."""
        return self._get(key)

    def _get(self, key: EntityKey) -> ServiceType:
        if not self._keys.contains(key):
            raise NotFoundError(EntityType.SERVICE_TYPE.value, key)
        return self._types[key]

    def check_consistency(self) -> None:
        self._keys.check_consistency()
        if set(self._types) != set(self._keys.keys()):
            raise RegistryCorruptionError(
                "service type payloads do not match the service type set",
            )
