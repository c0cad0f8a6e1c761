"""ONS Record Registry — resolution rules, each bound to exactly one GS1 code.

Invariants:
    - Every record's gs1_code_key names a present GS1 code, and that code's child
      set contains the record key (and vice versa)
    - Records are immutable: no field-level update, only delete + re-add
    - add/delete touch two collections; every check runs before the first mutation,
      so a failed call leaves both collections untouched
    - service_type_key is stored but never validated (asymmetric with gs1_code_key)

Design Decisions:
    - Frozen dataclass for ONSRecord: read accessors hand out the stored object itself
      without exposing a mutation path
    - Validate-then-commit over undo logs: once validation passes, the remaining
      mutations cannot fail on a consistent registry
"""

from dataclasses import dataclass

from onsregistry.core.domain_types import EntityKey, EntityType, MAX_RECORD_FLAGS
from onsregistry.core.entity_set import IndexedEntitySet
from onsregistry.core.errors import (
    DuplicateKeyError, FieldValidationError, NotFoundError,
    RegistryCorruptionError,
)
from onsregistry.core.gs1_code_registry import GS1CodeRegistry


@dataclass(frozen=True)
class ONSRecord:
    """A single NAPTR-like resolution rule."""
    key: EntityKey
    gs1_code_key: EntityKey
    flags: int
    service_type_key: EntityKey
    pattern: str


class ONSRecordRegistry:
    """Indexed set of ONS records, kept in step with the GS1 code child sets."""

    def __init__(self, gs1_codes: GS1CodeRegistry):
        self._gs1_codes = gs1_codes
        self._keys: IndexedEntitySet[EntityKey] = IndexedEntitySet(
            EntityType.ONS_RECORD.value,
        )
        self._records: dict[EntityKey, ONSRecord] = {}

    def count(self) -> int:
        return self._keys.count()

    def contains(self, key: EntityKey) -> bool:
        return self._keys.contains(key)

    def key_at(self, row: int) -> EntityKey:
        return self._keys.key_at(row)

    def keys(self) -> list[EntityKey]:
        return self._keys.keys()

    def get(self, key: EntityKey) -> ONSRecord:
        if not self._keys.contains(key):
            raise NotFoundError(EntityType.ONS_RECORD.value, key)
        return self._records[key]

    def add(
        self,
        key: EntityKey,
        gs1_code_key: EntityKey,
        flags: int,
        service_type_key: EntityKey,
        pattern: str,
    ) -> ONSRecord:
        """Insert a record and register it under its parent code, as one step."""
        if not self._gs1_codes.contains(gs1_code_key):
            raise NotFoundError(EntityType.GS1_CODE.value, gs1_code_key)
        if self._keys.contains(key):
            raise DuplicateKeyError(EntityType.ONS_RECORD.value, key)
        if self._gs1_codes.has_child(gs1_code_key, key):
            raise RegistryCorruptionError(
                f"GS1 code '{gs1_code_key}' already lists unknown record '{key}'",
            )
        if not isinstance(flags, int) or isinstance(flags, bool):
            raise FieldValidationError(
                f"flags must be an integer, got {type(flags).__name__}", "flags",
            )
        if not 0 <= flags <= MAX_RECORD_FLAGS:
            raise FieldValidationError(
                f"flags must be within 0..{MAX_RECORD_FLAGS}, got {flags}", "flags",
            )

        record = ONSRecord(
            key=key, gs1_code_key=gs1_code_key, flags=flags,
            service_type_key=service_type_key, pattern=pattern,
        )
        self._keys.append(key)
        self._gs1_codes.attach_child(gs1_code_key, key)
        self._records[key] = record
        return record

    def delete(self, key: EntityKey) -> ONSRecord:
        """Remove a record from the record set and from its parent's child set."""
        record = self.get(key)
        self.ensure_deletable(key)
        self._gs1_codes.detach_child(record.gs1_code_key, key)
        self._keys.remove_by_swap(key)
        del self._records[key]
        return record

    def ensure_deletable(self, key: EntityKey) -> None:
        """Raise unless delete(key) would succeed. No mutation."""
        record = self.get(key)
        if not self._gs1_codes.contains(record.gs1_code_key):
            raise RegistryCorruptionError(
                f"record '{key}' references missing GS1 code '{record.gs1_code_key}'",
            )
        if not self._gs1_codes.has_child(record.gs1_code_key, key):
            raise RegistryCorruptionError(
                f"GS1 code '{record.gs1_code_key}' does not list record '{key}'",
            )

    def check_consistency(self) -> None:
        """Verify the record set and its agreement with every parent child set."""
        self._keys.check_consistency()
        if set(self._records) != set(self._keys.keys()):
            raise RegistryCorruptionError("record payloads do not match the record set")
        listed = 0
        for code in self._gs1_codes.keys():
            for record_key in self._gs1_codes.child_keys(code):
                listed += 1
                record = self._records.get(record_key)
                if record is None or record.gs1_code_key != code:
                    raise RegistryCorruptionError(
                        f"GS1 code '{code}' lists record '{record_key}' it does not own",
                    )
        if listed != self._keys.count():
            raise RegistryCorruptionError(
                f"{self._keys.count()} records but {listed} child references",
            )
