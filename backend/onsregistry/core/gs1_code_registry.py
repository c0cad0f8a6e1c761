"""GS1 Code Registry — parent table; each code owns the set of ONS records referencing it.

Invariants:
    - Every present code has exactly one child set (possibly empty)
    - A code with a non-empty child set cannot be deleted
    - Child sets follow the same swap-delete discipline as the code set

Design Decisions:
    - Access control and notifications live in OnsRegistry, not here
      (ADR: registries stay pure bookkeeping, composition over inheritance)
    - attach_child/detach_child are called only by ONSRecordRegistry, after it has
      validated the whole operation
"""

from onsregistry.core.domain_types import EntityKey, EntityType
from onsregistry.core.entity_set import IndexedEntitySet
from onsregistry.core.errors import (
    NotFoundError, ReferentialIntegrityError, RegistryCorruptionError,
)


class GS1CodeRegistry:
    """Indexed set of GS1 codes plus a per-code child set of record keys."""

    def __init__(self):
        self._codes: IndexedEntitySet[EntityKey] = IndexedEntitySet(
            EntityType.GS1_CODE.value,
        )
        self._children: dict[EntityKey, IndexedEntitySet[EntityKey]] = {}

    def count(self) -> int:
        return self._codes.count()

    def contains(self, key: EntityKey) -> bool:
        return self._codes.contains(key)

    def key_at(self, row: int) -> EntityKey:
        return self._codes.key_at(row)

    def keys(self) -> list[EntityKey]:
        return self._codes.keys()

    def add(self, key: EntityKey) -> int:
        pos = self._codes.append(key)
        self._children[key] = IndexedEntitySet(EntityType.ONS_RECORD.value)
        return pos

    def delete(self, key: EntityKey) -> None:
        self.ensure_deletable(key)
        self._codes.remove_by_swap(key)
        del self._children[key]

    def ensure_deletable(self, key: EntityKey) -> None:
        """Raise unless delete(key) would succeed. No mutation."""
        dependents = self.child_count(key)
        if dependents:
            raise ReferentialIntegrityError(
                EntityType.GS1_CODE.value, key, dependents,
            )

    # ─── Child set ───────────────────────────────────────────────

    def child_count(self, key: EntityKey) -> int:
        return self._child_set(key).count()

    def child_at(self, key: EntityKey, row: int) -> EntityKey:
        return self._child_set(key).key_at(row)

    def child_keys(self, key: EntityKey) -> list[EntityKey]:
        return self._child_set(key).keys()

    def has_child(self, key: EntityKey, record_key: EntityKey) -> bool:
        return self._child_set(key).contains(record_key)

    def attach_child(self, key: EntityKey, record_key: EntityKey) -> int:
        return self._child_set(key).append(record_key)

    def detach_child(self, key: EntityKey, record_key: EntityKey) -> None:
        self._child_set(key).remove_by_swap(record_key)

    def _child_set(self, key: EntityKey) -> IndexedEntitySet[EntityKey]:
        if not self._codes.contains(key):
            raise NotFoundError(EntityType.GS1_CODE.value, key)
        return self._children[key]

    def check_consistency(self) -> None:
        """Verify the code set and every child set (RegistryCorruptionError on failure)."""
        self._codes.check_consistency()
        if set(self._children) != set(self._codes.keys()):
            raise RegistryCorruptionError(
                "GS1 code child sets do not match the code set",
            )
        for children in self._children.values():
            children.check_consistency()
