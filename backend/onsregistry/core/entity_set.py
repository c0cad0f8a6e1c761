"""Indexed Entity Set — dense key list plus key → position index.

Invariants:
    - For every present key k: keys[index[k]] == k
    - Absent keys have no index entry (contains() never trusts a stale entry)
    - append() and remove_by_swap() are O(1); neither leaves gaps in the list
    - remove_by_swap() does NOT preserve insertion order

Design Decisions:
    - Arena-plus-index over an ordered dict: row access by position (key_at) is O(1),
      which the row-based query API needs
    - contains() cross-checks list and index so a corrupted index cannot report
      a phantom key
"""

from typing import Generic, Hashable, Iterator, TypeVar

from onsregistry.core.errors import (
    DuplicateKeyError, IndexOutOfRangeError, NotFoundError,
    RegistryCorruptionError,
)

K = TypeVar("K", bound=Hashable)


class IndexedEntitySet(Generic[K]):
    """Set of keys with O(1) membership, append, positional access and removal."""

    def __init__(self, entity_type: str = "entity"):
        self.entity_type = entity_type
        self._keys: list[K] = []
        self._index: dict[K, int] = {}

    def count(self) -> int:
        return len(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._keys))

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def contains(self, key: K) -> bool:
        """True iff key is present. False on an empty set, whatever the index holds."""
        if not self._keys:
            return False
        pos = self._index.get(key)
        if pos is None or pos >= len(self._keys):
            return False
        return self._keys[pos] == key

    def append(self, key: K) -> int:
        """Add key at the end. Returns its position."""
        if self.contains(key):
            raise DuplicateKeyError(self.entity_type, str(key))
        self._keys.append(key)
        pos = len(self._keys) - 1
        self._index[key] = pos
        return pos

    def remove_by_swap(self, key: K) -> None:
        """Remove key in O(1) by moving the last key into its slot."""
        if not self.contains(key):
            raise NotFoundError(self.entity_type, str(key))
        pos = self._index[key]
        last = self._keys[-1]
        # Self-swap when key is last: overwritten then popped
        self._keys[pos] = last
        self._index[last] = pos
        self._keys.pop()
        del self._index[key]

    def position_of(self, key: K) -> int:
        if not self.contains(key):
            raise NotFoundError(self.entity_type, str(key))
        return self._index[key]

    def key_at(self, row: int) -> K:
        if row < 0 or row >= len(self._keys):
            raise IndexOutOfRangeError(row, len(self._keys))
        return self._keys[row]

    def keys(self) -> list[K]:
        """Copy of the dense key list in physical order."""
        return list(self._keys)

    def check_consistency(self) -> None:
        """Raise RegistryCorruptionError if the list/index cross-invariant is broken."""
        if len(self._index) != len(self._keys):
            raise RegistryCorruptionError(
                f"{self.entity_type} index holds {len(self._index)} entries "
                f"for {len(self._keys)} keys",
            )
        for pos, key in enumerate(self._keys):
            if self._index.get(key) != pos:
                raise RegistryCorruptionError(
                    f"{self.entity_type} '{key}' recorded at "
                    f"{self._index.get(key)} but stored at {pos}",
                )
