"""Registry Events — append-only notification log for successful mutations.

Invariants:
    - Events are appended only after a mutation has fully committed; a mutation
      rolled back because its snapshot could not be saved takes its events with it
    - Sequence numbers increase by one per event and are never reused
    - Events never gate or alter control flow
    - Bounded capacity: oldest events drop first, sequence numbers keep counting

Design Decisions:
    - In-memory deque over a DB table: the log is observational, a lost tail on
      restart is acceptable
    - Logging happens in the emitter (OnsRegistry), not here — the log stays pure
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from onsregistry.core.domain_types import CallerId, EntityKey, EventKind


@dataclass(frozen=True)
class RegistryEvent:
    """One creation/deletion/update notification."""
    sequence: int
    kind: EventKind
    caller: CallerId
    keys: dict[str, EntityKey]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "sequence": self.sequence,
            "kind": self.kind.value,
            "caller": self.caller,
            "keys": dict(self.keys),
            "timestamp": self.timestamp.isoformat(),
        }


class RegistryEventLog:
    """Bounded append-only event log."""

    def __init__(self, capacity: int = 10_000):
        self._events: deque[RegistryEvent] = deque(maxlen=capacity)
        self._next_sequence = 1

    @property
    def last_sequence(self) -> int:
        return self._next_sequence - 1

    def __len__(self) -> int:
        return len(self._events)

    def append(
        self, kind: EventKind, caller: CallerId, **keys: EntityKey,
    ) -> RegistryEvent:
        event = RegistryEvent(
            sequence=self._next_sequence, kind=kind, caller=caller, keys=keys,
        )
        self._next_sequence += 1
        self._events.append(event)
        return event

    def discard_after(self, sequence: int) -> None:
        """Drop events newer than `sequence` (mutations rolled back). Sequences are not reused."""
        while self._events and self._events[-1].sequence > sequence:
            self._events.pop()

    def since(self, sequence: int = 0, limit: int = 100) -> list[RegistryEvent]:
        """Events with sequence > given sequence, oldest first."""
        result = []
        for event in self._events:
            if event.sequence > sequence:
                result.append(event)
                if len(result) >= limit:
                    break
        return result
