"""ONS Registry — single owning object for the three registry tables.

Invariants:
    - Every public operation runs under one lock: exactly one call in flight at a time
    - Gated deletes consult AccessGate.is_owner before any validation or mutation
    - Mutations are all-or-nothing: validate fully, then commit, then notify
    - Events are appended only after commit and never influence the outcome
    - Queries never consult AccessGate

Design Decisions:
    - RLock over an actor/queue: calls are synchronous, bounded and in-memory,
      so a plain critical section gives the total ordering the tables need
    - Caller identity is an explicit argument on every mutation (no ambient caller)
    - require_authorized_writers gates additive mutations on is_authorized; off by
      default so add operations stay open
"""

import logging
import threading
from typing import Iterable

from onsregistry.core.domain_types import CallerId, EntityKey, EventKind
from onsregistry.core.errors import UnauthorizedError
from onsregistry.core.gs1_code_registry import GS1CodeRegistry
from onsregistry.core.ons_record_registry import ONSRecord, ONSRecordRegistry
from onsregistry.core.registry_events import RegistryEvent, RegistryEventLog
from onsregistry.core.registry_snapshot import (
    tables_from_snapshot, tables_to_snapshot,
)
from onsregistry.core.repository_protocols import AccessGate
from onsregistry.core.service_type_registry import (
    ServiceTypeRegistry, ServiceTypeView,
)

logger = logging.getLogger(__name__)


class OnsRegistry:
    """GS1 codes, ONS records and service types behind one critical section."""

    def __init__(
        self,
        gate: AccessGate,
        event_log: RegistryEventLog | None = None,
        require_authorized_writers: bool = False,
    ):
        self.gate = gate
        self.events = event_log if event_log is not None else RegistryEventLog()
        self.require_authorized_writers = require_authorized_writers
        self.gs1_codes = GS1CodeRegistry()
        self.ons_records = ONSRecordRegistry(self.gs1_codes)
        self.service_types = ServiceTypeRegistry()
        self._lock = threading.RLock()

    # ─── GS1 codes ───────────────────────────────────────────────

    def add_gs1_code(self, caller: CallerId, key: EntityKey) -> None:
        with self._lock:
            self._require_writer(caller)
            self.gs1_codes.add(key)
            self._notify(EventKind.GS1_CODE_CREATED, caller, gs1_code=key)

    def delete_gs1_code(self, caller: CallerId, key: EntityKey) -> None:
        with self._lock:
            self._require_owner(caller)
            self.gs1_codes.delete(key)
            self._notify(EventKind.GS1_CODE_DELETED, caller, gs1_code=key)

    def is_gs1_code(self, key: EntityKey) -> bool:
        with self._lock:
            return self.gs1_codes.contains(key)

    def get_gs1_code_count(self) -> int:
        with self._lock:
            return self.gs1_codes.count()

    def get_gs1_code_at(self, row: int) -> EntityKey:
        with self._lock:
            return self.gs1_codes.key_at(row)

    def get_gs1_codes(self) -> list[EntityKey]:
        with self._lock:
            return self.gs1_codes.keys()

    def get_gs1_code_child_count(self, key: EntityKey) -> int:
        with self._lock:
            return self.gs1_codes.child_count(key)

    def get_gs1_code_child_at(self, key: EntityKey, row: int) -> EntityKey:
        with self._lock:
            return self.gs1_codes.child_at(key, row)

    def get_gs1_code_children(self, key: EntityKey) -> list[EntityKey]:
        with self._lock:
            return self.gs1_codes.child_keys(key)

    # ─── ONS records ─────────────────────────────────────────────

    def add_ons_record(
        self,
        caller: CallerId,
        key: EntityKey,
        gs1_code_key: EntityKey,
        flags: int,
        service_type_key: EntityKey,
        pattern: str,
    ) -> ONSRecord:
        with self._lock:
            self._require_writer(caller)
            record = self.ons_records.add(
                key, gs1_code_key, flags, service_type_key, pattern,
            )
            self._notify(
                EventKind.ONS_RECORD_CREATED, caller,
                ons_record=key, service_type=service_type_key,
                gs1_code=gs1_code_key,
            )
            return record

    def delete_ons_record(self, caller: CallerId, key: EntityKey) -> None:
        with self._lock:
            self._require_owner(caller)
            record = self.ons_records.delete(key)
            self._notify(
                EventKind.ONS_RECORD_DELETED, caller,
                ons_record=key, gs1_code=record.gs1_code_key,
            )

    def is_ons_record(self, key: EntityKey) -> bool:
        with self._lock:
            return self.ons_records.contains(key)

    def get_ons_record(self, key: EntityKey) -> ONSRecord:
        with self._lock:
            return self.ons_records.get(key)

    def get_ons_record_count(self) -> int:
        with self._lock:
            return self.ons_records.count()

    def get_ons_records(self) -> list[EntityKey]:
        with self._lock:
            return self.ons_records.keys()

    def get_ons_record_at(self, row: int) -> EntityKey:
        with self._lock:
            return self.ons_records.key_at(row)

    # ─── Service types ───────────────────────────────────────────

    def add_service_type(
        self,
        caller: CallerId,
        key: EntityKey,
        is_abstract: bool = False,
        extends: EntityKey | None = None,
        wsdl_uri: str = "",
        homepage_uri: str = "",
        language_code: str | None = None,
        location: str | None = None,
        obsoletes: Iterable[EntityKey] = (),
        obsoleted_by: Iterable[EntityKey] = (),
    ) -> None:
        with self._lock:
            self._require_writer(caller)
            self.service_types.add(
                key, is_abstract, extends, wsdl_uri, homepage_uri,
                language_code, location, obsoletes, obsoleted_by,
            )
            self._notify(EventKind.SERVICE_TYPE_CREATED, caller, service_type=key)

    def delete_service_type(self, caller: CallerId, key: EntityKey) -> None:
        with self._lock:
            self._require_owner(caller)
            self.service_types.delete(key)
            self._notify(EventKind.SERVICE_TYPE_DELETED, caller, service_type=key)

    def add_service_type_documentation(
        self, caller: CallerId, key: EntityKey, language_code: str, location: str,
    ) -> None:
        with self._lock:
            self._require_writer(caller)
            self.service_types.set_documentation(key, language_code, location)
            self._notify(EventKind.SERVICE_TYPE_UPDATED, caller, service_type=key)

    def add_service_type_obsoletes(
        self, caller: CallerId, key: EntityKey, obsoleted_key: EntityKey,
    ) -> None:
        with self._lock:
            self._require_writer(caller)
            self.service_types.append_obsoletes(key, obsoleted_key)
            self._notify(
                EventKind.SERVICE_TYPE_UPDATED, caller,
                service_type=key, obsoletes=obsoleted_key,
            )

    def add_service_type_obsoleted_by(
        self, caller: CallerId, key: EntityKey, successor_key: EntityKey,
    ) -> None:
        with self._lock:
            self._require_writer(caller)
            self.service_types.append_obsoleted_by(key, successor_key)
            self._notify(
                EventKind.SERVICE_TYPE_UPDATED, caller,
                service_type=key, obsoleted_by=successor_key,
            )

    def is_service_type(self, key: EntityKey) -> bool:
        with self._lock:
            return self.service_types.contains(key)

    def get_service_type(
        self, key: EntityKey, language_code: str | None = None,
    ) -> ServiceTypeView:
        with self._lock:
            return self.service_types.get(key, language_code)

    def get_service_type_documentation(
        self, key: EntityKey, language_code: str,
    ) -> str | None:
        with self._lock:
            return self.service_types.get_documentation(key, language_code)

    def get_service_type_count(self) -> int:
        with self._lock:
            return self.service_types.count()

    def get_service_types(self) -> list[EntityKey]:
        with self._lock:
            return self.service_types.keys()

    def get_service_type_at(self, row: int) -> EntityKey:
        with self._lock:
            return self.service_types.key_at(row)

    # ─── Events / integrity ──────────────────────────────────────

    def events_since(self, sequence: int = 0, limit: int = 100) -> list[RegistryEvent]:
        with self._lock:
            return self.events.since(sequence, limit)

    def check_consistency(self) -> None:
        """Raise RegistryCorruptionError if any cross-table invariant is broken."""
        with self._lock:
            self.gs1_codes.check_consistency()
            self.ons_records.check_consistency()
            self.service_types.check_consistency()

    def to_snapshot(self) -> dict:
        with self._lock:
            return tables_to_snapshot(
                self.gs1_codes, self.ons_records, self.service_types,
            )

    def restore(self, snapshot: dict, events_after: int | None = None) -> None:
        """Replace all three tables with an earlier to_snapshot() result.

        Events newer than `events_after` are discarded with the state they
        described. The tables are swapped only once the snapshot has loaded.
        """
        with self._lock:
            gs1_codes = GS1CodeRegistry()
            ons_records = ONSRecordRegistry(gs1_codes)
            service_types = ServiceTypeRegistry()
            tables_from_snapshot(snapshot, gs1_codes, ons_records, service_types)
            self.gs1_codes = gs1_codes
            self.ons_records = ons_records
            self.service_types = service_types
            if events_after is not None:
                self.events.discard_after(events_after)
            logger.warning(
                f"Registry restored to an earlier snapshot "
                f"(events after {events_after} discarded)",
            )

    @classmethod
    def from_snapshot(
        cls,
        data: dict | None,
        gate: AccessGate,
        event_log: RegistryEventLog | None = None,
        require_authorized_writers: bool = False,
    ) -> "OnsRegistry":
        """Build a registry from a stored snapshot. Restoration emits no events."""
        registry = cls(gate, event_log, require_authorized_writers)
        tables_from_snapshot(
            data or {}, registry.gs1_codes, registry.ons_records,
            registry.service_types,
        )
        registry.check_consistency()
        return registry

    # ─── Internals ───────────────────────────────────────────────

    def _require_owner(self, caller: CallerId) -> None:
        if not self.gate.is_owner(caller):
            raise UnauthorizedError(caller, "the registry owner")

    def _require_writer(self, caller: CallerId) -> None:
        if self.require_authorized_writers and not self.gate.is_authorized(caller):
            raise UnauthorizedError(caller, "an authorized writer")

    def _notify(self, kind: EventKind, caller: CallerId, **keys: EntityKey) -> None:
        event = self.events.append(kind, caller, **keys)
        logger.info(
            f"{kind.value} by {caller}: {keys}",
            extra={
                "caller": caller, "event_kind": kind.value,
                "event_sequence": event.sequence,
            },
        )
