"""Registry events and access gate — tests for the side-channel log and the static gate.

Tests cover:
    - sequence numbering and since() filtering
    - bounded capacity drops oldest events but keeps counting
    - StaticAccessGate owner / authorizer checks
"""

from onsregistry.core.access_gate import StaticAccessGate
from onsregistry.core.domain_types import EventKind
from onsregistry.core.registry_events import RegistryEventLog


def test_sequences_start_at_one_and_increase():
    log = RegistryEventLog()
    first = log.append(EventKind.GS1_CODE_CREATED, "alice", gs1_code="CODE1")
    second = log.append(EventKind.GS1_CODE_DELETED, "owner", gs1_code="CODE1")
    assert first.sequence == 1
    assert second.sequence == 2
    assert log.last_sequence == 2


def test_since_returns_events_after_sequence():
    log = RegistryEventLog()
    for i in range(5):
        log.append(EventKind.GS1_CODE_CREATED, "alice", gs1_code=f"C{i}")
    events = log.since(2)
    assert [e.sequence for e in events] == [3, 4, 5]


def test_since_respects_limit():
    log = RegistryEventLog()
    for i in range(5):
        log.append(EventKind.GS1_CODE_CREATED, "alice", gs1_code=f"C{i}")
    assert [e.sequence for e in log.since(0, limit=2)] == [1, 2]


def test_capacity_drops_oldest():
    log = RegistryEventLog(capacity=3)
    for i in range(5):
        log.append(EventKind.GS1_CODE_CREATED, "alice", gs1_code=f"C{i}")
    assert len(log) == 3
    assert [e.sequence for e in log.since()] == [3, 4, 5]
    assert log.last_sequence == 5


def test_discard_after_drops_newer_events_and_keeps_counting():
    log = RegistryEventLog()
    for i in range(4):
        log.append(EventKind.GS1_CODE_CREATED, "alice", gs1_code=f"C{i}")
    log.discard_after(2)
    assert [e.sequence for e in log.since()] == [1, 2]
    assert log.append(EventKind.GS1_CODE_DELETED, "owner", gs1_code="C0").sequence == 5


def test_event_to_dict_is_json_ready():
    log = RegistryEventLog()
    event = log.append(
        EventKind.ONS_RECORD_CREATED, "alice",
        ons_record="REC1", service_type="SVC1", gs1_code="CODE1",
    )
    data = event.to_dict()
    assert data["kind"] == "ons_record_created"
    assert data["caller"] == "alice"
    assert data["keys"] == {
        "ons_record": "REC1", "service_type": "SVC1", "gs1_code": "CODE1",
    }
    assert isinstance(data["timestamp"], str)


def test_static_gate_owner_is_authorized():
    gate = StaticAccessGate(owner="owner", authorizers=frozenset({"writer"}))
    assert gate.is_owner("owner")
    assert gate.is_authorized("owner")
    assert gate.is_authorized("writer")
    assert not gate.is_owner("writer")
    assert not gate.is_authorized("stranger")
