"""Event & Health Routes — notification log over HTTP and readiness probes."""

from onsregistry.api.dependencies import build_registry
from onsregistry.config import Settings

OWNER = {"X-Caller-Id": "owner"}
ALICE = {"X-Caller-Id": "alice"}


async def test_events_listed_in_order(client):
    await client.post("/api/v1/gs1-codes", json={"key": "CODE1"}, headers=ALICE)
    await client.delete("/api/v1/gs1-codes/CODE1", headers=OWNER)

    res = await client.get("/api/v1/events")
    body = res.json()
    assert [e["kind"] for e in body["events"]] == [
        "gs1_code_created", "gs1_code_deleted",
    ]
    assert body["events"][0]["caller"] == "alice"
    assert body["events"][1]["keys"] == {"gs1_code": "CODE1"}
    assert body["last_sequence"] == 2


async def test_events_since_filters(client):
    for key in ("A", "B", "C"):
        await client.post("/api/v1/gs1-codes", json={"key": key}, headers=ALICE)
    res = await client.get("/api/v1/events", params={"since": 2})
    assert [e["sequence"] for e in res.json()["events"]] == [3]


async def test_failed_request_emits_no_event(client):
    await client.delete("/api/v1/gs1-codes/CODE1", headers=OWNER)
    res = await client.get("/api/v1/events")
    assert res.json()["events"] == []


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_reports_registry(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["registry"] == "healthy"


async def test_readiness_fails_on_corrupted_registry(client, registry):
    registry.add_gs1_code("alice", "CODE1")
    registry.gs1_codes._codes._index["CODE1"] = 5
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "registry_inconsistent"


def test_build_registry_applies_event_log_capacity():
    registry = build_registry(Settings(event_log_capacity=2))
    for key in ("A", "B", "C"):
        registry.add_gs1_code("alice", key)
    assert len(registry.events) == 2
    assert [e.sequence for e in registry.events_since()] == [2, 3]
