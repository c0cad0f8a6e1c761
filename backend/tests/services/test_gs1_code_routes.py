"""GS1 Code Routes — HTTP behaviour of /api/v1/gs1-codes.

Invariants:
    - POST returns 201, duplicate POST returns 409 DUPLICATE_KEY
    - DELETE is owner-only (403), 404 when missing, 409 while records exist
    - Child rows out of range return 400 INDEX_OUT_OF_RANGE
    - Key validation failures return 400 VALIDATION_ERROR
"""

OWNER = {"X-Caller-Id": "owner"}
ALICE = {"X-Caller-Id": "alice"}


async def _add_code(client, key="CODE1"):
    return await client.post("/api/v1/gs1-codes", json={"key": key}, headers=ALICE)


async def test_create_returns_201(client, registry):
    res = await _add_code(client)
    assert res.status_code == 201
    assert res.json() == {"key": "CODE1", "child_count": 0, "records": []}
    assert registry.is_gs1_code("CODE1")


async def test_create_duplicate_returns_409(client):
    await _add_code(client)
    res = await _add_code(client)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_KEY"


async def test_create_rejects_key_longer_than_32_bytes(client, registry):
    res = await _add_code(client, "X" * 33)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert registry.get_gs1_code_count() == 0


async def test_create_rejects_blank_key(client):
    res = await _add_code(client, "   ")
    assert res.status_code == 400


async def test_list_returns_count_and_keys(client):
    await _add_code(client, "CODE1")
    await _add_code(client, "CODE2")
    res = await client.get("/api/v1/gs1-codes")
    assert res.status_code == 200
    body = res.json()
    assert body["count"] == 2
    assert set(body["keys"]) == {"CODE1", "CODE2"}


async def test_get_shows_child_records(client, registry):
    await _add_code(client)
    registry.add_ons_record("alice", "REC1", "CODE1", 1, "SVC1", "!^.*$!http://x!")
    res = await client.get("/api/v1/gs1-codes/CODE1")
    assert res.json() == {"key": "CODE1", "child_count": 1, "records": ["REC1"]}

    res = await client.get("/api/v1/gs1-codes/CODE1/records/0")
    assert res.json()["key"] == "REC1"


async def test_get_missing_returns_404(client):
    res = await client.get("/api/v1/gs1-codes/MISSING")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


async def test_child_row_out_of_range_returns_400(client):
    await _add_code(client)
    res = await client.get("/api/v1/gs1-codes/CODE1/records/0")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INDEX_OUT_OF_RANGE"


async def test_delete_by_owner_returns_204(client, registry):
    await _add_code(client)
    res = await client.delete("/api/v1/gs1-codes/CODE1", headers=OWNER)
    assert res.status_code == 204
    assert not registry.is_gs1_code("CODE1")


async def test_delete_by_non_owner_returns_403(client, registry):
    await _add_code(client)
    res = await client.delete("/api/v1/gs1-codes/CODE1", headers=ALICE)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "UNAUTHORIZED"
    assert registry.is_gs1_code("CODE1")


async def test_delete_without_caller_header_is_anonymous(client):
    await _add_code(client)
    res = await client.delete("/api/v1/gs1-codes/CODE1")
    assert res.status_code == 403
    assert res.json()["error"]["context"]["caller"] == "anonymous"


async def test_delete_missing_returns_404(client):
    res = await client.delete("/api/v1/gs1-codes/CODE1", headers=OWNER)
    assert res.status_code == 404


async def test_delete_with_records_returns_409(client, registry):
    await _add_code(client)
    registry.add_ons_record("alice", "REC1", "CODE1", 1, "SVC1", "")
    res = await client.delete("/api/v1/gs1-codes/CODE1", headers=OWNER)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "REFERENTIAL_INTEGRITY"
    assert registry.is_gs1_code("CODE1")


async def test_path_key_is_normalized_like_body_key(client, registry):
    await _add_code(client, " CODE1 ")
    assert registry.is_gs1_code("CODE1")

    res = await client.get("/api/v1/gs1-codes/ CODE1")
    assert res.status_code == 200
    assert res.json()["key"] == "CODE1"

    res = await client.delete("/api/v1/gs1-codes/ CODE1", headers=OWNER)
    assert res.status_code == 204
    assert not registry.is_gs1_code("CODE1")


async def test_path_key_longer_than_32_bytes_returns_400(client):
    res = await client.get("/api/v1/gs1-codes/" + "X" * 33)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
