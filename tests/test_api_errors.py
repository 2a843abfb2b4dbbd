"""API error-path tests for the codec service."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.anyio


async def test_decode_rejects_bad_hex(client):
    resp = await client.post("/api/v1/telegrams/decode", json={"raw": "zz"})
    assert resp.status_code == 422

    resp = await client.post("/api/v1/telegrams/decode", json={"raw": "00" * 25})
    assert resp.status_code == 422

    resp = await client.post("/api/v1/telegrams/decode", json={"raw": ""})
    assert resp.status_code == 422


async def test_decode_unknown_dpt(client):
    resp = await client.post("/api/v1/telegrams/decode", json={"raw": "bc", "dpt": "99.1"})
    assert resp.status_code == 400


async def test_encode_validation(client):
    resp = await client.post("/api/v1/telegrams/encode", json={})
    assert resp.status_code == 422

    resp = await client.post(
        "/api/v1/telegrams/encode", json={"target": "1/2/3", "command": "shout"}
    )
    assert resp.status_code == 422

    resp = await client.post(
        "/api/v1/telegrams/encode", json={"target": "1/2/3", "priority": "urgent"}
    )
    assert resp.status_code == 422

    resp = await client.post(
        "/api/v1/telegrams/encode", json={"target": "1/2/3", "routing_counter": 8}
    )
    assert resp.status_code == 422


async def test_encode_bad_addresses(client):
    resp = await client.post("/api/v1/telegrams/encode", json={"target": "40/0/0"})
    assert resp.status_code == 400

    resp = await client.post(
        "/api/v1/telegrams/encode", json={"target": "1/2/3", "source": "1.1"}
    )
    assert resp.status_code == 400


async def test_encode_bad_dpt_value(client):
    resp = await client.post(
        "/api/v1/telegrams/encode", json={"target": "1/2/3", "dpt": "10.001", "value": 12}
    )
    assert resp.status_code == 400

    resp = await client.post(
        "/api/v1/telegrams/encode", json={"target": "1/2/3", "dpt": "99.9", "value": 1}
    )
    assert resp.status_code == 400


async def test_unknown_reference_dpt(client):
    resp = await client.get("/api/v1/reference/dpts/99.999")
    assert resp.status_code == 404


async def test_history_rejects_bad_direction(client):
    resp = await client.get("/api/v1/buses/line-1/telegrams", params={"direction": "up"})
    assert resp.status_code == 422
