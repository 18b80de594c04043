from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from adrelay.server import create_app


def _post_chunk(client: TestClient, payload: object, *, batch_id: str, index: int, total: int, prefix: str = ""):
    return client.post(
        f"{prefix}/data",
        json=payload,
        headers={
            "x-batch-id": batch_id,
            "x-batch-index": str(index),
            "x-batch-total": str(total),
            "x-request-id": f"req-{batch_id}-{index}",
        },
    )


def test_liveness_routes(client: TestClient) -> None:
    assert client.get("/").json() == {"status": "ok"}
    assert client.get("/healthz").json() == {"status": "ok"}


def test_single_post_is_stored_immediately(client: TestClient) -> None:
    resp = client.post("/data", json={"ad": "creative"}, headers={"x-request-id": "req-1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Single item received and stored"
    assert body["requestId"] == "req-1"
    assert body["totalItems"] == 1

    data = client.get("/data").json()
    assert data["count"] == 1
    assert data["data"][0]["data"] == {"ad": "creative"}
    assert data["data"][0]["source"] == "single"
    assert data["data"][0]["requestId"] == "req-1"


def test_out_of_order_batch_over_http(client: TestClient) -> None:
    first = _post_chunk(client, [{"n": 2}], batch_id="b1", index=2, total=3).json()
    assert first["message"] == "Partial batch received (1/3)"
    assert first["progress"] == "1/3"
    assert first["missing"] == [0, 1]
    assert first["batchId"] == "b1"

    _post_chunk(client, [{"n": 0}], batch_id="b1", index=0, total=3)
    assert client.get("/data").json()["count"] == 0

    done = _post_chunk(client, [{"n": 1}], batch_id="b1", index=1, total=3).json()
    assert done["message"] == "Complete batch received and stored"
    assert done["totalItems"] == 3
    assert done["totalStored"] == 1

    (entry,) = client.get("/data").json()["data"]
    assert entry["data"] == [{"n": 0}, {"n": 1}, {"n": 2}]
    assert entry["source"] == "batch_b1"


def test_api_prefix_aliases(client: TestClient) -> None:
    resp = client.post("/api/data", json=[1, 2])
    assert resp.status_code == 200
    assert resp.json()["requestId"].startswith("req_")
    assert client.get("/api/data").json()["count"] == 1
    assert client.get("/api/health").json()["status"] == "healthy"


@pytest.mark.parametrize(
    ("content", "headers", "reason"),
    [
        (b"", {}, "no_data"),
        (b"{oops", {}, "invalid_json"),
        (b'"just a string"', {}, "invalid_payload"),
        (b"null", {}, "no_data"),
        (b"[]", {"x-batch-id": "b", "x-batch-index": "x", "x-batch-total": "2"}, "invalid_header"),
        (b"[]", {"x-batch-id": "b", "x-batch-index": "3", "x-batch-total": "3"}, "index_out_of_range"),
        (b"[]", {"x-batch-id": "b", "x-batch-index": "0", "x-batch-total": "0"}, "index_out_of_range"),
        (b'{"a": 1}', {"x-batch-total": "0"}, "index_out_of_range"),
        (b'{"a": 1}', {"x-batch-total": "-3"}, "index_out_of_range"),
        (b'{"a": 1}', {"x-batch-index": "3"}, "index_out_of_range"),
        (b'{"a": 1}', {"x-batch-index": "7"}, "index_out_of_range"),
        (b'{"a": 1}', {"x-batch-id": "single", "x-batch-index": "4", "x-batch-total": "2"}, "index_out_of_range"),
        (b'{"a": 1}', {"x-batch-total": "2"}, "index_out_of_range"),
    ],
)
def test_malformed_requests_are_rejected(client: TestClient, content: bytes, headers: dict, reason: str) -> None:
    resp = client.post(
        "/data",
        content=content,
        headers={"content-type": "application/json", "x-request-id": "req-bad", **headers},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["reason"] == reason
    assert body["requestId"] == "req-bad"
    assert client.get("/data").json()["count"] == 0
    assert client.get("/health").json()["activeBatches"] == []


def test_total_mismatch_is_rejected(client: TestClient) -> None:
    _post_chunk(client, [1], batch_id="m", index=0, total=3)
    resp = _post_chunk(client, [2], batch_id="m", index=1, total=4)
    assert resp.status_code == 400
    assert resp.json()["reason"] == "total_mismatch"
    (batch,) = client.get("/health").json()["activeBatches"]
    assert batch["received"] == 1
    assert batch["total"] == 3


def test_unexpected_failure_returns_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(chunk):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(client.app.state.runtime_deps.ingest, "ingest", boom)
    resp = client.post("/data", json={"a": 1})
    assert resp.status_code == 500
    assert resp.json()["error"] == "disk on fire"
    assert resp.json()["reason"] == "internal_error"


def test_rate_limit(make_settings) -> None:
    with TestClient(create_app(make_settings(max_requests_per_window=2))) as client:
        assert client.post("/data", json=[1]).status_code == 200
        assert client.post("/data", json=[2]).status_code == 200
        resp = client.post("/data", json=[3])
    assert resp.status_code == 429
    body = resp.json()
    assert body["reason"] == "rate_limited"
    assert body["retryIn"] >= 1


def test_payload_size_limit(make_settings) -> None:
    with TestClient(create_app(make_settings(max_payload_bytes=64))) as client:
        resp = client.post("/data", json={"blob": "x" * 200})
    assert resp.status_code == 400
    assert resp.json()["reason"] == "invalid_payload"


def test_incomplete_batch_is_flushed_after_timeout(make_settings) -> None:
    with TestClient(create_app(make_settings(timeout_s=0.1))) as client:
        _post_chunk(client, [{"n": 0}], batch_id="late", index=0, total=2)
        time.sleep(0.4)
        data = client.get("/data").json()
        health = client.get("/health").json()

    (entry,) = data["data"]
    assert entry["data"] == [{"n": 0}]
    assert entry["source"] == "incomplete_batch_late"
    assert health["activeBatches"] == []


def test_history_is_bounded(make_settings) -> None:
    with TestClient(create_app(make_settings(history_capacity=3))) as client:
        for n in range(5):
            client.post("/data", json={"n": n})
        entries = client.get("/data").json()["data"]
    assert [e["data"]["n"] for e in entries] == [2, 3, 4]


def test_since_cursor_and_delete(client: TestClient) -> None:
    for n in range(3):
        client.post("/data", json={"n": n})

    first = client.get("/data", params={"since": "-1"}).json()
    assert first["count"] == 3
    assert first["latestId"] == 2

    client.post("/data", json={"n": 3})
    newer = client.get("/data", params={"since": first["latestId"]}).json()
    assert [e["data"]["n"] for e in newer["data"]] == [3]
    assert newer["latestId"] == 3

    assert client.get("/data", params={"since": "junk"}).json()["count"] == 0

    cleared = client.delete("/data").json()
    assert cleared == {
        "success": True,
        "message": "All data cleared successfully",
        "previousCount": 4,
        "currentCount": 0,
    }
    assert client.get("/data").json()["count"] == 0


def test_health_reports_active_batches(client: TestClient) -> None:
    _post_chunk(client, [1], batch_id="open", index=1, total=4)
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["clients"] == 0
    (batch,) = health["activeBatches"]
    assert batch["id"] == "open"
    assert batch["progress"] == "1/4"
    assert batch["age"] >= 0


def test_notifications_feed_and_errors(client: TestClient) -> None:
    ok = client.post("/notification", json={"message": "Text analysis finished", "competitor_name": "acme"})
    assert ok.status_code == 200
    assert ok.json()["notification"]["type"] == "text_analysis_complete"

    client.post("/notification", json={"type": "scrape_error", "message": "boom"})
    client.post("/notification", json={"type": "ai_credits", "message": "out of credits"})

    feed = client.get("/notifications").json()
    assert feed["count"] == 3
    assert feed["latestId"] == 2

    newer = client.get("/notifications", params={"since": 0}).json()
    assert [n["type"] for n in newer["notifications"]] == ["scrape_error", "ai_credits"]

    errors = client.get("/api/errors").json()
    assert [e["type"] for e in errors["errors"]] == ["scrape_error", "ai_credits"]

    cleared = client.delete("/notifications").json()
    assert cleared["previousCount"] == 3
    assert client.get("/notifications").json()["count"] == 0


@pytest.mark.parametrize("body", [b"not json", b"[1]", b"{}"])
def test_invalid_notification(client: TestClient, body: bytes) -> None:
    resp = client.post("/notification", content=body, headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["reason"] == "invalid_notification"
