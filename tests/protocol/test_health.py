from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from src.protocol.http.app import create_app


def test_healthz_reports_ok_with_generated_request_id() -> None:
    client = TestClient(create_app(strict_castling=False, log_level="DEBUG"))
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    # Without an incoming header the middleware mints a UUID
    uuid.UUID(r.headers["x-request-id"])


def test_unknown_route_uses_error_envelope() -> None:
    client = TestClient(create_app())
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"
