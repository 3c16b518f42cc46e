"""Request context middleware: X-Request-ID on every response."""

from __future__ import annotations

import logging
import uuid

import pytest
from fastapi.testclient import TestClient


def test_request_id_generated_when_not_provided(client: TestClient) -> None:
    resp = client.get("/health")
    req_id = resp.headers.get("x-request-id")
    assert req_id is not None
    uuid.UUID(req_id)


def test_request_id_echoed_when_provided(client: TestClient) -> None:
    custom_id = "my-custom-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": custom_id})
    assert resp.headers.get("x-request-id") == custom_id


def test_request_id_present_on_error_responses(client: TestClient) -> None:
    resp = client.get("/api/dashboard")
    assert resp.status_code == 401
    assert resp.headers.get("x-request-id") is not None

    resp = client.get("/api/courses/999999")
    assert resp.status_code == 404
    assert resp.headers.get("x-request-id") is not None


def test_access_log_line_per_request(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="app.middleware.request_context"):
        client.get("/health", headers={"X-Request-ID": "trace-me"})

    lines = [r for r in caplog.records if r.name == "app.middleware.request_context"]
    assert len(lines) == 1
    assert lines[0].getMessage().startswith("GET /health 200")
    assert lines[0].path == "/health"  # type: ignore[attr-defined]
