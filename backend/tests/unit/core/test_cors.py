"""CORS policy for the configured frontends."""

from __future__ import annotations

import pytest

PREFLIGHT = {
    "Access-Control-Request-Method": "POST",
    "Access-Control-Request-Headers": "Authorization, Content-Type",
}


@pytest.mark.parametrize("origin", ["http://localhost:3000", "http://localhost:3001"])
def test_frontends_are_allowed(client, origin):
    resp = client.options("/api/v1/auth/login", headers={"Origin": origin, **PREFLIGHT})

    assert resp.headers.get("Access-Control-Allow-Origin") == origin
    assert resp.headers.get("Access-Control-Allow-Credentials") == "true"


def test_other_origins_are_not_echoed(client):
    resp = client.options(
        "/api/v1/auth/login", headers={"Origin": "https://evil.example", **PREFLIGHT}
    )

    assert "Access-Control-Allow-Origin" not in resp.headers
