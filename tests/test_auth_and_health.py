"""
GhostNote Backend — Authorization Gate and Health Check Tests
===============================================================

What:  The Authorization header requirement on /api/* and the /health check.
How:   Settings are patched per test with monkeypatch; the app is rebuilt per
       test by the test_app fixture.
"""

from unittest.mock import MagicMock

import pytest

from ghostnote.config import settings


class TestAuthorization:

    @pytest.mark.asyncio
    async def test_missing_header_is_401(self, anon_client):
        response = await anon_client.get("/api/list")

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_error"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_wrong_token_is_401(self, anon_client):
        response = await anon_client.get(
            "/api/list", headers={"Authorization": "Bearer not-the-token"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_scheme_is_401(self, anon_client):
        response = await anon_client.get(
            "/api/list", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_valid_token_passes(self, test_client):
        response = await test_client.get("/api/list")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_every_api_route_is_gated(self, anon_client):
        responses = [
            await anon_client.post("/api/save", json={"content": "ct"}),
            await anon_client.get("/api/list"),
            await anon_client.get("/api/share/abc"),
            await anon_client.post("/api/delete", json={"id": 1}),
        ]

        assert [r.status_code for r in responses] == [401, 401, 401, 401]

    @pytest.mark.asyncio
    async def test_rejected_save_stores_nothing(self, anon_client, test_client):
        await anon_client.post("/api/save", json={"content": "ct"})

        assert (await test_client.get("/api/list")).json() == []

    @pytest.mark.asyncio
    async def test_presence_only_mode_without_configured_token(self, anon_client, monkeypatch):
        monkeypatch.setattr(settings, "auth_token", "")

        with_header = await anon_client.get(
            "/api/list", headers={"Authorization": "Token upstream-validated"}
        )
        without_header = await anon_client.get("/api/list")

        assert with_header.status_code == 200
        assert without_header.status_code == 401

    @pytest.mark.asyncio
    async def test_gate_disabled(self, anon_client, monkeypatch):
        monkeypatch.setattr(settings, "require_auth", False)

        response = await anon_client.get("/api/list")

        assert response.status_code == 200


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_needs_no_auth(self, anon_client):
        response = await anon_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_reports_unreachable_database(self, anon_client, monkeypatch):
        broken_engine = MagicMock()
        broken_engine.connect.side_effect = ConnectionError("database down")
        monkeypatch.setattr("ghostnote.database.engine", broken_engine)

        response = await anon_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/list", headers={"X-Request-ID": "trace-1"})

        assert response.headers["X-Request-ID"] == "trace-1"

    @pytest.mark.asyncio
    async def test_request_id_in_error_body(self, anon_client):
        response = await anon_client.get("/api/list", headers={"X-Request-ID": "trace-2"})

        assert response.json()["request_id"] == "trace-2"
