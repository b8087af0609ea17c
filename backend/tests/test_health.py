"""
World API Backend — Health Check and Middleware Tests
=====================================================

What:  GET /health, the X-Request-ID header added to every response and the
       access log line.
"""

import logging

import pytest

from conftest import signup_and_login
from worldapi import __version__
from worldapi.middleware.request_id import accepted_request_id


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy_when_database_reachable(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == __version__
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_unhealthy_when_database_unreachable(self, app, test_client, monkeypatch):
        async def failing_ping():
            raise ConnectionError("database is down")

        monkeypatch.setattr(app.state.database, "ping", failing_ping)

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestRequestId:
    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/cities/Tokyo")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/cities/Gotham", headers={"X-Request-ID": "trace-123"})

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["line\\nbreak", "has space", "x" * 65])
    async def test_unsafe_request_id_replaced(self, test_client, supplied):
        response = await test_client.get("/cities/Tokyo", headers={"X-Request-ID": supplied})

        returned = response.headers["X-Request-ID"]
        assert returned != supplied
        assert len(returned) == 8

    def test_accepted_request_id(self):
        assert accepted_request_id("trace-123.a_b") == "trace-123.a_b"
        assert accepted_request_id("") is None
        assert accepted_request_id(None) is None
        assert accepted_request_id("a;b") is None


class TestAccessLog:
    @pytest.mark.asyncio
    async def test_logs_route_template_not_city_names(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="worldapi.access")

        await test_client.get("/world/Japan/Tokyo", headers={"X-Request-ID": "trace-7"})

        lines = [r.getMessage() for r in caplog.records if r.name == "worldapi.access"]
        assert len(lines) == 1
        assert lines[0].startswith("GET /world/{country_name}/{city_name} 200 ")
        assert "[trace-7] session=no" in lines[0]
        assert "Tokyo" not in lines[0]

    @pytest.mark.asyncio
    async def test_logs_session_presence_without_value(self, test_client, caplog):
        await signup_and_login(test_client)
        caplog.set_level(logging.INFO, logger="worldapi.access")

        await test_client.get("/me")

        record = [r for r in caplog.records if r.name == "worldapi.access"][-1]
        assert "GET /me 200" in record.getMessage()
        assert "session=yes" in record.getMessage()
        assert test_client.cookies["sessions"] not in record.getMessage()

    @pytest.mark.asyncio
    async def test_unknown_city_logged_at_info(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="worldapi.access")

        await test_client.get("/cities/Gotham")

        record = [r for r in caplog.records if r.name == "worldapi.access"][-1]
        assert record.levelno == logging.INFO
        assert "/cities/{city_name} 404" in record.getMessage()

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="worldapi.access")

        await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "worldapi.access"]
