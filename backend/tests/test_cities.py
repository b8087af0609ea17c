"""
World API Backend — City Endpoint Tests
=======================================

What:  GET /cities/{cityName} and POST /cities through the full HTTP stack.

What we test:
    ✅ Lookup by exact name, NULL columns omitted, lowest ID wins
    ✅ Repeated reads are identical
    ✅ Unknown city → 404 with an empty body
    ✅ Create from JSON and from form fields, then read back
    ✅ Zero-valued fields omitted from the create response
    ✅ Malformed bodies → 400 {"message": "bad request body"}
    ✅ Population outside the signed 64-bit range → 400
    ✅ Store or commit failure → 500 with an empty body
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import TOKYO_JSON


class TestGetCity:
    """Tests for GET /cities/{cityName}."""

    @pytest.mark.asyncio
    async def test_get_city_by_name(self, test_client):
        response = await test_client.get("/cities/Tokyo")

        assert response.status_code == 200
        assert response.json() == TOKYO_JSON

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(self, test_client):
        first = await test_client.get("/cities/Osaka")
        second = await test_client.get("/cities/Osaka")

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_null_columns_are_omitted(self, test_client):
        """Two cities share the name; the lower ID has only a name."""
        response = await test_client.get("/cities/Springfield")

        assert response.status_code == 200
        assert response.json() == {"id": 6, "name": "Springfield"}

    @pytest.mark.asyncio
    async def test_unknown_city_is_404_without_body(self, test_client):
        response = await test_client.get("/cities/Gotham")

        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_name_match_is_exact(self, test_client):
        response = await test_client.get("/cities/Toky")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_store_failure_is_500_without_body(self, app, test_client):
        async with app.state.database.engine.begin() as conn:
            await conn.execute(text("DROP TABLE city"))

        response = await test_client.get("/cities/Tokyo")

        assert response.status_code == 500
        assert response.content == b""


class TestCreateCity:
    """Tests for POST /cities."""

    @pytest.mark.asyncio
    async def test_create_from_json_then_read_back(self, test_client):
        body = {
            "name": "Rotterdam",
            "countryCode": "NLD",
            "district": "Zuid-Holland",
            "population": 593321,
        }
        response = await test_client.post("/cities", json=body)

        assert response.status_code == 201
        created = response.json()
        assert created == {"id": 8, **body}

        fetched = await test_client.get("/cities/Rotterdam")
        assert fetched.status_code == 200
        assert fetched.json() == created

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_replaced(self, test_client):
        response = await test_client.post(
            "/cities", json={"id": 999, "name": "Utrecht", "countryCode": "NLD"}
        )

        assert response.status_code == 201
        assert response.json()["id"] == 8

    @pytest.mark.asyncio
    async def test_zero_valued_fields_are_omitted(self, test_client):
        response = await test_client.post("/cities", json={"name": "Hamlet"})

        assert response.status_code == 201
        assert response.json() == {"id": 8, "name": "Hamlet"}

        # Missing fields were stored as empty values, not NULL
        fetched = await test_client.get("/cities/Hamlet")
        assert fetched.json() == {
            "id": 8,
            "name": "Hamlet",
            "countryCode": "",
            "district": "",
            "population": 0,
        }

    @pytest.mark.asyncio
    async def test_create_from_form_fields(self, test_client):
        response = await test_client.post(
            "/cities",
            data={"name": "Nagoya", "countryCode": "JPN", "district": "Aichi", "population": "2154376"},
        )

        assert response.status_code == 201
        assert response.json() == {
            "id": 8,
            "name": "Nagoya",
            "countryCode": "JPN",
            "district": "Aichi",
            "population": 2154376,
        }

    @pytest.mark.asyncio
    async def test_created_city_joins_world_listing(self, test_client):
        await test_client.post("/cities", json={"name": "Kyoto", "countryCode": "JPN"})

        response = await test_client.get("/world/Japan/allCities")

        assert response.json() == ["Akita", "Kyoto", "Osaka", "Tokyo"]

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/cities",
            content=b'{"name": "Broken"',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "bad request body"}

    @pytest.mark.asyncio
    async def test_wrong_json_type_is_400(self, test_client):
        response = await test_client.post("/cities", json={"name": "Lille", "population": "many"})

        assert response.status_code == 400
        assert response.json() == {"message": "bad request body"}

    @pytest.mark.asyncio
    async def test_json_array_is_400(self, test_client):
        response = await test_client.post("/cities", json=[{"name": "Lille"}])

        assert response.status_code == 400
        assert response.json() == {"message": "bad request body"}

    @pytest.mark.asyncio
    async def test_unsupported_content_type_is_400(self, test_client):
        response = await test_client.post(
            "/cities",
            content=b"name=Lille",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "bad request body"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("population", [2**63, -(2**63) - 1, 2**64])
    async def test_population_outside_64_bits_is_400(self, test_client, population):
        response = await test_client.post(
            "/cities", json={"name": "Overflow", "countryCode": "NLD", "population": population}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "bad request body"}

    @pytest.mark.asyncio
    async def test_population_at_64_bit_limit_is_accepted(self, test_client):
        response = await test_client.post(
            "/cities", json={"name": "Megacity", "countryCode": "NLD", "population": 2**63 - 1}
        )

        assert response.status_code == 201
        assert response.json()["population"] == 2**63 - 1

    @pytest.mark.asyncio
    async def test_commit_failure_is_500_and_city_is_not_stored(self, test_client, monkeypatch):
        async def failing_commit(self):
            raise SQLAlchemyError("commit failed")

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)
        response = await test_client.post("/cities", json={"name": "Ghost", "countryCode": "NLD"})

        assert response.status_code == 500
        assert response.content == b""

        monkeypatch.undo()
        fetched = await test_client.get("/cities/Ghost")
        assert fetched.status_code == 404
