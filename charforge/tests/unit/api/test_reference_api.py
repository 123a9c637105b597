"""
Tests for the reference catalog endpoints.
"""

import pytest

from charforge.app.factory import create_app
from charforge.error_types import ErrorMessages
from charforge.tests.fixtures.api import build_container


class TestReferenceEndpoints:
    """Test /api/reference routes."""

    @pytest.mark.asyncio
    async def test_list_races_is_public(self, client):
        response = await client.get("/api/reference/races")
        assert response.status_code == 200
        assert [item["index"] for item in response.json()] == ["dwarf", "elf"]

    @pytest.mark.asyncio
    async def test_unknown_category(self, client):
        response = await client.get("/api/reference/monsters")
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_race_detail(self, client):
        response = await client.get("/api/reference/races/elf")
        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "race"
        assert body["speed"] == 30

    @pytest.mark.asyncio
    async def test_class_detail_serializes_choice_alias(self, client):
        response = await client.get("/api/reference/classes/wizard")
        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "class"
        assert body["hit_die"] == 6
        assert len(body["proficiency_choices"][0]["from"]["options"]) == 4

    @pytest.mark.asyncio
    async def test_missing_detail_is_404(self, client):
        response = await client.get("/api/reference/races/tiefling")
        assert response.status_code == 404
        assert response.json()["error"]["user_friendly"] == ErrorMessages.REFERENCE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_cantrips(self, client):
        response = await client.get("/api/reference/classes/wizard/cantrips")
        assert response.status_code == 200
        assert [spell["index"] for spell in response.json()] == ["fire-bolt", "light", "mage-hand"]

    @pytest.mark.asyncio
    async def test_fighter_has_no_cantrips(self, client):
        response = await client.get("/api/reference/classes/fighter/cantrips")
        assert response.json() == []


class TestCatalogOutage:
    """Browsing degrades while detail lookups report the outage."""

    @pytest.fixture
    def app(self, database, unreachable_catalog_client):
        """The app wired to a catalog that refuses every connection."""
        application = create_app()
        application.state.container = build_container(database, unreachable_catalog_client)
        return application

    @pytest.mark.asyncio
    async def test_list_is_empty(self, client):
        response = await client.get("/api/reference/classes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_detail_is_502(self, client):
        response = await client.get("/api/reference/classes/wizard")
        assert response.status_code == 502
        error = response.json()["error"]
        assert error["type"] == "network_error"
        assert error["user_friendly"] == ErrorMessages.CATALOG_UNAVAILABLE
