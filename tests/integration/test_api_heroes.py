"""
Integration tests for the heroes and auth endpoints.
"""

import pytest

from herocache.domain import AuthenticationFailedError, ServerError
from herocache.schemas import ApiHero, ApiLocation


class TestHeroesEndpoints:
    """Tests for /heroes."""

    @pytest.mark.api
    async def test_list_heroes(self, client, stub_remote):
        response = await client.get("/heroes")

        assert response.status_code == 200
        body = response.json()
        assert [h["name"] for h in body] == ["Goku", "Vegeta"]
        assert body[0]["info"] == "Saiyan Warrior"
        assert stub_remote.count("heroes") == 1

    @pytest.mark.api
    async def test_list_heroes_second_call_is_cached(self, client, stub_remote):
        await client.get("/heroes")
        response = await client.get("/heroes")

        assert response.status_code == 200
        assert stub_remote.count("heroes") == 1

    @pytest.mark.api
    async def test_list_heroes_by_name(self, client, stub_remote):
        response = await client.get("/heroes", params={"name": "Veg"})

        assert response.status_code == 200
        assert [h["name"] for h in response.json()] == ["Vegeta"]
        assert stub_remote.calls == [("heroes", "Veg")]

    @pytest.mark.api
    async def test_remote_failure(self, client, stub_remote):
        stub_remote.error = ServerError(-1)

        response = await client.get("/heroes")

        assert response.status_code == 502
        assert response.json() == {"detail": "Received error from server with code -1"}

    @pytest.mark.api
    async def test_locations_of_unknown_hero(self, client, stub_remote):
        response = await client.get("/heroes/unknown/locations")

        assert response.status_code == 404
        assert response.json() == {"detail": "Hero with ID unknown not found"}
        assert stub_remote.calls == []

    @pytest.mark.api
    async def test_locations(self, client, goku):
        await client.get("/heroes")

        response = await client.get(f"/heroes/{goku.id}/locations")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["hero_id"] == goku.id
        assert body[0]["date"] == "2022-02-20T00:00:00Z"
        assert body[0]["coordinate"] == [35.71867899343361, 139.8202084625344]

    @pytest.mark.api
    async def test_location_with_invalid_coordinate(self, client, stub_remote, goku):
        stub_remote.locations[goku.id] = [
            ApiLocation(id="bad", latitude="north", longitude="10", hero=ApiHero(id=goku.id))
        ]
        await client.get("/heroes")

        response = await client.get(f"/heroes/{goku.id}/locations")

        assert response.status_code == 200
        assert response.json()[0]["coordinate"] is None

    @pytest.mark.api
    async def test_transformations(self, client, goku):
        await client.get("/heroes")

        response = await client.get(f"/heroes/{goku.id}/transformations")

        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["1. Oozaru"]

    @pytest.mark.api
    async def test_clear_cache(self, client, stub_remote, store):
        await client.get("/heroes")

        response = await client.delete("/heroes/cache")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Cache cleared"}
        assert await store.fetch_heroes() == []

        await client.get("/heroes")
        assert stub_remote.count("heroes") == 2


class TestAuthEndpoints:
    """Tests for /auth."""

    @pytest.mark.api
    async def test_login(self, client, token_store):
        response = await client.post("/auth/login", json={"username": "goku", "password": "superSaiyan"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert token_store.get_token() == "stub-token"

    @pytest.mark.api
    async def test_login_with_empty_password(self, client, stub_remote, token_store):
        response = await client.post("/auth/login", json={"username": "goku", "password": ""})

        assert response.status_code == 502
        assert response.json() == {"detail": "An error occurred while parsing data"}
        assert stub_remote.calls == []
        assert token_store.get_token() is None

    @pytest.mark.api
    async def test_login_rejected(self, client, stub_remote):
        stub_remote.error = AuthenticationFailedError()

        response = await client.post("/auth/login", json={"username": "goku", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Authentication failed. Please check your credentials"}

    @pytest.mark.api
    async def test_logout_clears_cache(self, client, store, token_store):
        token_store.set_token("token")
        await client.get("/heroes")

        response = await client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out"}
        assert token_store.get_token() is None
        assert await store.fetch_heroes() == []

    @pytest.mark.api
    async def test_health(self, client):
        response = await client.get("/auth/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
