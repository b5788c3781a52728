"""
Bloglist — User & Login API Tests
==================================

What we test:
    ✅ Registration succeeds with a fresh username and stores a hash only
    ✅ Duplicate, too-short usernames and too-short passwords are 400
    ✅ Listing users embeds their blogs and never the password hash
    ✅ Login returns {token, username, name}; failures are a uniform 401
"""

import pytest
from sqlalchemy import select

from bloglist.models.user import User
from bloglist.services.auth_service import decode_token


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_fresh_username_succeeds(self, test_client, root_user):
        response = await test_client.post(
            "/api/users",
            json={"username": "mluukkai", "name": "Matti Luukkainen", "password": "salainen"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "mluukkai"
        assert body["name"] == "Matti Luukkainen"
        assert body["blogs"] == []
        assert "password" not in body
        assert "password_hash" not in body

        usernames = [u["username"] for u in (await test_client.get("/api/users")).json()]
        assert usernames == ["root", "mluukkai"]

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, test_client, session_factory):
        await test_client.post(
            "/api/users",
            json={"username": "hellas", "name": "Arto Hellas", "password": "salainen"},
        )

        async with session_factory() as session:
            user = (await session.execute(select(User).where(User.username == "hellas"))).scalar_one()
        assert user.password_hash != "salainen"
        assert user.password_hash.startswith("$2")

    @pytest.mark.asyncio
    async def test_duplicate_username_is_400(self, test_client, root_user):
        response = await test_client.post(
            "/api/users",
            json={"username": "root", "name": "Superuser", "password": "salainen"},
        )

        assert response.status_code == 400
        assert "unique" in response.json()["message"]

        users = (await test_client.get("/api/users")).json()
        assert len(users) == 1

    @pytest.mark.asyncio
    async def test_short_username_is_400(self, test_client):
        response = await test_client.post(
            "/api/users", json={"username": "ab", "password": "salainen"}
        )

        assert response.status_code == 400
        assert "username" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_short_password_is_400(self, test_client):
        response = await test_client.post(
            "/api/users", json={"username": "someone", "password": "pw"}
        )

        assert response.status_code == 400
        assert "password" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_missing_password_is_400(self, test_client):
        response = await test_client.post("/api/users", json={"username": "someone"})

        assert response.status_code == 400
        assert "password" in response.json()["details"]["fields"]


class TestListUsers:

    @pytest.mark.asyncio
    async def test_users_include_their_blogs(self, test_client, root_user, initial_blogs):
        response = await test_client.get("/api/users")

        assert response.status_code == 200
        [root] = response.json()
        assert root["id"] == str(root_user.id)
        assert [b["title"] for b in root["blogs"]] == [b.title for b in initial_blogs]
        assert "password_hash" not in root
        assert "passwordHash" not in root


class TestLogin:

    @pytest.mark.asyncio
    async def test_valid_credentials_return_token(self, test_client, root_user):
        response = await test_client.post(
            "/api/login", json={"username": "root", "password": "password"}
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"token", "username", "name"}
        assert body["username"] == "root"
        assert body["name"] == "adminko"

        claims = decode_token(body["token"])
        assert claims.id == str(root_user.id)
        assert claims.username == "root"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, test_client, root_user):
        wrong_password = await test_client.post(
            "/api/login", json={"username": "root", "password": "wrong"}
        )
        unknown_user = await test_client.post(
            "/api/login", json={"username": "nobody", "password": "password"}
        )

        assert wrong_password.status_code == unknown_user.status_code == 401
        a, b = wrong_password.json(), unknown_user.json()
        assert (a["error"], a["message"]) == (b["error"], b["message"])
        assert a["message"] == "invalid username or password"
        assert wrong_password.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_registered_user_can_log_in(self, test_client):
        await test_client.post(
            "/api/users",
            json={"username": "mluukkai", "name": "Matti Luukkainen", "password": "salainen"},
        )

        response = await test_client.post(
            "/api/login", json={"username": "mluukkai", "password": "salainen"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Matti Luukkainen"
