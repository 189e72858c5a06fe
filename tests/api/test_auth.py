import jwt
import pytest
from asgi_lifespan import LifespanManager
from fastapi import status
from httpx import ASGITransport, AsyncClient

from promptdoc.api.app import create_app

pytestmark = pytest.mark.asyncio


@pytest.fixture
def registration() -> dict:
    return {
        "email": "writer@example.com",
        "password": "test_password123",
        "name": "Writer",
    }


class TestAuthentication:
    async def test_register_user(self, client: AsyncClient, registration: dict):
        """Test user registration."""
        response = await client.post("/api/auth/register", json=registration)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["user"]["email"] == registration["email"]
        assert data["user"]["role"] == "user"
        assert data["access_token"]
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    async def test_register_duplicate_email(self, client: AsyncClient, registration: dict):
        """Test that an email can only be registered once."""
        await client.post("/api/auth/register", json=registration)
        response = await client.post("/api/auth/register", json=registration)
        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_register_weak_password(self, client: AsyncClient, registration: dict):
        """Test password rules on registration."""
        response = await client.post(
            "/api/auth/register", json={**registration, "password": "aaaaaaaa"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_login_user(self, client: AsyncClient, registration: dict):
        """Test user login."""
        await client.post("/api/auth/register", json=registration)

        response = await client.post(
            "/api/auth/login",
            json={"email": registration["email"], "password": registration["password"]},
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"

    async def test_login_wrong_password(self, client: AsyncClient, registration: dict):
        """Test login with wrong password."""
        await client.post("/api/auth/register", json=registration)

        response = await client.post(
            "/api/auth/login",
            json={"email": registration["email"], "password": "wrong_password"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_me_rejects_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_me(self, client: AsyncClient, auth_headers: dict, user):
        response = await client.get("/api/me", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == user.email
        assert response.json()["theme_preference"] == "system"

    async def test_update_profile(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch(
            "/api/me", headers=auth_headers,
            json={"name": "Renamed", "theme_preference": "dark"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Renamed"
        assert response.json()["theme_preference"] == "dark"

    async def test_update_profile_invalid_theme(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch(
            "/api/me", headers=auth_headers, json={"theme_preference": "neon"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


async def test_registration_pending_approval(settings, registration):
    """Accounts wait for an admin when approval is required."""
    app = create_app(settings.model_copy(update={"require_admin_approval": True}))
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/api/auth/register", json=registration)
            assert response.status_code == status.HTTP_201_CREATED
            assert response.json()["access_token"] is None

            login = await client.post(
                "/api/auth/login",
                json={"email": registration["email"], "password": registration["password"]},
            )
            assert login.status_code == status.HTTP_403_FORBIDDEN


async def test_tokens_use_app_secret(settings, registration):
    """Tokens are signed and checked with the key the app was built with."""
    app_settings = settings.model_copy(update={"secret_key": "explicit-secret"})
    app = create_app(app_settings)
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/api/auth/register", json=registration)
            token = response.json()["access_token"]

            payload = jwt.decode(token, "explicit-secret", algorithms=[app_settings.jwt_algorithm])
            assert payload["type"] == "access"
            with pytest.raises(jwt.InvalidSignatureError):
                jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])

            me = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
            assert me.status_code == status.HTTP_200_OK

            forged = jwt.encode(
                {"sub": payload["sub"], "role": "user", "type": "access"},
                settings.secret_key, algorithm=settings.jwt_algorithm,
            )
            rejected = await client.get("/api/me", headers={"Authorization": f"Bearer {forged}"})
            assert rejected.status_code == status.HTTP_401_UNAUTHORIZED


class TestUserAdministration:
    @pytest.fixture
    async def admin_headers(self, client: AsyncClient, settings) -> dict:
        response = await client.post(
            "/api/auth/login",
            json={"email": settings.admin_email, "password": settings.admin_password},
        )
        assert response.status_code == status.HTTP_200_OK
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    async def test_list_users_requires_admin(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/users", headers=auth_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_admin_lists_users(
        self, client: AsyncClient, admin_headers: dict, settings, user,
    ):
        response = await client.get("/api/users", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        emails = {u["email"] for u in response.json()}
        assert {settings.admin_email, user.email} <= emails

    async def test_deactivated_user_is_locked_out(
        self, client: AsyncClient, admin_headers: dict, user, auth_headers: dict,
    ):
        response = await client.delete(f"/api/users/{user.id}", headers=admin_headers)
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = await client.get("/api/me", headers=auth_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_promote_user(self, client: AsyncClient, admin_headers: dict, user):
        response = await client.patch(
            f"/api/users/{user.id}", headers=admin_headers, json={"role": "admin"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["role"] == "admin"

    async def test_admin_cannot_delete_self(self, client: AsyncClient, admin_headers: dict):
        me = await client.get("/api/me", headers=admin_headers)
        response = await client.delete(f"/api/users/{me.json()['id']}", headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
