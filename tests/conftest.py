from typing import AsyncGenerator

import pytest
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from promptdoc.api.app import create_app
from promptdoc.auth import create_access_token, hash_password
from promptdoc.config import Settings
from promptdoc.content import default_content
from promptdoc.db import Database
from promptdoc.documents import DocumentService
from promptdoc.models import Document, User
from promptdoc.models.enums import UserRole

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password-1"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite database file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        auto_create_schema=True,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
async def test_app(settings) -> AsyncGenerator[FastAPI, None]:
    """Create a test instance of the FastAPI application."""
    app = create_app(settings)
    async with LifespanManager(app):
        yield app


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def db(test_app) -> Database:
    return test_app.state.db


@pytest.fixture
def document_service(test_app) -> DocumentService:
    return test_app.state.documents


async def _create_user(db: Database, email: str, role: UserRole = UserRole.user) -> User:
    async with db.session() as session:
        user = User(
            email=email,
            password_hash=hash_password("test_password123"),
            name=email.split("@")[0],
            role=role,
        )
        session.add(user)
        await session.commit()
    return user


@pytest.fixture
async def user(db) -> User:
    return await _create_user(db, "owner@example.com")


@pytest.fixture
async def other_user(db) -> User:
    return await _create_user(db, "reader@example.com")


@pytest.fixture
def auth_headers(user, settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value, settings)}"}


@pytest.fixture
def other_auth_headers(other_user, settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.id, other_user.role.value, settings)}"}


@pytest.fixture
async def document(db, user) -> Document:
    """A bare document row with no version history."""
    async with db.session() as session:
        doc = Document(title="Bare", owner_id=user.id, content=default_content())
        session.add(doc)
        await session.commit()
    return doc
