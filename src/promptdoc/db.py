"""Database handle: async engine plus session factory."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from promptdoc.config import Settings
from promptdoc.models import Base


class Database:
    """Explicitly constructed store handle shared by the services."""

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs) -> None:
        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database(settings: Settings) -> Database:
    engine_kwargs = {}
    # SQLite pools do not take sizing arguments
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs.update(pool_size=5, max_overflow=10)
    return Database(settings.database_url, echo=settings.db_echo, **engine_kwargs)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    async with request.app.state.db.session() as session:
        yield session
