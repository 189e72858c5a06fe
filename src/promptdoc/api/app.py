import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from promptdoc.config import Settings, get_settings
from promptdoc.db import create_database
from promptdoc.documents import DocumentService
from promptdoc.locks import DocumentLocks
from promptdoc.seed import seed_all
from promptdoc.versioning import VersionManager
from promptdoc.api.routes.auth import router as auth_router
from promptdoc.api.routes.documents import router as documents_router
from promptdoc.api.routes.system import router as system_router
from promptdoc.api.routes.templates import router as templates_router
from promptdoc.api.routes.users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    logger.info("Starting promptdoc API")

    db = app.state.db
    if settings.auto_create_schema:
        await db.create_all()

    await seed_all(db, settings)

    yield

    await db.dispose()
    logger.info("Shutting down promptdoc API")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="promptdoc",
        version="0.1.0",
        lifespan=lifespan,
    )

    db = create_database(settings)
    versions = VersionManager(db, locks=DocumentLocks())
    app.state.settings = settings
    app.state.db = db
    app.state.versions = versions
    app.state.documents = DocumentService(db, versions)

    app.include_router(system_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(documents_router, prefix="/api")
    app.include_router(templates_router, prefix="/api")

    return app


def main():
    """Entry point for promptdoc-api script."""
    uvicorn.run(
        "promptdoc.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=False,
    )
