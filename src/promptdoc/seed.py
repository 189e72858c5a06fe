"""Seed the admin account and system templates on startup."""

import asyncio
import logging

from sqlalchemy import select

from promptdoc.auth import hash_password
from promptdoc.config import Settings, get_settings
from promptdoc.db import Database, create_database
from promptdoc.models import DocumentTemplate, User
from promptdoc.models.enums import UserRole
from promptdoc.templates import SYSTEM_TEMPLATES

logger = logging.getLogger(__name__)


async def seed_admin_user(db: Database, settings: Settings) -> None:
    """Create the configured admin user if it does not exist yet."""
    if not settings.admin_email or not settings.admin_password:
        logger.info("No admin credentials configured, skipping admin seed")
        return

    async with db.session() as session:
        result = await session.execute(
            select(User).where(User.email == settings.admin_email)
        )
        existing = result.scalar_one_or_none()

        if existing is not None:
            logger.info("Admin user already exists: %s", settings.admin_email)
            return

        admin = User(
            email=settings.admin_email,
            password_hash=hash_password(settings.admin_password),
            role=UserRole.admin,
            is_active=True,
        )
        session.add(admin)
        await session.commit()
        logger.info("Created initial admin user: %s", settings.admin_email)


async def seed_system_templates(db: Database) -> int:
    """Insert missing built-in templates, matched by name. Returns count added."""
    async with db.session() as session:
        result = await session.execute(
            select(DocumentTemplate.name).where(DocumentTemplate.is_system.is_(True))
        )
        existing = set(result.scalars().all())

        added = 0
        for template in SYSTEM_TEMPLATES:
            if template["name"] in existing:
                continue
            session.add(DocumentTemplate(
                name=template["name"],
                description=template["description"],
                content=template["content"],
                is_system=True,
            ))
            added += 1
        await session.commit()

    if added:
        logger.info("Seeded %d system templates", added)
    return added


async def seed_all(db: Database, settings: Settings) -> None:
    await seed_admin_user(db, settings)
    await seed_system_templates(db)


def main():
    """CLI entry point for seeding."""
    settings = get_settings()
    db = create_database(settings)

    async def run() -> None:
        try:
            await seed_all(db, settings)
        finally:
            await db.dispose()

    asyncio.run(run())
