"""Bounded per-document version history."""

import copy
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptdoc.db import Database
from promptdoc.errors import DocumentNotFound
from promptdoc.locks import DocumentLocks
from promptdoc.models import Document, DocumentVersion

logger = logging.getLogger(__name__)

RETENTION = 5


class VersionManager:
    """Append-only content snapshots, pruned to the newest ``retention``.

    Version numbers start at 1 and grow by one per snapshot. They are never
    reused or renumbered: the next number is derived from the highest one
    still stored, and pruning only ever removes the lowest numbers, so the
    retained set is always the ``retention`` most recent, contiguous run.
    """

    def __init__(
        self,
        db: Database,
        retention: int = RETENTION,
        locks: DocumentLocks | None = None,
    ) -> None:
        if retention < 1:
            raise ValueError("retention must be at least 1")
        self._db = db
        self.retention = retention
        self.locks = DocumentLocks() if locks is None else locks

    async def record_version(
        self,
        document_id: int,
        content: Mapping[str, Any],
        *,
        session: AsyncSession | None = None,
    ) -> DocumentVersion:
        """Snapshot ``content`` as the document's next version and prune.

        With ``session`` the work joins the caller's transaction, which must
        already hold the document's lock. Without it the document lock is
        taken and a transaction of its own is opened and committed.
        """
        if session is None:
            async with self.locks.hold(document_id):
                async with self._db.session() as session, session.begin():
                    return await self._record(session, document_id, content)
        return await self._record(session, document_id, content)

    async def list_versions(
        self,
        document_id: int,
        *,
        session: AsyncSession | None = None,
    ) -> list[DocumentVersion]:
        """Retained versions, newest first."""
        if session is None:
            async with self._db.session() as session:
                return await self._list(session, document_id)
        return await self._list(session, document_id)

    async def _record(
        self,
        session: AsyncSession,
        document_id: int,
        content: Mapping[str, Any],
    ) -> DocumentVersion:
        # Row lock serializes writers across processes; a no-op on SQLite
        found = await session.scalar(
            select(Document.id).where(Document.id == document_id).with_for_update()
        )
        if found is None:
            raise DocumentNotFound(document_id)

        latest = await session.scalar(
            select(func.max(DocumentVersion.version_number))
            .where(DocumentVersion.document_id == document_id)
        )
        version = DocumentVersion(
            document_id=document_id,
            version_number=(latest or 0) + 1,
            content=copy.deepcopy(dict(content)),
        )
        session.add(version)
        # Insert before pruning: a failed insert must leave history untouched
        await session.flush()

        pruned = await self._prune(session, document_id, version.version_number)
        logger.debug(
            "Recorded version %d of document %d (pruned %d)",
            version.version_number, document_id, pruned,
        )
        return version

    async def _prune(self, session: AsyncSession, document_id: int, newest: int) -> int:
        floor = newest - self.retention
        if floor < 1:
            return 0
        result = await session.execute(
            delete(DocumentVersion).where(
                DocumentVersion.document_id == document_id,
                DocumentVersion.version_number <= floor,
            )
        )
        return result.rowcount or 0

    async def _list(self, session: AsyncSession, document_id: int) -> list[DocumentVersion]:
        result = await session.execute(
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_number.desc())
        )
        return list(result.scalars().all())
