"""Document lifecycle: create, read, update (merge + version), share, delete."""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptdoc.audit import log_audit
from promptdoc.content import default_content, merge_content
from promptdoc.db import Database
from promptdoc.errors import DocumentNotFound, TemplateNotFound
from promptdoc.locks import DocumentLocks
from promptdoc.models import Document, DocumentTemplate, DocumentVersion
from promptdoc.models.base import utcnow
from promptdoc.versioning import VersionManager

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DocumentService:
    def __init__(
        self,
        db: Database,
        versions: VersionManager,
        locks: DocumentLocks | None = None,
    ) -> None:
        self._db = db
        self.versions = versions
        # Shared with the version manager so standalone snapshots serialize too
        self.locks = versions.locks if locks is None else locks

    async def create_document(
        self,
        owner_id: int,
        title: str,
        template_id: int | None = None,
    ) -> Document:
        async with self._db.session() as session, session.begin():
            content = default_content()
            if template_id is not None:
                template = await session.get(DocumentTemplate, template_id)
                if template is None:
                    raise TemplateNotFound(template_id)
                content = merge_content(content, template.content)

            doc = Document(
                title=title,
                owner_id=owner_id,
                content=content,
                template_id=template_id,
            )
            session.add(doc)
            await session.flush()
            await self.versions.record_version(doc.id, content, session=session)
            await log_audit(
                session, user_id=owner_id, action="create_document",
                target_type="document", target_id=doc.id,
                detail={"template_id": template_id},
            )
        logger.info("Created document %d for user %d", doc.id, owner_id)
        return doc

    async def get_document(self, document_id: int, user_id: int | None = None) -> Document:
        """Fetch a document the user owns or that is public.

        ``user_id=None`` skips the visibility filter.
        """
        async with self._db.session() as session:
            query = select(Document).where(Document.id == document_id)
            if user_id is not None:
                query = query.where(
                    or_(Document.owner_id == user_id, Document.is_public.is_(True))
                )
            doc = (await session.execute(query)).scalar_one_or_none()
        if doc is None:
            raise DocumentNotFound(document_id)
        return doc

    async def get_shared_document(self, share_token: str) -> Document:
        async with self._db.session() as session:
            result = await session.execute(
                select(Document).where(
                    Document.share_token == share_token,
                    Document.is_public.is_(True),
                    or_(
                        Document.share_expires_at.is_(None),
                        Document.share_expires_at > utcnow(),
                    ),
                )
            )
            doc = result.scalar_one_or_none()
        if doc is None:
            raise DocumentNotFound(share_token)
        return doc

    async def list_documents(self, owner_id: int) -> list[Document]:
        async with self._db.session() as session:
            result = await session.execute(
                select(Document)
                .where(Document.owner_id == owner_id)
                .order_by(Document.updated_at.desc(), Document.id.desc())
            )
            return list(result.scalars().all())

    async def update_document(
        self,
        document_id: int,
        owner_id: int,
        updates: Mapping[str, Any],
    ) -> Document:
        """Apply ``title`` / ``is_public`` / ``content`` changes atomically.

        A ``content`` value is merged into the stored content, persisted, and
        snapshotted as a new version in the same transaction. Without it no
        version is recorded. Writers of one document are serialized by the
        per-document lock and a row lock; on any error nothing is written.
        """
        async with self.locks.hold(document_id):
            async with self._db.session() as session, session.begin():
                doc = await self._load_owned(session, document_id, owner_id, for_update=True)
                detail: dict[str, Any] = {"fields": sorted(k for k, v in updates.items() if v is not None)}

                title = updates.get("title")
                if title is not None:
                    doc.title = title

                is_public = updates.get("is_public")
                if is_public is not None:
                    doc.is_public = is_public
                    if not is_public:
                        doc.share_token = None
                        doc.share_expires_at = None

                partial = updates.get("content")
                if partial is not None:
                    merged = merge_content(doc.content, partial)
                    doc.content = dict(merged)
                    version = await self.versions.record_version(
                        document_id, merged, session=session,
                    )
                    detail["version_number"] = version.version_number

                if detail["fields"]:
                    doc.updated_at = utcnow()
                    await log_audit(
                        session, user_id=owner_id, action="update_document",
                        target_type="document", target_id=document_id, detail=detail,
                    )
        return doc

    async def delete_document(self, document_id: int, owner_id: int) -> None:
        async with self.locks.hold(document_id):
            async with self._db.session() as session, session.begin():
                doc = await self._load_owned(session, document_id, owner_id, for_update=True)
                await session.execute(
                    delete(DocumentVersion).where(DocumentVersion.document_id == document_id)
                )
                await session.delete(doc)
                await log_audit(
                    session, user_id=owner_id, action="delete_document",
                    target_type="document", target_id=document_id,
                )
        logger.info("Deleted document %d", document_id)

    async def duplicate_document(self, document_id: int, user_id: int, title: str) -> Document:
        source = await self.get_document(document_id, user_id)
        async with self._db.session() as session, session.begin():
            copy = Document(
                title=title,
                owner_id=user_id,
                content=dict(source.content),
                template_id=source.template_id,
            )
            session.add(copy)
            await session.flush()
            await self.versions.record_version(copy.id, copy.content, session=session)
            await log_audit(
                session, user_id=user_id, action="duplicate_document",
                target_type="document", target_id=copy.id,
                detail={"source_id": document_id},
            )
        return copy

    async def share_document(
        self,
        document_id: int,
        owner_id: int,
        expires_at: datetime | None = None,
    ) -> Document:
        async with self.locks.hold(document_id):
            async with self._db.session() as session, session.begin():
                doc = await self._load_owned(session, document_id, owner_id, for_update=True)
                doc.share_token = str(uuid.uuid4())
                doc.share_expires_at = _as_utc(expires_at)
                doc.is_public = True
                doc.updated_at = utcnow()
                await log_audit(
                    session, user_id=owner_id, action="share_document",
                    target_type="document", target_id=document_id,
                    detail={"expires_at": expires_at.isoformat() if expires_at else None},
                )
        return doc

    async def revoke_share(self, document_id: int, owner_id: int) -> Document:
        async with self.locks.hold(document_id):
            async with self._db.session() as session, session.begin():
                doc = await self._load_owned(session, document_id, owner_id, for_update=True)
                doc.share_token = None
                doc.share_expires_at = None
                doc.is_public = False
                doc.updated_at = utcnow()
                await log_audit(
                    session, user_id=owner_id, action="revoke_share",
                    target_type="document", target_id=document_id,
                )
        return doc

    async def list_versions(self, document_id: int, user_id: int) -> list[DocumentVersion]:
        await self.get_document(document_id, user_id)
        return await self.versions.list_versions(document_id)

    async def _load_owned(
        self,
        session: AsyncSession,
        document_id: int,
        owner_id: int,
        *,
        for_update: bool = False,
    ) -> Document:
        query = select(Document).where(
            Document.id == document_id,
            Document.owner_id == owner_id,
        )
        if for_update:
            query = query.with_for_update()
        doc = (await session.execute(query)).scalar_one_or_none()
        if doc is None:
            raise DocumentNotFound(document_id)
        return doc
