"""Document CRUD, sharing and version history endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from promptdoc.api.deps import Principal, get_document_service, require_user
from promptdoc.api.schemas.documents import (
    CreateDocumentRequest,
    DocumentResponse,
    DuplicateDocumentRequest,
    ShareRequest,
    ShareResponse,
    SharedDocumentResponse,
    UpdateDocumentRequest,
    VersionResponse,
)
from promptdoc.documents import DocumentService
from promptdoc.errors import DocumentNotFound, MalformedContent, TemplateNotFound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["documents"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


@router.get("/documents", response_model=list[DocumentResponse])
async def list_documents(
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    docs = await service.list_documents(principal.id)
    return [DocumentResponse.model_validate(d) for d in docs]


@router.post("/documents", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    body: CreateDocumentRequest,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        doc = await service.create_document(principal.id, body.title, body.template_id)
    except TemplateNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return DocumentResponse.model_validate(doc)


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        doc = await service.get_document(document_id, principal.id)
    except DocumentNotFound:
        raise _not_found()
    return DocumentResponse.model_validate(doc)


@router.patch("/documents/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    body: UpdateDocumentRequest,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    updates = {
        "title": body.title,
        "is_public": body.is_public,
        "content": body.content.to_partial() if body.content is not None else None,
    }
    try:
        doc = await service.update_document(document_id, principal.id, updates)
    except DocumentNotFound:
        raise _not_found()
    except MalformedContent as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return DocumentResponse.model_validate(doc)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        await service.delete_document(document_id, principal.id)
    except DocumentNotFound:
        raise _not_found()


@router.post(
    "/documents/{document_id}/duplicate",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_document(
    document_id: int,
    body: DuplicateDocumentRequest,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        doc = await service.duplicate_document(document_id, principal.id, body.title)
    except DocumentNotFound:
        raise _not_found()
    return DocumentResponse.model_validate(doc)


@router.post("/documents/{document_id}/share", response_model=ShareResponse)
async def share_document(
    document_id: int,
    body: ShareRequest,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    expires_at = body.expires_at
    if expires_at is not None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= datetime.now(timezone.utc):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="expires_at must be in the future",
            )
    try:
        doc = await service.share_document(document_id, principal.id, expires_at)
    except DocumentNotFound:
        raise _not_found()
    return ShareResponse(
        document_id=doc.id,
        share_token=doc.share_token,
        share_expires_at=doc.share_expires_at,
    )


@router.delete("/documents/{document_id}/share", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_share(
    document_id: int,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        await service.revoke_share(document_id, principal.id)
    except DocumentNotFound:
        raise _not_found()


@router.get("/documents/{document_id}/versions", response_model=list[VersionResponse])
async def list_versions(
    document_id: int,
    principal: Principal = Depends(require_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        versions = await service.list_versions(document_id, principal.id)
    except DocumentNotFound:
        raise _not_found()
    return [VersionResponse.model_validate(v) for v in versions]


@router.get("/shared/{share_token}", response_model=SharedDocumentResponse)
async def get_shared_document(
    share_token: str,
    service: DocumentService = Depends(get_document_service),
):
    try:
        doc = await service.get_shared_document(share_token)
    except DocumentNotFound:
        raise _not_found()
    return SharedDocumentResponse.model_validate(doc)
