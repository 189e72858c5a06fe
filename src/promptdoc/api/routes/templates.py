"""Document template endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptdoc.api.deps import Principal, require_user
from promptdoc.api.schemas.templates import CreateTemplateRequest, TemplateResponse
from promptdoc.audit import log_audit
from promptdoc.db import get_session
from promptdoc.models import DocumentTemplate

logger = logging.getLogger(__name__)
router = APIRouter(tags=["templates"])


@router.get("/templates", response_model=list[TemplateResponse])
async def list_templates(
    principal: Principal = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    result = await session.execute(
        select(DocumentTemplate)
        .where(or_(
            DocumentTemplate.is_system.is_(True),
            DocumentTemplate.created_by == principal.id,
        ))
        .order_by(DocumentTemplate.is_system.desc(), DocumentTemplate.name)
    )
    return [TemplateResponse.model_validate(t) for t in result.scalars().all()]


@router.get("/templates/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: int,
    principal: Principal = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    template = await session.get(DocumentTemplate, template_id)
    if template is None or not (template.is_system or template.created_by == principal.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return TemplateResponse.model_validate(template)


@router.post("/templates", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    body: CreateTemplateRequest,
    principal: Principal = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    if body.is_system and principal.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required for system templates",
        )

    template = DocumentTemplate(
        name=body.name,
        description=body.description,
        content=body.content.to_partial(),
        is_system=body.is_system,
        created_by=principal.id,
    )
    session.add(template)
    await session.flush()
    await log_audit(
        session, user_id=principal.id, action="create_template",
        target_type="template", target_id=template.id,
    )
    await session.commit()
    return TemplateResponse.model_validate(template)


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    principal: Principal = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    template = await session.get(DocumentTemplate, template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    if template.is_system:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="System templates cannot be deleted",
        )
    if template.created_by != principal.id and principal.role != "admin":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")

    await session.delete(template)
    await log_audit(
        session, user_id=principal.id, action="delete_template",
        target_type="template", target_id=template_id,
    )
    await session.commit()
