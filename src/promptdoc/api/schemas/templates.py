"""Document template schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from promptdoc.api.schemas.documents import ContentUpdate


class CreateTemplateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    content: ContentUpdate
    is_system: bool = False


class TemplateResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    content: dict[str, Any]
    is_system: bool
    created_by: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
