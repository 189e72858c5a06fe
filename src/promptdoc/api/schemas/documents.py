"""Document, sharing and version schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str | None = None
    last_modified: str | None = Field(default=None, alias="lastModified")
    completeness: float | None = Field(default=None, ge=0, le=100)
    quality_score: float | None = Field(default=None, alias="qualityScore")


class ContentUpdate(BaseModel):
    """Partial content. Omitted or null keys leave stored values alone."""

    model_config = ConfigDict(extra="allow")

    sections: dict[str, str | None] | None = None
    metadata: ContentMetadata | None = None

    def to_partial(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=True)


class CreateDocumentRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    template_id: int | None = None


class UpdateDocumentRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: ContentUpdate | None = None
    is_public: bool | None = None


class DuplicateDocumentRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)


class ShareRequest(BaseModel):
    expires_at: datetime | None = None


class ShareResponse(BaseModel):
    document_id: int
    share_token: str
    share_expires_at: datetime | None = None


class DocumentResponse(BaseModel):
    id: int
    title: str
    owner_id: int
    content: dict[str, Any]
    is_public: bool
    share_token: str | None = None
    share_expires_at: datetime | None = None
    template_id: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SharedDocumentResponse(BaseModel):
    id: int
    title: str
    content: dict[str, Any]
    updated_at: datetime

    model_config = {"from_attributes": True}


class VersionResponse(BaseModel):
    id: int
    document_id: int
    version_number: int
    content: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
