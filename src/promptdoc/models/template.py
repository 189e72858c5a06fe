from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from promptdoc.models.base import Base, SerializedContent, int_pk, created_at


class DocumentTemplate(Base):
    __tablename__ = "document_templates"

    id: Mapped[int_pk]
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Partial content, merged over the defaults when a document is created
    content: Mapped[dict[str, Any]] = mapped_column(SerializedContent, nullable=False)
    is_system: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[created_at]
