from datetime import datetime, timezone
from typing import Annotated, Any

from sqlalchemy import DateTime, Integer, Text, TypeDecorator, text
from sqlalchemy.orm import DeclarativeBase, mapped_column

from promptdoc.content import deserialize_content, serialize_content


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Reusable annotated types for common column patterns
int_pk = Annotated[
    int,
    mapped_column(Integer, primary_key=True, autoincrement=True),
]

created_at = Annotated[
    datetime,
    mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
]

updated_at = Annotated[
    datetime,
    mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
]


class SerializedContent(TypeDecorator):
    """Document content stored as JSON text, decoded back into a dict."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> str | None:
        if value is None:
            return None
        return serialize_content(value)

    def process_result_value(self, value: str | None, dialect) -> dict | None:
        if value is None:
            return None
        return deserialize_content(value)


class Base(DeclarativeBase):
    pass
