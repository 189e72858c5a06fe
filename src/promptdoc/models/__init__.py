"""SQLAlchemy ORM models - import all models here for Alembic discovery."""

from promptdoc.models.base import Base
from promptdoc.models.enums import ThemePreference, UserRole
from promptdoc.models.user import User
from promptdoc.models.template import DocumentTemplate
from promptdoc.models.document import Document
from promptdoc.models.document_version import DocumentVersion
from promptdoc.models.audit_log import AuditLog

__all__ = [
    "Base",
    "UserRole",
    "ThemePreference",
    "User",
    "DocumentTemplate",
    "Document",
    "DocumentVersion",
    "AuditLog",
]
