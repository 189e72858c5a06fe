"""Domain errors raised by the content, versioning and document layers.

Storage errors (``sqlalchemy.exc.SQLAlchemyError``) are not wrapped; they
propagate to the caller unchanged after the unit of work rolls back.
"""


class DocumentError(Exception):
    """Base class for document-domain failures."""


class DocumentNotFound(DocumentError):
    def __init__(self, document_id: int | str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class TemplateNotFound(DocumentError):
    def __init__(self, template_id: int) -> None:
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class MalformedContent(DocumentError, ValueError):
    """Content is not the mapping shape a merge or decode requires."""
