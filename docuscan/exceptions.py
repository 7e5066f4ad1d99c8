"""
Domain exceptions raised by the document and permission services.
"""

from typing import Dict, List, Optional


class DocumentNotFoundError(LookupError):
    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(f"Document with ID {document_id} not found")


class ValidationError(ValueError):
    """Invalid input; `errors` maps field names to messages when known."""

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        self.errors = errors or {}
        super().__init__(message)


class AccessDeniedError(PermissionError):
    pass
