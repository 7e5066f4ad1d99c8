"""
Administration of document types.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from docuscan.entities import Document, DocumentType, UserPermission
from docuscan.exceptions import ValidationError


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _get_type(session: Session, document_type_id: int) -> DocumentType:
    doc_type = session.get(DocumentType, document_type_id)
    if doc_type is None:
        raise ValidationError(f"Document type with ID {document_type_id} not found")
    return doc_type


def _check_name(session: Session, name: str, exclude_id: Optional[int] = None) -> str:
    if not name or not name.strip():
        raise ValidationError("Document type name is required", {"name": ["required"]})
    name = name.strip()
    stmt = select(DocumentType.id).where(DocumentType.name == name)
    if exclude_id is not None:
        stmt = stmt.where(DocumentType.id != exclude_id)
    if session.scalars(stmt).first() is not None:
        raise ValidationError(f"Document type with name '{name}' already exists")
    return name


def list_document_types(session: Session, include_disabled: bool = False) -> List[DocumentType]:
    stmt = select(DocumentType).order_by(DocumentType.name)
    if not include_disabled:
        stmt = stmt.where(DocumentType.is_enabled.is_(True))
    return list(session.scalars(stmt))


def get_document_type(session: Session, document_type_id: int) -> Optional[DocumentType]:
    return session.get(DocumentType, document_type_id)


def create_document_type(
    session: Session,
    name: str,
    is_enabled: bool = True,
    is_appendix: bool = False,
) -> DocumentType:
    name = _check_name(session, name)
    doc_type = DocumentType(name=name, is_enabled=is_enabled, is_appendix=is_appendix)
    session.add(doc_type)
    session.commit()
    print(f"[document_types] Created document type {doc_type.id} ({name})")
    return doc_type


def update_document_type(
    session: Session,
    document_type_id: int,
    name: str,
    is_enabled: bool = True,
    is_appendix: bool = False,
) -> DocumentType:
    doc_type = _get_type(session, document_type_id)
    doc_type.name = _check_name(session, name, exclude_id=document_type_id)
    doc_type.is_enabled = is_enabled
    doc_type.is_appendix = is_appendix
    session.commit()
    print(f"[document_types] Updated document type {document_type_id}")
    return doc_type


def usage_counts(session: Session, document_type_id: int) -> Tuple[int, int]:
    """(documents, user permissions) that reference the type."""
    documents = session.scalar(
        select(func.count()).select_from(Document).where(Document.document_type_id == document_type_id)
    )
    permissions = session.scalar(
        select(func.count()).select_from(UserPermission)
        .where(UserPermission.document_type_id == document_type_id)
    )
    return documents, permissions


def delete_document_type(session: Session, document_type_id: int) -> None:
    """Delete an unused type; refused while documents or grants still reference it."""
    documents, permissions = usage_counts(session, document_type_id)
    if documents or permissions:
        usage = []
        if documents:
            usage.append(_plural(documents, "document"))
        if permissions:
            usage.append(_plural(permissions, "user permission"))
        raise ValidationError(
            f"Cannot delete document type. It is currently used by {', '.join(usage)}."
        )

    doc_type = _get_type(session, document_type_id)
    session.delete(doc_type)
    session.commit()
    print(f"[document_types] Deleted document type {document_type_id}")
