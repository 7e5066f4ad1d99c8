"""
Document registry service – reads filtered by user permissions, writes audited.
"""

import math
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from docuscan.audit import AuditAction, log_action
from docuscan.config import SEARCH_MAX_RESULTS, validate_search_options
from docuscan.entities import Document, DocumentType
from docuscan.exceptions import AccessDeniedError, DocumentNotFoundError, ValidationError
from docuscan.hub import DOCUMENT_CREATED, DOCUMENT_DELETED, DOCUMENT_UPDATED, DataUpdateHub
from docuscan.models import CurrentUser, DocumentInput, DocumentSearchRequest, DocumentSearchResult
from docuscan.permissions import filter_by_user_permissions

# Sortable columns by their request name.
SORT_COLUMNS = {
    "barcode": Document.barcode,
    "name": Document.name,
    "documenttype": DocumentType.name,
    "documentno": Document.document_no,
    "versionno": Document.version_no,
    "comment": Document.comment,
    "dateofcontract": Document.date_of_contract,
    "receivingdate": Document.receiving_date,
    "dispatchdate": Document.dispatch_date,
    "actiondate": Document.action_date,
    "amount": Document.amount,
    "currency": Document.currency_code,
}

# Fields copied verbatim from DocumentInput onto the entity.
_COPIED_FIELDS = (
    "name", "document_type_id", "document_no", "version_no", "comment",
    "third_party", "date_of_contract", "receiving_date", "dispatch_date",
    "action_date", "fax", "original_received", "confidential",
    "bank_confirmation", "currency_code", "amount",
)


def _visible(current_user: CurrentUser) -> Select:
    return filter_by_user_permissions(select(Document), current_user)


def _with_type(stmt: Select) -> Select:
    return stmt.options(selectinload(Document.document_type))


def document_summary(doc: Document) -> Dict[str, Any]:
    """Plain dict for notifications and printing."""
    return {
        "id": doc.id,
        "barcode": doc.barcode,
        "name": doc.name,
        "document_type_id": doc.document_type_id,
        "document_type": doc.document_type.name if doc.document_type else None,
        "document_no": doc.document_no,
        "comment": doc.comment,
    }


# ── Reads ────────────────────────────────────────────────────────────

def list_documents(session: Session, current_user: CurrentUser) -> List[Document]:
    return list(session.scalars(_with_type(_visible(current_user)).order_by(Document.id)))


def get_document(session: Session, current_user: CurrentUser, document_id: int) -> Document:
    """Fetch one document; raises if it is missing or hidden from the user."""
    doc = session.scalars(
        _with_type(_visible(current_user)).where(Document.id == document_id)
    ).first()
    if doc is not None:
        return doc
    if session.get(Document, document_id) is None:
        raise DocumentNotFoundError(document_id)
    raise AccessDeniedError(f"Access denied to document {document_id}")


def get_document_by_barcode(session: Session, current_user: CurrentUser, barcode: str) -> Optional[Document]:
    try:
        barcode_int = int(str(barcode).strip())
    except ValueError:
        print(f"[WARN] Invalid barcode format: {barcode}", file=sys.stderr)
        return None
    return session.scalars(
        _with_type(_visible(current_user)).where(Document.barcode == barcode_int)
    ).first()


def get_documents_by_ids(session: Session, current_user: CurrentUser, ids: List[int]) -> List[Document]:
    if not ids:
        raise ValidationError("No document IDs provided")
    return list(session.scalars(
        _with_type(_visible(current_user)).where(Document.id.in_(ids)).order_by(Document.id)
    ))


# ── Search ───────────────────────────────────────────────────────────

def _contains(column, value: Optional[str]):
    return column.is_not(None) & column.contains(value.strip(), autoescape=True)


def apply_search_filters(stmt: Select, request: DocumentSearchRequest) -> Select:
    """Add the request's field filters (AND-ed) to *stmt*."""
    barcodes = request.barcode_list()
    if barcodes:
        stmt = stmt.where(Document.barcode.in_(barcodes))
    if request.document_type_ids:
        stmt = stmt.where(Document.document_type_id.in_(request.document_type_ids))

    for column, value in (
        (Document.document_no, request.document_number),
        (Document.version_no, request.version_no),
        (Document.comment, request.comment),
    ):
        if value and value.strip():
            stmt = stmt.where(_contains(column, value))

    for column, value in (
        (Document.fax, request.fax),
        (Document.original_received, request.original_received),
        (Document.confidential, request.confidential),
        (Document.bank_confirmation, request.bank_confirmation),
    ):
        if value is not None:
            stmt = stmt.where(column == value)

    if request.currency_code and request.currency_code.strip():
        stmt = stmt.where(Document.currency_code == request.currency_code.strip())

    # Open-ended ranges
    for column, low, high in (
        (Document.amount, request.amount_from, request.amount_to),
        (Document.date_of_contract, request.date_of_contract_from, request.date_of_contract_to),
        (Document.receiving_date, request.receiving_date_from, request.receiving_date_to),
    ):
        if low is not None:
            stmt = stmt.where(column >= low)
        if high is not None:
            stmt = stmt.where(column <= high)

    return stmt


def apply_sorting(stmt: Select, sort_column: Optional[str], sort_direction: Optional[str]) -> Select:
    """Order by a known column; unknown or empty names leave *stmt* as is."""
    if not sort_column or not sort_column.strip():
        return stmt
    column = SORT_COLUMNS.get(sort_column.strip().lower())
    if column is None:
        return stmt
    if column is DocumentType.name:
        stmt = stmt.outerjoin(DocumentType, Document.document_type_id == DocumentType.id)
    descending = (sort_direction or "").lower() == "desc"
    return stmt.order_by(column.desc() if descending else column.asc(), Document.id)


def search_documents(
    session: Session,
    current_user: CurrentUser,
    request: DocumentSearchRequest,
    max_results: int = SEARCH_MAX_RESULTS,
) -> DocumentSearchResult:
    """Filter, permission-check, sort, cap at *max_results*, then paginate."""
    validate_search_options(max_results=max_results)
    if request.page_number < 1:
        raise ValidationError("page_number must be at least 1", {"page_number": ["must be >= 1"]})
    if request.page_size < 1:
        raise ValidationError("page_size must be at least 1", {"page_size": ["must be >= 1"]})

    stmt = apply_search_filters(_visible(current_user), request)
    stmt = apply_sorting(stmt, request.sort_column, request.sort_direction)
    capped = stmt.limit(max_results)

    total_count = session.scalar(select(func.count()).select_from(capped.subquery()))
    offset = (request.page_number - 1) * request.page_size
    # Paging happens inside the capped window.
    page_size = max(0, min(request.page_size, max_results - offset))
    page = _with_type(stmt).offset(offset).limit(page_size)
    items = list(session.scalars(page)) if page_size else []

    return DocumentSearchResult(
        items=items,
        total_count=total_count,
        current_page=request.page_number,
        page_size=request.page_size,
        total_pages=math.ceil(total_count / request.page_size),
        max_limit_reached=total_count >= max_results,
        max_limit=max_results,
    )


# ── Writes ───────────────────────────────────────────────────────────

def _check_document_type(session: Session, current_user: CurrentUser, document_type_id: Optional[int]) -> None:
    if document_type_id is not None and session.get(DocumentType, document_type_id) is None:
        raise ValidationError(
            "Invalid document type",
            {"document_type_id": [f"Document type with ID {document_type_id} does not exist"]},
        )
    if not current_user.can_access_document_type(document_type_id):
        raise AccessDeniedError(
            f"User {current_user.account_name or current_user.user_id} "
            f"cannot access document type {document_type_id}"
        )


def _next_barcode(session: Session) -> int:
    return (session.scalar(select(func.max(Document.barcode))) or 0) + 1


def create_document(
    session: Session,
    current_user: CurrentUser,
    data: DocumentInput,
    hub: Optional[DataUpdateHub] = None,
) -> Document:
    _check_document_type(session, current_user, data.document_type_id)

    if data.barcode and data.barcode.strip():
        try:
            barcode = int(data.barcode.strip())
        except ValueError:
            raise ValidationError("Invalid barcode", {"barcode": [f"'{data.barcode}' is not a number"]})
        taken = session.scalar(select(func.count()).where(Document.barcode == barcode))
        if taken:
            raise ValidationError(f"Document with barcode {barcode} already exists")
    else:
        barcode = _next_barcode(session)

    doc = Document(barcode=barcode, created_by=current_user.account_name or "unknown")
    for name in _COPIED_FIELDS:
        setattr(doc, name, getattr(data, name))
    session.add(doc)
    session.flush()

    log_action(session, AuditAction.REGISTER, str(doc.barcode),
               f"Document registered: {doc.name}", current_user.account_name)
    session.commit()
    print(f"[documents] Registered document {doc.id} (barcode {doc.barcode})")

    if hub is not None:
        hub.send_all(DOCUMENT_CREATED, document_summary(doc))
    return doc


def update_document(
    session: Session,
    current_user: CurrentUser,
    document_id: int,
    data: DocumentInput,
    hub: Optional[DataUpdateHub] = None,
) -> Document:
    doc = get_document(session, current_user, document_id)
    _check_document_type(session, current_user, data.document_type_id)

    changes = []
    if doc.name != data.name:
        changes.append(f"Name: '{doc.name}' -> '{data.name}'")
    if doc.document_type_id != data.document_type_id:
        changes.append("DocumentType changed")
    if doc.comment != data.comment:
        changes.append("Comment updated")

    for name in _COPIED_FIELDS:
        setattr(doc, name, getattr(data, name))
    doc.modified_by = current_user.account_name or "unknown"
    doc.modified_on = datetime.utcnow()

    details = f"Document edited: {', '.join(changes)}" if changes else "Document edited"
    log_action(session, AuditAction.EDIT, str(doc.barcode), details, current_user.account_name)
    session.commit()
    session.refresh(doc)
    print(f"[documents] Updated document {doc.id}")

    if hub is not None:
        hub.send_all(DOCUMENT_UPDATED, document_summary(doc))
    return doc


def delete_document(
    session: Session,
    current_user: CurrentUser,
    document_id: int,
    hub: Optional[DataUpdateHub] = None,
) -> None:
    doc = get_document(session, current_user, document_id)
    barcode, name = doc.barcode, doc.name

    session.delete(doc)
    log_action(session, AuditAction.DELETE, str(barcode),
               f"Document deleted: {name}", current_user.account_name)
    session.commit()
    print(f"[documents] Deleted document {document_id}")

    if hub is not None:
        hub.send_all(DOCUMENT_DELETED, document_id)
