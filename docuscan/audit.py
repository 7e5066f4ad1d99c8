"""
Audit trail of actions taken on registered documents.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from docuscan.config import AUDIT_DETAILS_MAX_CHARS
from docuscan.entities import AuditTrail


class AuditAction(str, Enum):
    EDIT = "Edit"
    REGISTER = "Register"
    CHECK_IN = "CheckIn"
    DELETE = "Delete"
    SEND_LINK = "SendLink"
    SEND_ATTACHMENT = "SendAttachment"
    SEND_LINKS = "SendLinks"
    SEND_ATTACHMENTS = "SendAttachments"


def log_action(
    session: Session,
    action: AuditAction,
    barcode: str,
    details: Optional[str],
    user: str,
) -> AuditTrail:
    """Append an audit row; the caller owns the commit."""
    if details and len(details) > AUDIT_DETAILS_MAX_CHARS:
        details = details[:AUDIT_DETAILS_MAX_CHARS]
    entry = AuditTrail(
        timestamp=datetime.utcnow(),
        user=user or "unknown",
        action=AuditAction(action).value,
        details=details,
        barcode=str(barcode),
    )
    session.add(entry)
    return entry


def get_by_barcode(session: Session, barcode: str) -> List[AuditTrail]:
    """All audit rows for a barcode, newest first."""
    return list(session.scalars(
        select(AuditTrail)
        .where(AuditTrail.barcode == str(barcode))
        .order_by(AuditTrail.timestamp.desc(), AuditTrail.id.desc())
    ))
