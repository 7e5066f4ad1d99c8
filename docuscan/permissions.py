"""
Row-level document filtering by the current user's document type grants.
"""

from sqlalchemy import Select, exists, false, or_

from docuscan.entities import Document, UserPermission
from docuscan.models import CurrentUser


def filter_by_user_permissions(
    documents: Select,
    current_user: CurrentUser,
    permissions=UserPermission,
) -> Select:
    """
    Narrow a ``select(Document)`` to the rows *current_user* may see.

    A document is visible when ANY of the user's permission rows matches it:
    the permission's document type is null (wildcard), the document's type is
    null, or both types are equal. Super users bypass the filter entirely and
    users without access get an empty result whatever rows they hold.

    The statement is not executed; the caller can keep adding filters,
    ordering and pagination.
    """
    if current_user is None:
        raise ValueError("current_user is required to filter documents.")
    if documents is None:
        raise ValueError("documents must be a SELECT over documents.")
    for column in ("user_id", "document_type_id"):
        if not hasattr(permissions, column):
            raise ValueError(f"Permission source has no '{column}' column.")

    if current_user.is_super_user:
        return documents

    if not current_user.has_access:
        return documents.where(false())

    # Semi-join: one EXISTS probe per document, no duplicate rows.
    granted = exists().where(
        permissions.user_id == current_user.user_id,
        or_(
            Document.document_type_id.is_(None),
            permissions.document_type_id.is_(None),
            Document.document_type_id == permissions.document_type_id,
        ),
    )
    return documents.where(granted)
