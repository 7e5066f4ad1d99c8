"""
Access audit reports – who can see which document types.
"""

from datetime import datetime, timedelta
from typing import Optional

import pandas as pd
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from docuscan.config import ACTIVE_DAYS_THRESHOLD
from docuscan.entities import DocumentType, DocuScanUser, UserPermission

ACCESS_COLUMNS = ["user_id", "account_name", "last_logon", "is_super_user", "permission_id", "access"]


def document_type_access(
    session: Session,
    document_type_id: int,
    active_only: bool = False,
    super_users_only: bool = False,
    account_name_filter: Optional[str] = None,
    active_days_threshold: int = ACTIVE_DAYS_THRESHOLD,
) -> pd.DataFrame:
    """
    One row per permission granting *document_type_id*: wildcard grants are
    reported as access="global", grants of this exact type as "direct".
    Most recent logon first, then account name.
    """
    stmt = (
        select(
            UserPermission.user_id,
            DocuScanUser.account_name,
            DocuScanUser.last_logon,
            DocuScanUser.is_super_user,
            UserPermission.id.label("permission_id"),
            UserPermission.document_type_id,
        )
        .join(DocuScanUser, UserPermission.user_id == DocuScanUser.id)
        .where(or_(
            UserPermission.document_type_id.is_(None),
            UserPermission.document_type_id == document_type_id,
        ))
    )
    if active_only:
        threshold = datetime.utcnow() - timedelta(days=active_days_threshold)
        stmt = stmt.where(DocuScanUser.last_logon >= threshold)
    if super_users_only:
        stmt = stmt.where(DocuScanUser.is_super_user.is_(True))
    if account_name_filter and account_name_filter.strip():
        stmt = stmt.where(DocuScanUser.account_name.icontains(account_name_filter.strip()))

    rows = session.execute(stmt).mappings().all()
    if not rows:
        return pd.DataFrame(columns=ACCESS_COLUMNS)

    df = pd.DataFrame([dict(r) for r in rows])
    df["access"] = df["document_type_id"].isna().map({True: "global", False: "direct"})
    df = df.sort_values(
        ["last_logon", "account_name"], ascending=[False, True], na_position="last"
    )
    return df[ACCESS_COLUMNS].reset_index(drop=True)


def user_access(session: Session, user_id: int) -> Optional[pd.DataFrame]:
    """Every enabled document type with whether *user_id* may see it, or None for unknown users."""
    user = session.get(DocuScanUser, user_id)
    if user is None:
        return None

    granted = {p.document_type_id: p.id for p in user.permissions}
    global_id = granted.get(None)

    types = session.scalars(
        select(DocumentType).where(DocumentType.is_enabled.is_(True)).order_by(DocumentType.name)
    ).all()
    records = []
    for dt in types:
        permission_id = global_id if global_id is not None else granted.get(dt.id)
        records.append({
            "document_type_id": dt.id,
            "document_type": dt.name,
            "has_access": user.is_super_user or permission_id is not None,
            "permission_id": permission_id,
        })
    return pd.DataFrame(records, columns=["document_type_id", "document_type", "has_access", "permission_id"])


def summarize_access(df: pd.DataFrame) -> str:
    """Markdown count of grants per access kind."""
    if df.empty:
        return "(no users with access)"
    counts = df["access"].value_counts().reset_index()
    counts.columns = ["access", "count"]
    total = f"\n\nTotal users with access: {df['user_id'].nunique()}"
    return counts.to_markdown(index=False) + total
