"""
Identity – building the request-scoped CurrentUser from the user tables.
"""

import sys
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from docuscan.entities import DocuScanUser, UserPermission
from docuscan.models import AccessRequestResult, CurrentUser


def _find_user(session: Session, account_name: str) -> Optional[DocuScanUser]:
    return session.scalars(
        select(DocuScanUser).where(DocuScanUser.account_name == account_name)
    ).first()


def load_current_user(session: Session, account_name: Optional[str]) -> CurrentUser:
    """Look up *account_name* and return the CurrentUser it may act as."""
    if not account_name or not account_name.strip():
        print("[WARN] No authenticated user found", file=sys.stderr)
        return CurrentUser(has_access=False)

    user = _find_user(session, account_name)
    if user is None:
        print(f"[WARN] User not found in docuscan_users: {account_name}", file=sys.stderr)
        return CurrentUser(account_name=account_name, has_access=False)

    if user.is_super_user:
        return CurrentUser(
            user_id=user.id,
            account_name=user.account_name,
            is_super_user=True,
            has_access=True,
            last_logon=user.last_logon,
            allowed_document_types=None,
        )

    permissions = session.scalars(
        select(UserPermission).where(UserPermission.user_id == user.id)
    ).all()

    if not permissions:
        print(f"[WARN] User {account_name} has no permissions", file=sys.stderr)
        return CurrentUser(
            user_id=user.id,
            account_name=user.account_name,
            has_access=False,
            last_logon=user.last_logon,
        )

    # A wildcard row lifts every type restriction, whatever else is granted.
    if any(p.document_type_id is None for p in permissions):
        allowed = None
    else:
        allowed = sorted({p.document_type_id for p in permissions})
    return CurrentUser(
        user_id=user.id,
        account_name=user.account_name,
        has_access=True,
        last_logon=user.last_logon,
        allowed_document_types=allowed,
    )


def request_access(session: Session, account_name: str, reason: Optional[str] = None) -> AccessRequestResult:
    """Register *account_name* as a user without permissions, awaiting an administrator."""
    if not account_name or not account_name.strip():
        return AccessRequestResult(success=False, message="An account name is required.")

    if _find_user(session, account_name) is not None:
        return AccessRequestResult(
            success=True,
            message=(
                "Your account already exists in the system. "
                "Please contact your administrator to request permissions."
            ),
            user_already_exists=True,
        )

    session.add(DocuScanUser(
        account_name=account_name,
        is_super_user=False,
        created_on=datetime.utcnow(),
    ))
    session.commit()
    print(f"[identity] Access requested by {account_name} (reason: {reason or 'not provided'})")

    return AccessRequestResult(
        success=True,
        message=(
            "Your access request has been submitted successfully. "
            "An administrator will review your request and grant permissions."
        ),
        user_created=True,
    )


def update_last_logon(session: Session, account_name: Optional[str]) -> None:
    if not account_name or not account_name.strip():
        return
    user = _find_user(session, account_name)
    if user is None:
        return
    now = datetime.utcnow()
    user.last_logon = now
    user.modified_on = now
    session.commit()
