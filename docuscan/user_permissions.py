"""
Administration of DocuScan users and their document type grants.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from docuscan.entities import DocumentType, DocuScanUser, UserPermission
from docuscan.exceptions import ValidationError


def _get_user(session: Session, user_id: int) -> DocuScanUser:
    user = session.get(DocuScanUser, user_id)
    if user is None:
        raise ValidationError(f"User with ID {user_id} not found")
    return user


def list_users(session: Session, account_name_filter: Optional[str] = None) -> List[DocuScanUser]:
    stmt = select(DocuScanUser).order_by(DocuScanUser.account_name)
    if account_name_filter and account_name_filter.strip():
        stmt = stmt.where(DocuScanUser.account_name.icontains(account_name_filter.strip()))
    return list(session.scalars(stmt))


def create_user(session: Session, account_name: str, is_super_user: bool = False) -> DocuScanUser:
    if not account_name or not account_name.strip():
        raise ValidationError("Account name is required", {"account_name": ["required"]})
    taken = session.scalars(
        select(DocuScanUser).where(DocuScanUser.account_name == account_name)
    ).first()
    if taken is not None:
        raise ValidationError(f"User with account name '{account_name}' already exists")

    user = DocuScanUser(
        account_name=account_name,
        is_super_user=is_super_user,
        created_on=datetime.utcnow(),
    )
    session.add(user)
    session.commit()
    print(f"[permissions] Created user {user.id} ({account_name})")
    return user


def delete_user(session: Session, user_id: int) -> None:
    """Remove a user together with every permission they hold."""
    user = _get_user(session, user_id)
    count = len(user.permissions)
    session.delete(user)
    session.commit()
    print(f"[permissions] Deleted user {user_id} and {count} permissions")


def set_super_user(session: Session, user_id: int, is_super_user: bool) -> DocuScanUser:
    user = _get_user(session, user_id)
    user.is_super_user = is_super_user
    user.modified_on = datetime.utcnow()
    session.commit()
    return user


def list_permissions(session: Session, user_id: int) -> List[UserPermission]:
    return list(session.scalars(
        select(UserPermission)
        .where(UserPermission.user_id == user_id)
        .order_by(UserPermission.id)
    ))


def grant_permission(session: Session, user_id: int, document_type_id: Optional[int] = None) -> UserPermission:
    """Grant one document type, or every type when *document_type_id* is None."""
    _get_user(session, user_id)
    if document_type_id is not None and session.get(DocumentType, document_type_id) is None:
        raise ValidationError(f"Document type with ID {document_type_id} not found")

    if document_type_id is None:
        type_match = UserPermission.document_type_id.is_(None)
    else:
        type_match = UserPermission.document_type_id == document_type_id
    existing = session.scalars(
        select(UserPermission).where(UserPermission.user_id == user_id, type_match)
    ).first()
    if existing is not None:
        return existing

    permission = UserPermission(user_id=user_id, document_type_id=document_type_id)
    session.add(permission)
    session.commit()
    return permission


def revoke_permission(session: Session, permission_id: int) -> None:
    permission = session.get(UserPermission, permission_id)
    if permission is None:
        raise ValidationError(f"UserPermission with ID {permission_id} not found")
    session.delete(permission)
    session.commit()


def replace_document_type_permissions(
    session: Session, user_id: int, document_type_ids: Iterable[int]
) -> Tuple[int, int]:
    """
    Make the user's specific document type grants exactly *document_type_ids*.
    Wildcard rows are left alone. Returns (added, removed).
    """
    _get_user(session, user_id)
    wanted = set(document_type_ids)
    known = set(session.scalars(select(DocumentType.id).where(DocumentType.id.in_(wanted))))
    unknown = sorted(wanted - known)
    if unknown:
        raise ValidationError(f"Unknown document type IDs: {unknown}")
    current = {
        p.document_type_id: p
        for p in list_permissions(session, user_id)
        if p.document_type_id is not None
    }

    removed = 0
    for type_id, permission in current.items():
        if type_id not in wanted:
            session.delete(permission)
            removed += 1

    added = 0
    for type_id in sorted(wanted - current.keys()):
        session.add(UserPermission(user_id=user_id, document_type_id=type_id))
        added += 1

    session.commit()
    print(f"[permissions] Batch update for user {user_id}: added={added}, removed={removed}")
    return added, removed
