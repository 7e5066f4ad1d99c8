"""
Unit tests for user and permission administration.
"""

import pytest

from docuscan.entities import DocuScanUser, UserPermission
from docuscan.exceptions import ValidationError
from docuscan.identity import load_current_user
from docuscan.user_permissions import (
    create_user,
    delete_user,
    grant_permission,
    list_permissions,
    list_users,
    replace_document_type_permissions,
    revoke_permission,
    set_super_user,
)


def test_create_user_and_reject_duplicate(session):
    user = create_user(session, "clerk")
    assert user.id is not None
    assert user.is_super_user is False
    with pytest.raises(ValidationError, match="already exists"):
        create_user(session, "clerk")


def test_create_user_requires_account_name(session):
    with pytest.raises(ValidationError):
        create_user(session, " ")


def test_list_users_filters_case_insensitively(session, registry):
    registry.user(1, "Alice")
    registry.user(2, "bob")
    registry.user(3, "malice")
    assert [u.account_name for u in list_users(session, "ALI")] == ["Alice", "malice"]
    assert len(list_users(session)) == 3


def test_grant_permission_is_idempotent(session, registry):
    registry.user(8)
    registry.doc_type(5)
    first = grant_permission(session, 8, 5)
    again = grant_permission(session, 8, 5)
    wildcard = grant_permission(session, 8, None)
    wildcard_again = grant_permission(session, 8)
    assert first.id == again.id
    assert wildcard.id == wildcard_again.id
    assert [p.document_type_id for p in list_permissions(session, 8)] == [5, None]


def test_grant_permission_validates_user_and_type(session, registry):
    registry.user(8)
    with pytest.raises(ValidationError, match="User with ID 99"):
        grant_permission(session, 99, None)
    with pytest.raises(ValidationError, match="Document type"):
        grant_permission(session, 8, 404)


def test_granting_gives_access(session, registry):
    registry.user(8, "clerk")
    registry.doc_type(5)
    assert load_current_user(session, "clerk").has_access is False
    grant_permission(session, 8, 5)
    assert load_current_user(session, "clerk").allowed_document_types == [5]


def test_revoke_permission(session, registry):
    perm = registry.permission(8, 5)
    revoke_permission(session, perm.id)
    assert list_permissions(session, 8) == []
    with pytest.raises(ValidationError):
        revoke_permission(session, perm.id)


def test_delete_user_cascades_permissions(session, registry):
    registry.permission(8, 5)
    registry.permission(8, None)
    delete_user(session, 8)
    assert session.get(DocuScanUser, 8) is None
    assert session.query(UserPermission).count() == 0


def test_set_super_user(session, registry):
    registry.user(8, "clerk")
    set_super_user(session, 8, True)
    assert load_current_user(session, "clerk").is_super_user is True


def test_replace_document_type_permissions(session, registry):
    for type_id in (1, 2, 3):
        registry.doc_type(type_id)
    registry.permission(8, 1)
    registry.permission(8, 2)
    registry.permission(8, None)

    added, removed = replace_document_type_permissions(session, 8, [2, 3])

    assert (added, removed) == (1, 1)
    assert sorted(
        (p.document_type_id for p in list_permissions(session, 8)),
        key=lambda t: -1 if t is None else t,
    ) == [None, 2, 3]


def test_replace_rejects_unknown_types(session, registry):
    registry.user(8)
    registry.doc_type(1)
    with pytest.raises(ValidationError, match="Unknown document type"):
        replace_document_type_permissions(session, 8, [1, 77])
    assert list_permissions(session, 8) == []
