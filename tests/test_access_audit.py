"""
Unit tests for the access audit reports.
"""

from datetime import datetime, timedelta

from docuscan.access_audit import document_type_access, summarize_access, user_access


def test_document_type_access_splits_global_and_direct(session, registry):
    now = datetime.utcnow()
    registry.doc_type(5, "Contract")
    registry.doc_type(6, "Invoice")
    registry.user(1, "wild", last_logon=now - timedelta(days=1))
    registry.user(2, "direct", last_logon=now)
    registry.user(3, "other", last_logon=now)
    registry.permission(1, None)
    registry.permission(2, 5)
    registry.permission(3, 6)

    df = document_type_access(session, 5)

    assert list(df["account_name"]) == ["direct", "wild"]
    assert list(df["access"]) == ["direct", "global"]


def test_document_type_access_filters(session, registry):
    now = datetime.utcnow()
    registry.doc_type(5)
    registry.user(1, "recent_boss", is_super_user=True, last_logon=now)
    registry.user(2, "stale", last_logon=now - timedelta(days=400))
    registry.user(3, "never")
    for user_id in (1, 2, 3):
        registry.permission(user_id, 5)

    assert list(document_type_access(session, 5, active_only=True)["account_name"]) == ["recent_boss"]
    assert list(document_type_access(session, 5, super_users_only=True)["account_name"]) == ["recent_boss"]
    assert list(document_type_access(session, 5, account_name_filter="STA")["account_name"]) == ["stale"]


def test_document_type_access_empty(session, registry):
    registry.doc_type(5)
    df = document_type_access(session, 5)
    assert df.empty
    assert "access" in df.columns
    assert summarize_access(df) == "(no users with access)"


def test_summarize_access_counts(session, registry):
    registry.doc_type(5)
    registry.permission(1, None)
    registry.permission(2, 5)
    registry.permission(3, 5)
    summary = summarize_access(document_type_access(session, 5))
    assert "direct" in summary
    assert "global" in summary
    assert "Total users with access: 3" in summary


def test_user_access_wildcard_covers_enabled_types(session, registry):
    registry.doc_type(1, "Alpha")
    registry.doc_type(2, "Beta")
    registry.doc_type(3, "Retired", is_enabled=False)
    perm = registry.permission(8, None)

    df = user_access(session, 8)

    assert list(df["document_type"]) == ["Alpha", "Beta"]
    assert df["has_access"].all()
    assert set(df["permission_id"]) == {perm.id}


def test_user_access_specific_types(session, registry):
    registry.doc_type(1, "Alpha")
    registry.doc_type(2, "Beta")
    registry.permission(8, 2)

    df = user_access(session, 8)

    assert list(df["has_access"]) == [False, True]


def test_user_access_unknown_user(session):
    assert user_access(session, 404) is None
