"""
Unit tests for the audit trail.
"""

import pytest

from docuscan.audit import AuditAction, get_by_barcode, log_action


def test_log_action_and_read_back_newest_first(session):
    log_action(session, AuditAction.REGISTER, "1001", "Document registered: A", "clerk")
    log_action(session, AuditAction.EDIT, "1001", "Document edited", "clerk")
    log_action(session, AuditAction.DELETE, "2002", "Document deleted: B", "boss")
    session.commit()

    trail = get_by_barcode(session, 1001)
    assert [t.action for t in trail] == ["Edit", "Register"]
    assert all(t.user == "clerk" for t in trail)


def test_log_action_truncates_long_details(session):
    entry = log_action(session, AuditAction.SEND_LINK, "1", "x" * 3000, "clerk")
    assert len(entry.details) == 2500


def test_log_action_accepts_action_names_and_defaults_user(session):
    entry = log_action(session, "CheckIn", "7", None, "")
    assert entry.action == "CheckIn"
    assert entry.user == "unknown"


def test_log_action_rejects_unknown_action(session):
    with pytest.raises(ValueError):
        log_action(session, "Shred", "7", None, "clerk")
