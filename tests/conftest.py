"""
Shared fixtures: an in-memory SQLite registry and a small row builder.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from docuscan.database import create_schema, make_session_factory
from docuscan.entities import Document, DocumentType, DocuScanUser, UserPermission


class Registry:
    """Adds rows with explicit ids so tests can talk about 'user 7'."""

    def __init__(self, session):
        self.session = session

    def doc_type(self, id, name=None, is_enabled=True):
        dt = DocumentType(id=id, name=name or f"Type {id}", is_enabled=is_enabled)
        self.session.add(dt)
        self.session.commit()
        return dt

    def document(self, id, document_type_id=None, barcode=None, **fields):
        if document_type_id is not None and self.session.get(DocumentType, document_type_id) is None:
            self.doc_type(document_type_id)
        doc = Document(
            id=id,
            name=fields.pop("name", f"Document {id}"),
            barcode=barcode if barcode is not None else 1000 + id,
            document_type_id=document_type_id,
            created_by="tests",
            **fields,
        )
        self.session.add(doc)
        self.session.commit()
        return doc

    def user(self, id, account_name=None, is_super_user=False, last_logon=None):
        user = DocuScanUser(
            id=id,
            account_name=account_name or f"user{id}",
            is_super_user=is_super_user,
            last_logon=last_logon,
        )
        self.session.add(user)
        self.session.commit()
        return user

    def permission(self, user_id, document_type_id=None):
        if self.session.get(DocuScanUser, user_id) is None:
            self.user(user_id)
        if document_type_id is not None and self.session.get(DocumentType, document_type_id) is None:
            self.doc_type(document_type_id)
        perm = UserPermission(user_id=user_id, document_type_id=document_type_id)
        self.session.add(perm)
        self.session.commit()
        return perm


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    Session = make_session_factory(engine)
    with Session() as s:
        yield s


@pytest.fixture
def registry(session):
    return Registry(session)
