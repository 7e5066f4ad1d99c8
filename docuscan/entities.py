"""
SQLAlchemy ORM entities for the document registry tables.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class DocumentType(Base):
    __tablename__ = "document_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    is_appendix: Mapped[bool] = mapped_column(default=False)
    is_enabled: Mapped[bool] = mapped_column(default=True)

    documents: Mapped[List["Document"]] = relationship(back_populates="document_type")
    user_permissions: Mapped[List["UserPermission"]] = relationship(back_populates="document_type")


class Document(Base):
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    barcode: Mapped[int] = mapped_column(unique=True)
    document_type_id: Mapped[Optional[int]] = mapped_column(ForeignKey("document_types.id"))

    document_no: Mapped[Optional[str]] = mapped_column(String(255))
    version_no: Mapped[Optional[str]] = mapped_column(String(255))
    comment: Mapped[Optional[str]] = mapped_column(String(255))
    third_party: Mapped[Optional[str]] = mapped_column(String(255))

    date_of_contract: Mapped[Optional[datetime]]
    receiving_date: Mapped[Optional[datetime]]
    dispatch_date: Mapped[Optional[datetime]]
    action_date: Mapped[Optional[datetime]]

    fax: Mapped[Optional[bool]]
    original_received: Mapped[Optional[bool]]
    confidential: Mapped[Optional[bool]]
    bank_confirmation: Mapped[Optional[bool]]

    currency_code: Mapped[Optional[str]] = mapped_column(String(3))
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2))

    created_on: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    created_by: Mapped[str] = mapped_column(String(255))
    modified_on: Mapped[Optional[datetime]]
    modified_by: Mapped[Optional[str]] = mapped_column(String(255))

    document_type: Mapped[Optional[DocumentType]] = relationship(back_populates="documents")


class DocuScanUser(Base):
    __tablename__ = "docuscan_users"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_name: Mapped[str] = mapped_column(String(255), unique=True)
    is_super_user: Mapped[bool] = mapped_column(default=False, index=True)
    last_logon: Mapped[Optional[datetime]] = mapped_column(index=True)
    created_on: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    modified_on: Mapped[Optional[datetime]]

    permissions: Mapped[List["UserPermission"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


class UserPermission(Base):
    """A document type grant; a null document type grants every type."""
    __tablename__ = "user_permissions"
    __table_args__ = (Index("ix_user_permissions_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("docuscan_users.id"))
    document_type_id: Mapped[Optional[int]] = mapped_column(ForeignKey("document_types.id"))

    user: Mapped[DocuScanUser] = relationship(back_populates="permissions")
    document_type: Mapped[Optional[DocumentType]] = relationship(back_populates="user_permissions")


class AuditTrail(Base):
    __tablename__ = "audit_trail"

    id: Mapped[int] = mapped_column(primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    user: Mapped[str] = mapped_column(String(128))
    action: Mapped[str] = mapped_column(String(128))
    details: Mapped[Optional[str]] = mapped_column(String(2500))
    barcode: Mapped[str] = mapped_column(String(10), index=True)
