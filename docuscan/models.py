"""
Domain dataclasses used across the application.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from docuscan.config import DEFAULT_PAGE_SIZE


@dataclass
class CurrentUser:
    """The identity a request acts as, rebuilt for every request."""
    user_id: int = 0
    account_name: str = ""
    is_super_user: bool = False
    has_access: bool = False
    last_logon: Optional[datetime] = None
    allowed_document_types: Optional[List[int]] = None  # None = every type

    def can_access_document_type(self, document_type_id: Optional[int]) -> bool:
        """Single-document counterpart of filter_by_user_permissions."""
        if self.is_super_user:
            return True
        if not self.has_access:
            return False
        if document_type_id is None:
            return True
        if not self.allowed_document_types:
            return True
        return document_type_id in self.allowed_document_types


@dataclass
class AccessRequestResult:
    success: bool
    message: str
    user_created: bool = False
    user_already_exists: bool = False


@dataclass
class DocumentInput:
    """Fields accepted when registering or editing a document."""
    name: str
    document_type_id: Optional[int] = None
    barcode: Optional[str] = None     # only honoured on create
    document_no: Optional[str] = None
    version_no: Optional[str] = None
    comment: Optional[str] = None
    third_party: Optional[str] = None
    date_of_contract: Optional[datetime] = None
    receiving_date: Optional[datetime] = None
    dispatch_date: Optional[datetime] = None
    action_date: Optional[datetime] = None
    fax: Optional[bool] = None
    original_received: Optional[bool] = None
    confidential: Optional[bool] = None
    bank_confirmation: Optional[bool] = None
    currency_code: Optional[str] = None
    amount: Optional[Decimal] = None


@dataclass
class DocumentSearchRequest:
    """Search filters; every filter left as None/empty is ignored."""
    barcodes: Optional[str] = None    # comma separated
    document_type_ids: List[int] = field(default_factory=list)
    document_number: Optional[str] = None
    version_no: Optional[str] = None
    comment: Optional[str] = None
    fax: Optional[bool] = None
    original_received: Optional[bool] = None
    confidential: Optional[bool] = None
    bank_confirmation: Optional[bool] = None
    amount_from: Optional[Decimal] = None
    amount_to: Optional[Decimal] = None
    currency_code: Optional[str] = None
    date_of_contract_from: Optional[datetime] = None
    date_of_contract_to: Optional[datetime] = None
    receiving_date_from: Optional[datetime] = None
    receiving_date_to: Optional[datetime] = None
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_column: Optional[str] = None
    sort_direction: Optional[str] = None

    def barcode_list(self) -> List[int]:
        """Distinct integer barcodes from the comma separated field, in input order."""
        if not self.barcodes or not self.barcodes.strip():
            return []
        seen: List[int] = []
        for part in self.barcodes.split(","):
            part = part.strip()
            if part.lstrip("-").isdigit() and int(part) not in seen:
                seen.append(int(part))
        return seen

    def has_any_filter(self) -> bool:
        return any([
            self.barcodes and self.barcodes.strip(),
            self.document_type_ids,
            self.document_number and self.document_number.strip(),
            self.version_no and self.version_no.strip(),
            self.comment and self.comment.strip(),
            self.fax is not None,
            self.original_received is not None,
            self.confidential is not None,
            self.bank_confirmation is not None,
            self.amount_from is not None,
            self.amount_to is not None,
            self.currency_code and self.currency_code.strip(),
            self.date_of_contract_from is not None,
            self.date_of_contract_to is not None,
            self.receiving_date_from is not None,
            self.receiving_date_to is not None,
        ])


@dataclass
class DocumentSearchResult:
    items: list
    total_count: int
    current_page: int
    page_size: int
    total_pages: int
    max_limit_reached: bool
    max_limit: int
