"""
Centralised configuration constants and environment helpers.
"""

import os
import sys
from typing import Sequence

from dotenv import load_dotenv

load_dotenv()

# ── Auth ─────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
TOKEN_EXPIRY_HOURS = 24

# ── Document search ──────────────────────────────────────────────────
SEARCH_MAX_RESULTS = int(os.getenv("DOCUMENT_SEARCH_MAX_RESULTS", "1000"))
DEFAULT_PAGE_SIZE = 25
PAGE_SIZE_OPTIONS = (10, 25, 100)

# ── Access audit ─────────────────────────────────────────────────────
ACTIVE_DAYS_THRESHOLD = 90

# ── Audit trail column limits ────────────────────────────────────────
AUDIT_DETAILS_MAX_CHARS = 2500


def get_env(name: str) -> str:
    """Return an environment variable or exit with an error message."""
    value = os.getenv(name)
    if not value:
        print(f"ERROR: env var {name} is not set", file=sys.stderr)
        sys.exit(1)
    return value


def validate_search_options(
    max_results: int = SEARCH_MAX_RESULTS,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    page_size_options: Sequence[int] = PAGE_SIZE_OPTIONS,
) -> None:
    """Raise ValueError when the search limits are inconsistent."""
    if max_results <= 0:
        raise ValueError("max_results must be greater than 0")
    if default_page_size <= 0:
        raise ValueError("default_page_size must be greater than 0")
    if not page_size_options:
        raise ValueError("At least one page size option must be configured")
    if default_page_size not in page_size_options:
        raise ValueError("default_page_size must be one of the page size options")
