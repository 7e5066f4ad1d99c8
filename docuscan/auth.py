"""
JWT helpers turning a bearer token into the request's CurrentUser.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import jwt
from sqlalchemy.orm import Session

from docuscan.config import SECRET_KEY, TOKEN_EXPIRY_HOURS
from docuscan.identity import load_current_user
from docuscan.models import CurrentUser


def generate_token(account_name: str, secret_key: str = SECRET_KEY) -> str:
    """Generate a JWT token naming the authenticated account."""
    payload = {
        "account_name": account_name,
        "iat": datetime.utcnow(),
        "exp": datetime.utcnow() + timedelta(hours=TOKEN_EXPIRY_HOURS),
    }
    return jwt.encode(payload, secret_key, algorithm="HS256")


def verify_token(token: str, secret_key: str = SECRET_KEY) -> Optional[Dict[str, Any]]:
    """Verify a JWT token and return the decoded payload (or None)."""
    try:
        return jwt.decode(token, secret_key, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def current_user_from_token(session: Session, token: Optional[str], secret_key: str = SECRET_KEY) -> CurrentUser:
    """Resolve the CurrentUser for a request; bad tokens get no access."""
    payload = verify_token(token, secret_key) if token else None
    if not payload:
        return CurrentUser(has_access=False)
    return load_current_user(session, payload.get("account_name"))
