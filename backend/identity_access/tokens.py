"""
Token helpers for the identity_access bounded context.

Why: Session Hygiene needs the expiry of an access token issued by the remote
auth API to decide when cached credentials go stale. The signature is
verified by the API itself; here we only read the `exp` claim.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from jose import jwt
from jose.exceptions import JOSEError


def token_expiry(token: Optional[str]) -> Optional[datetime]:
    """Return the token's `exp` claim as an aware UTC datetime, or None.

    Undecodable tokens and tokens without a numeric `exp` yield None.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        claims = jwt.get_unverified_claims(token)
    except JOSEError:
        return None
    exp = claims.get("exp")
    # bool is an int subclass; reject it explicitly
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
