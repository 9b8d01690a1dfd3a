"""
Shared authentication utilities for the web adapter.

Why:
    Cookie flags and the safe in-app redirect check are needed by both the
    middleware in `main` and the auth router. Keeping them here avoids
    drift between the two.
"""

from __future__ import annotations

import re
from typing import Any, Optional

SESSION_COOKIE_NAME = "jobboard_session"

# Absolute in-app paths only: no scheme, no "//", no ".." traversal
INAPP_PATH_PATTERN = re.compile(r"^(?!.*//)(?!.*\.\.)/[A-Za-z0-9._\-/]*$")
MAX_INAPP_REDIRECT_LEN = 256


def cookie_opts(environment: str, *, remember: bool, ttl_seconds: int) -> dict:
    """Return cookie flags for the session cookie.

    Flags are hardened in every environment (Secure, HttpOnly, SameSite=Lax).
    A "remember me" login gets a persistent cookie; otherwise the cookie lives
    only as long as the browser session.
    """
    return {
        "secure": True,
        "httponly": True,
        "samesite": "lax",
        "path": "/",
        "max_age": ttl_seconds if remember else None,
    }


def is_inapp_path(value: Any) -> bool:
    return (
        isinstance(value, str)
        and len(value) <= MAX_INAPP_REDIRECT_LEN
        and bool(INAPP_PATH_PATTERN.match(value))
    )


def safe_next(value: Any) -> Optional[str]:
    """Return `value` if it is a safe in-app path, else None."""
    return value if is_inapp_path(value) else None
