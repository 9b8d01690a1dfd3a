"""
Route Classifier: total, side-effect-free predicates over a path string.

Every predicate returns a bool for any input, including None or non-strings.
Prefix checks are segment-aware: `/recruiter` covers `/recruiter` and
`/recruiter/...` but not `/recruiters`.
"""

from __future__ import annotations

from typing import Any

from . import route_table as rt

PUBLIC_PAGES = frozenset({
    rt.path("HOME"),
    rt.path("PRICING"),
    rt.path("ABOUT"),
    rt.path("CONTACT"),
    rt.path("LOGIN"),
    rt.path("REGISTER"),
    rt.path("FORGOT_PASSWORD"),
    rt.path("RESET_PASSWORD"),
    rt.path("ACTIVATE_ACCOUNT"),
})

AUTH_PAGES = frozenset({
    rt.path("LOGIN"),
    rt.path("REGISTER"),
    rt.path("FORGOT_PASSWORD"),
    rt.path("RESET_PASSWORD"),
    rt.path("ACTIVATE_ACCOUNT"),
})

ACCOUNT_STATUS_PAGES = frozenset(rt.ROUTES["ACCOUNT_STATUS"].values())

PUBLIC_ASSET_PREFIX = rt.path("PUBLIC_ASSET_PREFIX")


def has_prefix(path: Any, prefix: str) -> bool:
    """Segment-aware prefix test."""
    if not isinstance(path, str) or not prefix:
        return False
    base = prefix.rstrip("/")
    if not base:
        return path.startswith("/")
    return path == base or path.startswith(base + "/")


def is_public(path: Any) -> bool:
    if not isinstance(path, str):
        return False
    return path in PUBLIC_PAGES or path.startswith(PUBLIC_ASSET_PREFIX)


def is_auth_page(path: Any) -> bool:
    return isinstance(path, str) and path in AUTH_PAGES


def is_account_status_page(path: Any) -> bool:
    return isinstance(path, str) and path in ACCOUNT_STATUS_PAGES


def is_within_role_base(path: Any, role: Any) -> bool:
    """True if `path` lies in the role's own tree. Unknown roles yield False."""
    try:
        base = rt.role_base_path(role)
    except rt.UnknownRole:
        return False
    return has_prefix(path, base)


__all__ = [
    "ACCOUNT_STATUS_PAGES",
    "AUTH_PAGES",
    "PUBLIC_ASSET_PREFIX",
    "PUBLIC_PAGES",
    "has_prefix",
    "is_account_status_page",
    "is_auth_page",
    "is_public",
    "is_within_role_base",
]
