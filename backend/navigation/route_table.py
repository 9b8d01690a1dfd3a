"""
Route Table for the job board front-end.

Single immutable registry of symbolic route names to path templates. Names are
dotted (`"RECRUITER.ACCOUNT.PROFILE"`); groups are nested mappings. Role trees
live under a prefix that is unique per role.

Lookups fail explicitly: unknown names raise `UnknownRoute`, unknown roles
raise `UnknownRole`. Callers decide the fallback (the redirect guard fails
closed to the login page).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

from identity_access.domain import ALLOWED_ROLES, normalize_role


class UnknownRole(LookupError):
    """Raised when a role is not in the recognized set."""

    def __init__(self, role: Any):
        super().__init__(f"unknown role: {role!r}")
        self.role = role


class UnknownRoute(KeyError):
    """Raised for symbolic names that do not resolve to exactly one path."""


def _freeze(tree: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType({k: _freeze(v) if isinstance(v, Mapping) else v for k, v in tree.items()})


ROUTES: Mapping[str, Any] = _freeze({
    # Public routes
    "HOME": "/",
    "PRICING": "/pricing",
    "ABOUT": "/about",
    "CONTACT": "/contact",

    # Auth routes
    "LOGIN": "/login",
    "REGISTER": "/register",
    "FORGOT_PASSWORD": "/forgot-password",
    "RESET_PASSWORD": "/reset-password",
    "ACTIVATE_ACCOUNT": "/activate",
    "LOGOUT": "/logout",

    "RECRUITER": {
        "BASE": "/recruiter",
        "DASHBOARD_BASE": "/recruiter/dashboard",
        "DASHBOARD": "/recruiter/dashboard/jobs/active",
        "ACTIVE_JOBS": "/recruiter/dashboard/jobs/active",
        "DRAFTS": "/recruiter/dashboard/jobs/drafts",
        "EXPIRED_JOBS": "/recruiter/dashboard/jobs/expired",
        "ARCHIVED_JOBS": "/recruiter/dashboard/jobs/archived",
        "CREATE_JOB": "/recruiter/dashboard/jobs/create",
        "EDIT_JOB": "/recruiter/dashboard/jobs/edit/:id",
        "VIEW_JOB": "/recruiter/dashboard/jobs/view/:id",
        "APPLICATIONS": "/recruiter/dashboard/jobs/:id/applications",
        "ALL_APPLICATIONS": "/recruiter/dashboard/applications",
        "RESUME_REVIEWS": "/recruiter/dashboard/applications/reviews",
        "CANDIDATES": "/recruiter/dashboard/candidates",
        "COMPANY_PROFILE": "/recruiter/dashboard/company/profile",
        "REPORTS": "/recruiter/dashboard/company/reports",
        "ACCOUNT": {
            "BASE": "/recruiter/dashboard/account",
            "PROFILE": "/recruiter/dashboard/account/profile",
            "SETTINGS": "/recruiter/dashboard/account/settings",
            "SECURITY": "/recruiter/dashboard/account/security",
            "BILLING": "/recruiter/dashboard/account/billing",
            "TEAM": "/recruiter/dashboard/account/team",
        },
    },

    "CANDIDATE": {
        "BASE": "/candidate",
        "DASHBOARD_BASE": "/candidate/dashboard",
        "DASHBOARD": "/candidate/dashboard",
        "PROFILE": "/candidate/dashboard/profile",
        "APPLICATIONS": "/candidate/dashboard/applications",
        "SAVED_JOBS": "/candidate/dashboard/saved-jobs",
        "RESUMES": "/candidate/dashboard/resumes",
    },

    "ADMIN": {
        "BASE": "/admin",
        "DASHBOARD_BASE": "/admin/dashboard",
        "DASHBOARD": "/admin/dashboard",
        "SETTINGS": "/admin/dashboard/settings",
        "USERS": {
            "BASE": "/admin/users",
            "VIEW": "/admin/users/view/:id",
            "EDIT": "/admin/users/edit/:id",
        },
    },

    "ACCOUNT_STATUS": {
        "UNVERIFIED": "/account/unverified",
        "SUSPENDED": "/account/suspended",
        "BANNED": "/account/banned",
    },

    # Error routes
    "UNAUTHORIZED": "/unauthorized",
    "FORBIDDEN": "/forbidden",
    "NOT_FOUND": "/404",
    "SERVER_ERROR": "/500",

    # Static/public assets are served below this prefix
    "PUBLIC_ASSET_PREFIX": "/public/",
})

_ROLE_GROUPS = {"recruiter": "RECRUITER", "candidate": "CANDIDATE", "admin": "ADMIN"}


def path(name: str) -> str:
    """Resolve a dotted symbolic name to its path template."""
    node: Any = ROUTES
    for part in str(name).split("."):
        if not isinstance(node, Mapping) or part not in node:
            raise UnknownRoute(name)
        node = node[part]
    if not isinstance(node, str):
        raise UnknownRoute(name)
    return node


def format_path(name: str, **params: Any) -> str:
    """Fill `:param` placeholders of a template. Missing params raise UnknownRoute."""
    template = path(name)
    segments = []
    for segment in template.split("/"):
        if segment.startswith(":"):
            key = segment[1:]
            if key not in params:
                raise UnknownRoute(f"{name}: missing parameter {key!r}")
            segment = quote(str(params[key]), safe="")
        segments.append(segment)
    return "/".join(segments)


def job_applications_url(job_id: Any, job_title: Optional[str] = None) -> str:
    url = format_path("RECRUITER.APPLICATIONS", id=job_id)
    if job_title:
        return f"{url}?{urlencode({'jobTitle': job_title})}"
    return url


def iter_paths(tree: Mapping[str, Any] = ROUTES, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield (dotted name, path) for every leaf in the registry."""
    for key, value in tree.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            yield from iter_paths(value, prefix=f"{name}.")
        else:
            yield name, value


def _role_group(role: Any) -> Mapping[str, Any]:
    canonical = normalize_role(role)
    if canonical not in ALLOWED_ROLES:
        raise UnknownRole(role)
    return ROUTES[_ROLE_GROUPS[canonical]]


def default_dashboard(role: Any) -> str:
    """Canonical landing page for a role."""
    return _role_group(role)["DASHBOARD"]


def role_base_path(role: Any) -> str:
    """Path prefix owned by a role (e.g. `/recruiter`)."""
    return _role_group(role)["BASE"]


def dashboard_base_path(role: Any) -> str:
    return _role_group(role)["DASHBOARD_BASE"]


def _collect_pages() -> frozenset:
    pages: Dict[str, None] = {}
    for name, value in iter_paths():
        if name != "PUBLIC_ASSET_PREFIX" and ":" not in value:
            pages[value] = None
    return frozenset(pages)


# Concrete (parameter-free) page paths, used for breadcrumb grouping.
PAGE_PATHS = _collect_pages()


__all__ = [
    "ROUTES",
    "PAGE_PATHS",
    "UnknownRole",
    "UnknownRoute",
    "dashboard_base_path",
    "default_dashboard",
    "format_path",
    "iter_paths",
    "job_applications_url",
    "path",
    "role_base_path",
]
