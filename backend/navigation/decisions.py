"""
Access Decision Engine.

Computes the single canonical destination for a user and an optional
intended path. The check order is fixed; the first match wins:

    1. no user            -> login
    2. banned             -> banned page
    3. suspended          -> suspended page
    4. unverified         -> unverified page
    5. intended path inside the user's own role tree -> intended path
    6. otherwise          -> the role's default dashboard

Status gates come before role checks, so no intended destination can bypass an
account restriction. Unknown roles raise `UnknownRole` from step 6; the caller
decides the fallback.

Every decision is reported as a `DecisionEvent` to an injectable observer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional
import logging

from identity_access.domain import (
    STATUS_ACTIVE,
    STATUS_BANNED,
    STATUS_SUSPENDED,
    STATUS_UNVERIFIED,
    UserRecord,
    normalize_role,
)

from . import route_table as rt
from .classifier import is_within_role_base

logger = logging.getLogger("jobboard.navigation")

REASON_NO_USER = "no_user"
REASON_BANNED = "banned"
REASON_SUSPENDED = "suspended"
REASON_UNVERIFIED = "unverified"
REASON_INTENDED_PATH = "intended_path"
REASON_DEFAULT_DASHBOARD = "default_dashboard"
REASON_UNKNOWN_ROLE = "unknown_role"
REASON_UNKNOWN_STATUS = "unknown_status"

# Ordered status gates
_STATUS_GATES = (
    (STATUS_BANNED, "ACCOUNT_STATUS.BANNED", REASON_BANNED),
    (STATUS_SUSPENDED, "ACCOUNT_STATUS.SUSPENDED", REASON_SUSPENDED),
    (STATUS_UNVERIFIED, "ACCOUNT_STATUS.UNVERIFIED", REASON_UNVERIFIED),
)

# Statuses that pass every gate; anything else fails closed to login
_OPEN_STATUSES = frozenset({STATUS_ACTIVE, "verified"})


@dataclass(frozen=True)
class DecisionEvent:
    reason: str
    from_path: Optional[str]
    to_path: str
    role: Optional[str] = None
    status: Optional[str] = None


Observer = Callable[[DecisionEvent], None]


def log_decision(event: DecisionEvent) -> None:
    logger.info(
        "access decision reason=%s from=%s to=%s role=%s status=%s",
        event.reason,
        event.from_path,
        event.to_path,
        event.role,
        event.status,
    )


def _status_of(user: UserRecord) -> str:
    return str(getattr(user, "status", "") or "").strip().lower()


class AccessPolicy:
    def __init__(self, observer: Optional[Observer] = None):
        self.observer: Observer = observer or log_decision

    def emit(self, reason: str, from_path: Optional[str], to_path: str, user: Optional[UserRecord]) -> str:
        self.observer(
            DecisionEvent(
                reason=reason,
                from_path=from_path,
                to_path=to_path,
                role=getattr(user, "role", None),
                status=getattr(user, "status", None),
            )
        )
        return to_path

    def resolve_destination(self, user: Optional[UserRecord], intended_path: Optional[str] = None) -> str:
        """Return the canonical destination path for `user`.

        Raises:
            UnknownRole: the user passed every gate but has no known role tree.
        """
        if user is None:
            return self.emit(REASON_NO_USER, intended_path, rt.path("LOGIN"), None)

        status = _status_of(user)
        for gated_status, route_name, reason in _STATUS_GATES:
            if status == gated_status:
                return self.emit(reason, intended_path, rt.path(route_name), user)

        if status and status not in _OPEN_STATUSES:
            return self.emit(REASON_UNKNOWN_STATUS, intended_path, rt.path("LOGIN"), user)

        if intended_path and is_within_role_base(intended_path, user.role):
            return self.emit(REASON_INTENDED_PATH, intended_path, intended_path, user)

        target = rt.default_dashboard(user.role)
        return self.emit(REASON_DEFAULT_DASHBOARD, intended_path, target, user)

    def can_access(self, path: Any, user: Optional[UserRecord]) -> bool:
        """Role check for dashboard paths; everything else is allowed.

        Public and auth pages are expected to be filtered upstream with
        `is_public` / `is_auth_page`.
        """
        if user is None:
            return False
        if not isinstance(path, str):
            return False
        segments = [segment for segment in path.split("/") if segment]
        if len(segments) >= 2 and segments[1] == "dashboard":
            path_role = normalize_role(segments[0])
            return bool(path_role) and path_role == normalize_role(user.role)
        return True


DEFAULT_POLICY = AccessPolicy()


def resolve_destination(user: Optional[UserRecord], intended_path: Optional[str] = None) -> str:
    return DEFAULT_POLICY.resolve_destination(user, intended_path)


def can_access(path: Any, user: Optional[UserRecord]) -> bool:
    return DEFAULT_POLICY.can_access(path, user)


__all__ = [
    "AccessPolicy",
    "DEFAULT_POLICY",
    "DecisionEvent",
    "Observer",
    "REASON_BANNED",
    "REASON_DEFAULT_DASHBOARD",
    "REASON_INTENDED_PATH",
    "REASON_NO_USER",
    "REASON_SUSPENDED",
    "REASON_UNKNOWN_ROLE",
    "REASON_UNKNOWN_STATUS",
    "REASON_UNVERIFIED",
    "can_access",
    "log_decision",
    "resolve_destination",
]
