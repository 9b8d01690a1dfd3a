"""
Identity domain constants and the cached user record.

Why:
- Centralize roles and account states so the route table, the access engine
  and the web layer agree on one vocabulary.
- Parse the serialized `user` cache value in one place. Anything that does
  not look like a user record is rejected (fail-closed) instead of being
  half-interpreted downstream.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Mapping, Optional
import json

# Keep roles minimal and explicit. Immutable to prevent accidental mutation.
ALLOWED_ROLES = frozenset({"candidate", "recruiter", "admin"})

# Older clients still send "employer"; it was renamed to "recruiter".
LEGACY_ROLE_ALIASES = {"employer": "recruiter"}

STATUS_ACTIVE = "active"
STATUS_UNVERIFIED = "unverified"
STATUS_SUSPENDED = "suspended"
STATUS_BANNED = "banned"

KNOWN_STATUSES = frozenset({STATUS_ACTIVE, STATUS_UNVERIFIED, STATUS_SUSPENDED, STATUS_BANNED})

# The auth API reports a confirmed account as "verified".
STATUS_ALIASES = {"verified": STATUS_ACTIVE}


class MalformedUserRecord(ValueError):
    """Raised when a cached user value cannot be read as a user record."""


def normalize_role(value: Any) -> str:
    """Lowercase a role and map legacy aliases. Never raises."""
    if not isinstance(value, str):
        return ""
    role = value.strip().lower()
    return LEGACY_ROLE_ALIASES.get(role, role)


def normalize_status(value: Any) -> str:
    """Return the canonical status; missing/blank means active.

    Raises MalformedUserRecord for values outside the known set.
    """
    if value is None:
        return STATUS_ACTIVE
    if not isinstance(value, str):
        raise MalformedUserRecord("status_not_a_string")
    status = value.strip().lower()
    if not status:
        return STATUS_ACTIVE
    status = STATUS_ALIASES.get(status, status)
    if status not in KNOWN_STATUSES:
        raise MalformedUserRecord("unknown_status")
    return status


@dataclass(frozen=True)
class UserRecord:
    role: str
    status: str = STATUS_ACTIVE
    id: Optional[str] = None
    email: Optional[str] = None
    fullname: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def parse_user_record(raw: Any) -> UserRecord:
    """Build a UserRecord from a JSON string or a mapping.

    Unknown role strings are kept as-is (normalized); the route table raises
    `UnknownRole` for them when a path is needed.
    """
    data: Any = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise MalformedUserRecord("invalid_json") from exc
    if not isinstance(data, Mapping):
        raise MalformedUserRecord("not_an_object")

    role = normalize_role(data.get("role"))
    if not role:
        raise MalformedUserRecord("missing_role")
    status = normalize_status(data.get("status"))

    def _opt(key: str) -> Optional[str]:
        value = data.get(key)
        return str(value) if value is not None else None

    return UserRecord(
        role=role,
        status=status,
        id=_opt("id"),
        email=_opt("email"),
        fullname=_opt("fullname"),
    )


__all__ = [
    "ALLOWED_ROLES",
    "LEGACY_ROLE_ALIASES",
    "KNOWN_STATUSES",
    "STATUS_ACTIVE",
    "STATUS_UNVERIFIED",
    "STATUS_SUSPENDED",
    "STATUS_BANNED",
    "MalformedUserRecord",
    "UserRecord",
    "normalize_role",
    "normalize_status",
    "parse_user_record",
]
