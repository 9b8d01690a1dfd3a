"""
Session Hygiene: staleness checks and clearing of cached credentials.

Why: This module is the only writer of the credential cache. Login stores the
entry (`establish`), token renewal refreshes it (`renew`), and logout or a
detected staleness destroys it (`purge`). Every other component reads the
cache through `load_user` and never writes it.

Failure policy:
    Storage errors during clearing are logged and swallowed by `enforce` and
    `safe_logout`. Logout must never be blocked by a storage error.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
import logging

from .domain import MalformedUserRecord, UserRecord, parse_user_record
from .stores import (
    AUTH_EXPIRY_KEY,
    AUTH_TOKEN_KEY,
    CREDENTIAL_KEYS,
    REFRESH_TOKEN_KEY,
    USER_KEY,
    CredentialStore,
    StorageWriteFailure,
)
from .tokens import token_expiry

logger = logging.getLogger("jobboard.identity_access.hygiene")

DEFAULT_EXPIRE_HOURS = 24


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_expiry(raw: Optional[str]) -> Optional[datetime]:
    """Parse an `authExpiry` value (ISO 8601 or epoch seconds).

    Raises ValueError for values that are neither.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        pass
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_user(store: CredentialStore) -> Optional[UserRecord]:
    """Return the cached user record, or None when absent or malformed."""
    raw = store.get(USER_KEY)
    if raw is None:
        return None
    try:
        return parse_user_record(raw)
    except MalformedUserRecord as exc:
        logger.warning("Cached user record rejected: %s", exc)
        return None


def is_stale(store: CredentialStore, now: Optional[datetime] = None) -> bool:
    """True if token or user is missing, or the expiry lies in the past.

    A malformed user value counts as missing; an unreadable expiry counts as
    expired.
    """
    if not store.get(AUTH_TOKEN_KEY):
        return True
    if load_user(store) is None:
        return True
    raw_expiry = store.get(AUTH_EXPIRY_KEY)
    try:
        expiry = parse_expiry(raw_expiry)
    except ValueError:
        logger.warning("Unreadable authExpiry value; treating session as expired")
        return True
    if expiry is None:
        return False
    return expiry < (now or _utcnow())


def purge(store: CredentialStore) -> None:
    """Remove every credential key from both tiers.

    Every key is attempted even if an earlier one fails. Afterwards a single
    StorageWriteFailure is raised for the first key that could not be removed.
    """
    failed: list[StorageWriteFailure] = []
    for key in CREDENTIAL_KEYS:
        for tier in (store.durable, store.ephemeral):
            try:
                tier.remove(key)
            except StorageWriteFailure as exc:
                failed.append(exc)
    if failed:
        raise failed[0]


def enforce(store: CredentialStore, now: Optional[datetime] = None) -> bool:
    """Purge stale credentials. Returns True when the session was logged out.

    Callers navigate to the login page themselves when this returns True.
    """
    if not is_stale(store, now=now):
        return False
    had_credentials = any(store.get(key) is not None for key in CREDENTIAL_KEYS)
    try:
        purge(store)
    except StorageWriteFailure as exc:
        logger.warning("Purge of stale credentials incomplete: %s", exc.__class__.__name__)
    if had_credentials:
        logger.info("Stale credentials cleared; session logged out")
    return True


def safe_logout(store: CredentialStore, fallback_path: str, navigate: Callable[[str], None]) -> None:
    """Clear credentials and always navigate to `fallback_path`."""
    try:
        purge(store)
        logger.info("Logout completed")
    except Exception as exc:
        logger.error("Logout purge failed: %s", exc.__class__.__name__)
    finally:
        navigate(fallback_path)


def establish(
    store: CredentialStore,
    *,
    token: str,
    user: UserRecord,
    refresh_token: Optional[str] = None,
    expires_at: Optional[datetime] = None,
    remember: bool = True,
    expire_hours: int = DEFAULT_EXPIRE_HOURS,
    now: Optional[datetime] = None,
) -> datetime:
    """Write a fresh credential cache entry after a successful login.

    Expiry precedence: explicit `expires_at`, then the token's `exp` claim,
    then `now + expire_hours`. Returns the stored expiry.
    """
    purge(store)
    expiry = expires_at or token_expiry(token) or ((now or _utcnow()) + timedelta(hours=expire_hours))
    store.set(AUTH_TOKEN_KEY, token, durable=remember)
    store.set(USER_KEY, user.to_json(), durable=remember)
    store.set(AUTH_EXPIRY_KEY, expiry.isoformat(), durable=remember)
    if refresh_token:
        store.set(REFRESH_TOKEN_KEY, refresh_token, durable=remember)
    return expiry


def renew(
    store: CredentialStore,
    *,
    token: str,
    expires_at: Optional[datetime] = None,
    expire_hours: int = DEFAULT_EXPIRE_HOURS,
    now: Optional[datetime] = None,
) -> datetime:
    """Replace the token and expiry after a token refresh.

    Writes into the tier that currently holds the token.
    """
    durable = store.durable.get(AUTH_TOKEN_KEY) is not None or store.ephemeral.get(AUTH_TOKEN_KEY) is None
    expiry = expires_at or token_expiry(token) or ((now or _utcnow()) + timedelta(hours=expire_hours))
    store.set(AUTH_TOKEN_KEY, token, durable=durable)
    store.set(AUTH_EXPIRY_KEY, expiry.isoformat(), durable=durable)
    return expiry


__all__ = [
    "enforce",
    "establish",
    "is_stale",
    "load_user",
    "parse_expiry",
    "purge",
    "renew",
    "safe_logout",
]
