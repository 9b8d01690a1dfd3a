"""
Credential store and server-side session store (in-memory, development).

Why: The access engine must not reach into ambient global storage. Session
Hygiene receives a `CredentialStore` explicitly, which wraps two key-value
tiers: a durable tier ("remember me") and an ephemeral, tab-scoped tier.

Security: Cookies carry only an opaque session id. Tokens and the user record
stay server-side inside the session's credential store. For production,
replace the in-memory tiers with Redis/DB-backed implementations of
`KeyValueTier`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol
import secrets
import time

AUTH_TOKEN_KEY = "authToken"
USER_KEY = "user"
REFRESH_TOKEN_KEY = "refreshToken"
AUTH_EXPIRY_KEY = "authExpiry"
USER_PREFERENCES_KEY = "userPreferences"

# Fixed key space; purge removes exactly these keys.
CREDENTIAL_KEYS = (
    AUTH_TOKEN_KEY,
    USER_KEY,
    REFRESH_TOKEN_KEY,
    AUTH_EXPIRY_KEY,
    USER_PREFERENCES_KEY,
)


def _now() -> int:
    return int(time.time())


class StorageWriteFailure(Exception):
    """Raised when a tier cannot write or remove a key."""

    def __init__(self, key: str, reason: str = "write_failed"):
        super().__init__(f"{reason}: {key}")
        self.key = key
        self.reason = reason


class KeyValueTier(Protocol):
    """Minimal string key-value contract.

    `remove` of an absent key must be a no-op. Write failures are reported
    as `StorageWriteFailure`.
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryTier:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class CredentialStore:
    """Two-tier view over session credentials.

    Reads prefer the durable tier and fall back to the ephemeral one. Removal
    always hits both tiers.
    """

    def __init__(self, durable: Optional[KeyValueTier] = None, ephemeral: Optional[KeyValueTier] = None):
        self.durable: KeyValueTier = durable if durable is not None else InMemoryTier()
        self.ephemeral: KeyValueTier = ephemeral if ephemeral is not None else InMemoryTier()

    def get(self, key: str) -> Optional[str]:
        value = self.durable.get(key)
        if value is None:
            value = self.ephemeral.get(key)
        return value

    def set(self, key: str, value: str, *, durable: bool = True) -> None:
        tier = self.durable if durable else self.ephemeral
        tier.set(key, value)

    def remove(self, key: str) -> None:
        self.durable.remove(key)
        self.ephemeral.remove(key)

    def clear(self) -> None:
        self.durable.clear()
        self.ephemeral.clear()


@dataclass
class SessionRecord:
    session_id: str
    credentials: CredentialStore = field(default_factory=CredentialStore)
    expires_at: Optional[int] = None


class SessionStore:
    def __init__(self):
        self._data: Dict[str, SessionRecord] = {}

    def create(self, *, ttl_seconds: int = 86400) -> SessionRecord:
        sid = secrets.token_urlsafe(24)
        rec = SessionRecord(session_id=sid, expires_at=_now() + ttl_seconds)
        self._data[sid] = rec
        return rec

    def get(self, session_id: str) -> Optional[SessionRecord]:
        rec = self._data.get(session_id)
        if not rec:
            return None
        if rec.expires_at and rec.expires_at < _now():
            self._data.pop(session_id, None)
            return None
        return rec

    def delete(self, session_id: str) -> None:
        self._data.pop(session_id, None)


__all__ = [
    "AUTH_TOKEN_KEY",
    "USER_KEY",
    "REFRESH_TOKEN_KEY",
    "AUTH_EXPIRY_KEY",
    "USER_PREFERENCES_KEY",
    "CREDENTIAL_KEYS",
    "StorageWriteFailure",
    "KeyValueTier",
    "InMemoryTier",
    "CredentialStore",
    "SessionRecord",
    "SessionStore",
]
