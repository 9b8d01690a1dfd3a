"""
Session hygiene tests: staleness, purge, enforce, safe logout, and the
login/renewal writers of the credential cache.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json
import logging

import pytest
from jose import jwt

from identity_access import hygiene
from identity_access.domain import UserRecord
from identity_access.stores import (
    AUTH_EXPIRY_KEY,
    AUTH_TOKEN_KEY,
    CREDENTIAL_KEYS,
    REFRESH_TOKEN_KEY,
    USER_KEY,
    USER_PREFERENCES_KEY,
    CredentialStore,
    InMemoryTier,
    StorageWriteFailure,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
USER_JSON = json.dumps({"role": "candidate", "status": "active", "id": "u1"})


class FailingRemoveTier(InMemoryTier):
    """Tier whose removals fail for selected keys."""

    def __init__(self, failing: set[str]):
        super().__init__()
        self.failing = failing
        self.attempted: list[str] = []

    def remove(self, key: str) -> None:
        self.attempted.append(key)
        if key in self.failing:
            raise StorageWriteFailure(key, "quota")
        super().remove(key)


def _populated(expiry: str | None = None) -> CredentialStore:
    store = CredentialStore()
    store.set(AUTH_TOKEN_KEY, "tok")
    store.set(USER_KEY, USER_JSON)
    if expiry is not None:
        store.set(AUTH_EXPIRY_KEY, expiry)
    return store


# --- is_stale ------------------------------------------------------------------


def test_empty_cache_is_stale():
    assert hygiene.is_stale(CredentialStore(), now=NOW) is True


def test_missing_token_is_stale():
    store = CredentialStore()
    store.set(USER_KEY, USER_JSON)
    assert hygiene.is_stale(store, now=NOW) is True


def test_missing_user_is_stale():
    store = CredentialStore()
    store.set(AUTH_TOKEN_KEY, "tok")
    assert hygiene.is_stale(store, now=NOW) is True


def test_malformed_user_counts_as_missing():
    store = CredentialStore()
    store.set(AUTH_TOKEN_KEY, "tok")
    store.set(USER_KEY, "{not json")
    assert hygiene.is_stale(store, now=NOW) is True
    assert hygiene.load_user(store) is None


def test_past_expiry_is_stale():
    store = _populated((NOW - timedelta(seconds=1)).isoformat())
    assert hygiene.is_stale(store, now=NOW) is True


def test_future_expiry_is_fresh():
    store = _populated((NOW + timedelta(hours=1)).isoformat())
    assert hygiene.is_stale(store, now=NOW) is False


def test_populated_cache_without_expiry_is_fresh():
    assert hygiene.is_stale(_populated(), now=NOW) is False


def test_epoch_expiry_and_z_suffix_are_understood():
    assert hygiene.is_stale(_populated(str(int((NOW + timedelta(minutes=5)).timestamp()))), now=NOW) is False
    assert hygiene.is_stale(_populated("2025-03-01T11:00:00Z"), now=NOW) is True


def test_unreadable_expiry_is_stale():
    assert hygiene.is_stale(_populated("next tuesday"), now=NOW) is True


def test_ephemeral_tier_is_read():
    store = CredentialStore()
    store.set(AUTH_TOKEN_KEY, "tok", durable=False)
    store.set(USER_KEY, USER_JSON, durable=False)
    assert hygiene.is_stale(store, now=NOW) is False


# --- purge / enforce -------------------------------------------------------------


def test_purge_then_is_stale():
    store = _populated((NOW + timedelta(hours=1)).isoformat())
    hygiene.purge(store)
    assert hygiene.is_stale(store, now=NOW) is True
    hygiene.purge(store)  # absent keys are not an error
    assert hygiene.is_stale(store, now=NOW) is True


def test_purge_clears_both_tiers_and_every_key():
    store = CredentialStore()
    for key in CREDENTIAL_KEYS:
        store.set(key, "x", durable=True)
        store.set(key, "y", durable=False)
    hygiene.purge(store)
    assert all(store.get(key) is None for key in CREDENTIAL_KEYS)


def test_purge_leaves_unrelated_keys():
    store = _populated()
    store.set("theme", "dark")
    hygiene.purge(store)
    assert store.get("theme") == "dark"


def test_purge_attempts_every_key_before_reporting_failure():
    durable = FailingRemoveTier({USER_KEY})
    store = CredentialStore(durable=durable)
    store.set(AUTH_TOKEN_KEY, "tok")
    store.set(USER_PREFERENCES_KEY, "{}")

    with pytest.raises(StorageWriteFailure) as excinfo:
        hygiene.purge(store)

    assert excinfo.value.key == USER_KEY
    assert durable.attempted == list(CREDENTIAL_KEYS)
    assert store.get(AUTH_TOKEN_KEY) is None
    assert store.get(USER_PREFERENCES_KEY) is None


def test_enforce_acts_only_when_stale():
    fresh = _populated((NOW + timedelta(hours=1)).isoformat())
    assert hygiene.enforce(fresh, now=NOW) is False
    assert fresh.get(AUTH_TOKEN_KEY) == "tok"

    stale = _populated((NOW - timedelta(hours=1)).isoformat())
    assert hygiene.enforce(stale, now=NOW) is True
    assert stale.get(AUTH_TOKEN_KEY) is None


def test_enforce_swallows_storage_failure(caplog: pytest.LogCaptureFixture):
    store = CredentialStore(durable=FailingRemoveTier({AUTH_TOKEN_KEY}))
    store.set(USER_KEY, USER_JSON)
    caplog.set_level(logging.WARNING, logger="jobboard.identity_access.hygiene")

    assert hygiene.enforce(store, now=NOW) is True
    assert any("incomplete" in record.getMessage() for record in caplog.records)


# --- safe_logout -----------------------------------------------------------------


def test_safe_logout_navigates_after_purge():
    store = _populated()
    targets: list[str] = []
    hygiene.safe_logout(store, "/login", targets.append)
    assert targets == ["/login"]
    assert store.get(AUTH_TOKEN_KEY) is None


def test_safe_logout_navigates_even_when_purge_fails(caplog: pytest.LogCaptureFixture):
    store = CredentialStore(ephemeral=FailingRemoveTier(set(CREDENTIAL_KEYS)))
    targets: list[str] = []
    caplog.set_level(logging.ERROR, logger="jobboard.identity_access.hygiene")

    hygiene.safe_logout(store, "/login", targets.append)

    assert targets == ["/login"]
    assert any("Logout purge failed" in record.getMessage() for record in caplog.records)


# --- establish / renew -----------------------------------------------------------


def test_establish_writes_fresh_entry_with_default_expiry():
    store = _populated()
    store.set(REFRESH_TOKEN_KEY, "old-refresh")
    user = UserRecord(role="recruiter", id="7")

    expiry = hygiene.establish(store, token="tok2", user=user, now=NOW, expire_hours=2)

    assert expiry == NOW + timedelta(hours=2)
    assert store.get(AUTH_TOKEN_KEY) == "tok2"
    assert hygiene.load_user(store) == user
    assert store.get(REFRESH_TOKEN_KEY) is None
    assert hygiene.parse_expiry(store.get(AUTH_EXPIRY_KEY)) == expiry


def test_establish_prefers_token_exp_claim():
    exp = int((NOW + timedelta(minutes=30)).timestamp())
    token = jwt.encode({"sub": "u1", "exp": exp}, "secret", algorithm="HS256")
    store = CredentialStore()

    expiry = hygiene.establish(store, token=token, user=UserRecord(role="admin"), now=NOW)

    assert expiry == datetime.fromtimestamp(exp, tz=timezone.utc)


def test_establish_without_remember_uses_ephemeral_tier():
    store = CredentialStore()
    hygiene.establish(store, token="tok", user=UserRecord(role="candidate"), refresh_token="r", remember=False, now=NOW)
    assert store.durable.get(AUTH_TOKEN_KEY) is None
    assert store.ephemeral.get(AUTH_TOKEN_KEY) == "tok"
    assert store.ephemeral.get(REFRESH_TOKEN_KEY) == "r"


def test_renew_replaces_token_in_its_tier():
    store = CredentialStore()
    hygiene.establish(store, token="tok", user=UserRecord(role="candidate"), remember=False, now=NOW)
    later = NOW + timedelta(hours=3)

    hygiene.renew(store, token="tok-new", expires_at=later)

    assert store.ephemeral.get(AUTH_TOKEN_KEY) == "tok-new"
    assert store.durable.get(AUTH_TOKEN_KEY) is None
    assert hygiene.parse_expiry(store.get(AUTH_EXPIRY_KEY)) == later


def test_parse_expiry_rejects_garbage():
    with pytest.raises(ValueError):
        hygiene.parse_expiry("not-a-date")
    assert hygiene.parse_expiry(None) is None
    assert hygiene.parse_expiry("  ") is None
