"""
Redirect guard tests: one redirect per transition, idempotent repeats,
public pages never redirect, unknown roles fail closed to login.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from identity_access import hygiene
from identity_access.domain import UserRecord
from identity_access.stores import AUTH_TOKEN_KEY, CredentialStore
from navigation import decisions
from navigation import route_table as rt
from navigation.decisions import AccessPolicy
from navigation.guard import RedirectGuard


class _Recorder:
    def __init__(self):
        self.targets: list[str] = []

    def __call__(self, target: str) -> None:
        self.targets.append(target)


def _guard(events=None):
    recorder = _Recorder()
    policy = AccessPolicy(observer=(events.append if events is not None else lambda _e: None))
    return RedirectGuard(recorder, policy=policy), recorder


def test_guard_redirects_once_and_repeat_is_noop():
    guard, recorder = _guard()
    user = UserRecord(role="recruiter")

    assert guard(user, "/admin/dashboard") == rt.default_dashboard("recruiter")
    assert guard(user, "/admin/dashboard") is None
    assert recorder.targets == [rt.default_dashboard("recruiter")]


def test_guard_no_redirect_when_already_at_target():
    guard, recorder = _guard()
    user = UserRecord(role="candidate")
    assert guard(user, "/candidate/dashboard/resumes") is None
    assert recorder.targets == []


def test_guard_redecides_when_user_changes():
    guard, recorder = _guard()
    path = "/recruiter/dashboard/jobs/active"
    guard(UserRecord(role="recruiter", id="1"), path)
    guard(UserRecord(role="recruiter", id="1", status="suspended"), path)
    assert recorder.targets == [rt.path("ACCOUNT_STATUS.SUSPENDED")]


def test_guard_skips_public_and_auth_pages():
    events = []
    guard, recorder = _guard(events)
    for path in ("/", "/pricing", "/login", "/reset-password", "/public/css/jobboard.css"):
        assert guard(None, path) is None
        assert guard(UserRecord(role="admin", status="banned"), path) is None
    assert recorder.targets == []
    assert events == []


def test_guard_sends_anonymous_users_to_login():
    guard, recorder = _guard()
    assert guard(None, "/candidate/dashboard") == rt.path("LOGIN")
    assert recorder.targets == [rt.path("LOGIN")]


def test_guard_unknown_role_fails_closed_to_login():
    events = []
    guard, recorder = _guard(events)
    assert guard(UserRecord(role="guest"), "/guest/dashboard") == rt.path("LOGIN")
    assert recorder.targets == [rt.path("LOGIN")]
    assert events[-1].reason == decisions.REASON_UNKNOWN_ROLE
    assert events[-1].from_path == "/guest/dashboard"


def test_reset_allows_the_same_transition_again():
    guard, recorder = _guard()
    user = UserRecord(role="admin")
    guard(user, "/recruiter/dashboard")
    guard.reset()
    guard(user, "/recruiter/dashboard")
    assert recorder.targets == [rt.default_dashboard("admin")] * 2


def test_on_navigation_purges_stale_cache_and_redirects_to_login():
    store = CredentialStore()
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    hygiene.establish(store, token="tok", user=UserRecord(role="candidate"), expires_at=past)
    guard, recorder = _guard()

    assert guard.on_navigation(store, "/candidate/dashboard") == rt.path("LOGIN")
    assert store.get(AUTH_TOKEN_KEY) is None
    assert recorder.targets == [rt.path("LOGIN")]


def test_on_navigation_with_fresh_cache_keeps_intended_path():
    store = CredentialStore()
    hygiene.establish(store, token="tok", user=UserRecord(role="candidate"))
    guard, recorder = _guard()

    assert guard.on_navigation(store, "/candidate/dashboard/saved-jobs") is None
    assert recorder.targets == []


def test_on_navigation_repeat_on_empty_store_is_noop():
    store = CredentialStore()
    guard, recorder = _guard()

    assert guard.on_navigation(store, "/candidate/dashboard") == rt.path("LOGIN")
    assert guard.on_navigation(store, "/candidate/dashboard") is None
    assert recorder.targets == [rt.path("LOGIN")]


def test_on_navigation_repeat_on_fresh_store_is_noop():
    store = CredentialStore()
    hygiene.establish(store, token="tok", user=UserRecord(role="recruiter", id="7"))
    guard, recorder = _guard()

    guard.on_navigation(store, "/admin/dashboard")
    guard.on_navigation(store, "/admin/dashboard")
    assert recorder.targets == [rt.default_dashboard("recruiter")]


def test_on_navigation_redecides_after_credentials_expire():
    store = CredentialStore()
    hygiene.establish(store, token="tok", user=UserRecord(role="recruiter", id="7"))
    guard, recorder = _guard()
    path = rt.default_dashboard("recruiter")

    assert guard.on_navigation(store, path) is None
    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    hygiene.establish(store, token="tok", user=UserRecord(role="recruiter", id="7"), expires_at=past)
    assert guard.on_navigation(store, path) == rt.path("LOGIN")
    assert recorder.targets == [rt.path("LOGIN")]
