"""
Redirect Guard: applies the access decision once per navigation transition.

The hosting application calls the guard on every route change (or app mount)
and passes a `navigate` callback that performs the actual redirect. The guard:

- skips public and auth pages, which require no user, so intrinsically
  public pages never loop;
- computes the destination and, if it differs from the current path, calls
  `navigate` exactly once and stops (no chained re-decision in the same pass);
- remembers the last (user, path) pair it decided on and treats an identical
  repeat as a no-op;
- fails closed to the login page when the user's role is unknown.

Overlapping transitions follow last-write-wins: each call decides from its own
inputs and the host keeps whichever redirect lands last. The guard does not
try to suppress an earlier one.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from identity_access import hygiene
from identity_access.domain import UserRecord
from identity_access.stores import CredentialStore

from . import route_table as rt
from .classifier import is_auth_page, is_public
from .decisions import DEFAULT_POLICY, REASON_UNKNOWN_ROLE, AccessPolicy

Navigate = Callable[[str], None]


def _fingerprint(user: Optional[UserRecord]) -> Optional[Tuple[Optional[str], ...]]:
    if user is None:
        return None
    return (user.id, user.role, user.status)


class RedirectGuard:
    def __init__(self, navigate: Navigate, policy: Optional[AccessPolicy] = None):
        self.navigate = navigate
        self.policy = policy or DEFAULT_POLICY
        self._last_key: Optional[tuple] = None

    def __call__(self, user: Optional[UserRecord], current_path: str) -> Optional[str]:
        """Run one transition. Returns the redirect target applied, or None."""
        key = (_fingerprint(user), current_path)
        if key == self._last_key:
            return None
        self._last_key = key

        # Public and auth pages admit everyone; no decision is needed there
        if is_public(current_path) or is_auth_page(current_path):
            return None

        try:
            target = self.policy.resolve_destination(user, current_path)
        except rt.UnknownRole:
            target = self.policy.emit(REASON_UNKNOWN_ROLE, current_path, rt.path("LOGIN"), user)

        if target == current_path:
            return None
        self.navigate(target)
        return target

    def reset(self) -> None:
        """Forget the memo, e.g. after login or logout."""
        self._last_key = None

    def on_navigation(self, store: CredentialStore, current_path: str) -> Optional[str]:
        """Full pass: hygiene, then the cached user, then the decision."""
        hygiene.enforce(store)
        user = hygiene.load_user(store)
        return self(user, current_path)


__all__ = ["Navigate", "RedirectGuard"]
