"""
Minimal client for the remote recruitment API's authentication endpoints.

Why: Keep the web adapter free of HTTP details. The login route calls this
client, receives a token plus the user record, and hands both to Session
Hygiene (`establish`). The access engine itself never talks to the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

# Small indirection to ease monkeypatching in tests
import requests as http

from .domain import ALLOWED_ROLES, MalformedUserRecord, UserRecord, normalize_role, parse_user_record

logger = logging.getLogger("jobboard.identity_access.auth_api")


def http_post(url: str, json: Dict[str, Any], headers: Dict[str, str], timeout: float):
    return http.post(url, json=json, headers=headers, timeout=timeout)


class AuthAPIError(Exception):
    """Raised when the auth API rejects a request or cannot be reached."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class AuthAPIConfig:
    base_url: str  # e.g., https://api.jobboard.example/api
    timeout: float = 10.0

    def login_endpoint(self, role: str) -> str:
        return f"{self.base_url.rstrip('/')}/{role}/login"

    @property
    def logout_endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/logout"


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: UserRecord
    refresh_token: Optional[str] = None


class AuthAPIClient:
    def __init__(self, config: AuthAPIConfig):
        self.cfg = config

    def login(self, *, role: str, email: str, password: str) -> LoginResult:
        """Authenticate against the role-specific login endpoint.

        Raises AuthAPIError with one of: unknown_role, auth_api_unreachable,
        invalid_credentials, auth_api_error, invalid_response.
        """
        canonical = normalize_role(role)
        if canonical not in ALLOWED_ROLES:
            raise AuthAPIError("unknown_role")
        url = self.cfg.login_endpoint(canonical)
        headers = {"Accept": "application/json"}
        try:
            resp = http_post(url, json={"email": email, "password": password}, headers=headers, timeout=self.cfg.timeout)
        except http.RequestException as exc:
            logger.warning("Auth API login unreachable: %s", exc.__class__.__name__)
            raise AuthAPIError("auth_api_unreachable") from exc
        if resp.status_code in (400, 401, 403):
            raise AuthAPIError("invalid_credentials")
        if resp.status_code != 200:
            logger.warning("Auth API login failed with status %s", resp.status_code)
            raise AuthAPIError("auth_api_error")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise AuthAPIError("invalid_response") from exc
        return self._parse_login_payload(payload)

    def logout(self, *, token: str) -> None:
        """Tell the API to invalidate the token. Best effort for callers."""
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        try:
            resp = http_post(self.cfg.logout_endpoint, json={}, headers=headers, timeout=self.cfg.timeout)
        except http.RequestException as exc:
            raise AuthAPIError("auth_api_unreachable") from exc
        if resp.status_code not in (200, 204):
            raise AuthAPIError("auth_api_error")

    @staticmethod
    def _parse_login_payload(payload: Any) -> LoginResult:
        if not isinstance(payload, dict):
            raise AuthAPIError("invalid_response")
        # Some deployments wrap the body in {"data": {...}}
        body = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        token = body.get("token") or body.get("accessToken")
        if not isinstance(token, str) or not token:
            raise AuthAPIError("invalid_response")
        try:
            user = parse_user_record(body.get("user"))
        except MalformedUserRecord as exc:
            raise AuthAPIError("invalid_response") from exc
        refresh = body.get("refreshToken")
        return LoginResult(token=token, user=user, refresh_token=refresh if isinstance(refresh, str) else None)
