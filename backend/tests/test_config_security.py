"""
Security config guard tests.

Validates that production/staging environments fail fast on an unset or
plain-http auth API URL and on overly long token lifetimes, while development
stays permissive. Also covers settings parsing and cookie flags.
"""
from __future__ import annotations

import pytest

import auth_utils
import config as cfg


def test_dev_allows_http_auth_api(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("JOBBOARD_ENV", "dev")
    monkeypatch.setenv("AUTH_API_BASE_URL", "http://localhost:8080/api")
    cfg.ensure_secure_config_on_startup()


@pytest.mark.parametrize("env", ["prod", "production", "stage", "staging"])
def test_prod_requires_https_auth_api(monkeypatch: pytest.MonkeyPatch, env):
    monkeypatch.setenv("JOBBOARD_ENV", env)
    monkeypatch.setenv("AUTH_API_BASE_URL", "http://api.jobboard.example/api")
    with pytest.raises(SystemExit):
        cfg.ensure_secure_config_on_startup()


def test_prod_rejects_unset_auth_api(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("JOBBOARD_ENV", "prod")
    monkeypatch.setenv("AUTH_API_BASE_URL", "")
    with pytest.raises(SystemExit):
        cfg.ensure_secure_config_on_startup()


def test_prod_rejects_token_lifetime_over_a_week(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("JOBBOARD_ENV", "prod")
    monkeypatch.setenv("AUTH_API_BASE_URL", "https://api.jobboard.example/api")
    monkeypatch.setenv("AUTH_TOKEN_EXPIRE_HOURS", str(7 * 24 + 1))
    with pytest.raises(SystemExit):
        cfg.ensure_secure_config_on_startup()


def test_prod_accepts_secure_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("JOBBOARD_ENV", "prod")
    monkeypatch.setenv("AUTH_API_BASE_URL", "https://api.jobboard.example/api")
    monkeypatch.setenv("AUTH_TOKEN_EXPIRE_HOURS", "24")
    cfg.ensure_secure_config_on_startup()


def test_load_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in ("AUTH_API_TIMEOUT", "SESSION_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    settings = cfg.load_settings()
    assert settings.environment == "dev"
    assert settings.auth_api_base_url == "http://localhost:8080/api"
    assert settings.auth_api_timeout == 10.0
    assert settings.token_expire_hours == 24
    assert settings.session_ttl_seconds == 7 * 24 * 3600
    assert settings.is_prod_like is False


def test_invalid_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("AUTH_API_TIMEOUT", "soon")
    monkeypatch.setenv("AUTH_TOKEN_EXPIRE_HOURS", "-3")
    settings = cfg.load_settings()
    assert settings.auth_api_timeout == 10.0
    assert settings.token_expire_hours == 24


def test_cookie_flags_are_hardened():
    persistent = auth_utils.cookie_opts("dev", remember=True, ttl_seconds=3600)
    assert persistent == {"secure": True, "httponly": True, "samesite": "lax", "path": "/", "max_age": 3600}
    assert auth_utils.cookie_opts("prod", remember=False, ttl_seconds=3600)["max_age"] is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("/recruiter/dashboard", "/recruiter/dashboard"),
        ("/a/b.c", "/a/b.c"),
        ("//evil.example", None),
        ("https://evil.example", None),
        ("/x/../y", None),
        ("relative", None),
        ("/" + "a" * 300, None),
        (None, None),
    ],
)
def test_safe_next(value, expected):
    assert auth_utils.safe_next(value) == expected
