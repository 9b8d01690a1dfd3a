"""
Configuration and startup security checks for the job board web front-end.

Why: Settings come from environment variables so the same image runs in dev
and production. `ensure_secure_config_on_startup` refuses to start a
prod-like deployment with obviously unsafe settings, while development stays
permissive.
"""
from __future__ import annotations

from dataclasses import dataclass
import os


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    environment: str
    auth_api_base_url: str
    auth_api_timeout: float
    token_expire_hours: int
    session_ttl_seconds: int

    @property
    def is_prod_like(self) -> bool:
        return _is_prod_like(self.environment)


def load_settings() -> Settings:
    return Settings(
        environment=(os.getenv("JOBBOARD_ENV", "dev") or "dev").strip().lower(),
        auth_api_base_url=(os.getenv("AUTH_API_BASE_URL", "http://localhost:8080/api") or "").strip(),
        auth_api_timeout=_float_env("AUTH_API_TIMEOUT", 10.0),
        token_expire_hours=_int_env("AUTH_TOKEN_EXPIRE_HOURS", 24),
        session_ttl_seconds=_int_env("SESSION_TTL_SECONDS", 7 * 24 * 3600),
    )


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/stage only):
    - AUTH_API_BASE_URL must be set and use https.
    - AUTH_TOKEN_EXPIRE_HOURS must not exceed one week.
    """
    settings = load_settings()
    if not settings.is_prod_like:
        return  # dev/test remain permissive

    url = settings.auth_api_base_url.lower()
    if not url:
        raise SystemExit("Refusing to start: AUTH_API_BASE_URL is unset in production.")
    if not url.startswith("https://"):
        raise SystemExit(
            "Refusing to start: AUTH_API_BASE_URL must use https in production (got http)."
        )

    if settings.token_expire_hours > 7 * 24:
        raise SystemExit(
            "Refusing to start: AUTH_TOKEN_EXPIRE_HOURS exceeds one week in production."
        )
