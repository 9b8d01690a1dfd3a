"JobBoard web front-end"
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode
import logging
import os
import sys

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles

from identity_access import hygiene
from identity_access.auth_api import AuthAPIClient, AuthAPIConfig
from identity_access.domain import UserRecord
from identity_access.stores import CredentialStore, SessionRecord, SessionStore
from navigation import route_table as rt
from navigation.classifier import PUBLIC_ASSET_PREFIX
from navigation.guard import RedirectGuard

import config
from auth_utils import SESSION_COOKIE_NAME
from components import MessagePage
from rendering import NO_STORE, layout_response


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via JOBBOARD_ENABLE_DOTENV (default true
      outside pytest).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("JOBBOARD_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    load_dotenv()

# Minimal production safety checks (fail-fast on insecure config)
config.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------

logger = logging.getLogger("jobboard.web")
SETTINGS = config.load_settings()
SESSION_STORE = SessionStore()
AUTH_API = AuthAPIClient(
    AuthAPIConfig(base_url=SETTINGS.auth_api_base_url, timeout=SETTINGS.auth_api_timeout)
)

app = FastAPI(title="JobBoard", description="Role-based job board front-end", version="0.1.0")

# --- Static Files & Routers -----------------------------------------------------

public_dir = Path(__file__).parent / "public"
app.mount(PUBLIC_ASSET_PREFIX.rstrip("/"), StaticFiles(directory=str(public_dir)), name="public")

from routes.auth import auth_router
from routes.dashboards import dashboards_router
from routes.pages import pages_router

app.include_router(auth_router)
app.include_router(pages_router)
app.include_router(dashboards_router)

# --- Access Enforcement ---------------------------------------------------------

# Served without touching the session at all
_INFRASTRUCTURE_PATHS = frozenset({"/health", "/favicon.ico"})

# Session is read (for rendering) but no redirect decision is made. Logout must
# stay reachable for restricted accounts, error pages for everyone.
_GUARD_EXEMPT_PATHS = frozenset(
    rt.path(name) for name in ("LOGOUT", "UNAUTHORIZED", "FORBIDDEN", "NOT_FOUND", "SERVER_ERROR")
)


def _is_infrastructure_path(path: str) -> bool:
    return path.startswith(PUBLIC_ASSET_PREFIX) or path in _INFRASTRUCTURE_PATHS


def _session_for(request: Request) -> Optional[SessionRecord]:
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if not sid:
        return None
    try:
        return SESSION_STORE.get(sid)
    except Exception as exc:
        logger.warning("Session store get failed: %s", exc.__class__.__name__)
        return None


def _user_dict(user: Optional[UserRecord]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "fullname": user.fullname,
        "role": user.role,
        "status": user.status,
    }


def _redirect_response(request: Request, current_path: str, target: str) -> Response:
    """Translate a guard redirect into the response shape the client expects.

    - `/api/*`: JSON 401 (login) or 403 (anything else).
    - HTMX: 401/403 with `HX-Redirect` so the client performs a full navigation.
    - Browser: 302 to the target.
    Redirects to login carry the current path as `next`.
    """
    to_login = target == rt.path("LOGIN")
    location = target
    if to_login and current_path not in ("", "/"):
        location = f"{target}?{urlencode({'next': current_path})}"

    if current_path.startswith("/api/"):
        headers = {**NO_STORE, "Vary": "Origin"}
        if to_login:
            return JSONResponse({"error": "unauthenticated"}, status_code=401, headers=headers)
        return JSONResponse({"error": "forbidden", "redirect": target}, status_code=403, headers=headers)
    if "HX-Request" in request.headers:
        # Security: prevent intermediaries from caching HTMX redirect responses
        return Response(
            status_code=401 if to_login else 403,
            headers={"HX-Redirect": location, **NO_STORE, "Vary": "HX-Request"},
        )
    return RedirectResponse(url=location, status_code=302, headers=NO_STORE)


@app.middleware("http")
async def access_enforcement(request: Request, call_next):
    path = request.url.path
    if _is_infrastructure_path(path):
        return await call_next(request)

    rec = _session_for(request)
    store = rec.credentials if rec else CredentialStore()

    # One guard per request: each request is its own navigation transition
    redirects: list[str] = []
    guard = RedirectGuard(navigate=redirects.append)
    if path in _GUARD_EXEMPT_PATHS:
        hygiene.enforce(store)
    else:
        guard.on_navigation(store, path)
    if redirects:
        return _redirect_response(request, path, redirects[-1])

    # Expose minimal, read-only user context for downstream handlers.
    request.state.user = _user_dict(hygiene.load_user(store))
    request.state.session_id = rec.session_id if rec else None
    return await call_next(request)

# --- Security Headers Middleware ----------------------------------------------

@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    if SETTINGS.is_prod_like:
        # Harden CSP in production: avoid 'unsafe-inline' to reduce XSS surface.
        csp = "default-src 'self'; script-src 'self'; style-src 'self'; img-src 'self' data:; connect-src 'self';"
    else:
        csp = (
            "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; connect-src 'self';"
        )
    response.headers.setdefault("Content-Security-Policy", csp)
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response

# --- Error Pages & Health -------------------------------------------------------

@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    if request.url.path.startswith("/api/"):
        return JSONResponse({"error": "not_found"}, status_code=404)
    page = MessagePage(
        "Page not found",
        "The page you are looking for does not exist.",
        link=(rt.path("HOME"), "Back to home"),
    )
    return layout_response(request, "Page not found", page.render(), status_code=404)


@app.get("/health")
async def health_check():
    # Minimal health endpoint used by orchestrators and tests.
    return JSONResponse({"status": "healthy"}, headers=NO_STORE)
