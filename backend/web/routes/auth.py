"""
Authentication-related FastAPI routes (router-only module).

Why:
    Login and logout are the only places that write the credential cache.
    Login hands the API's token and user record to Session Hygiene
    (`establish`); logout goes through `safe_logout`, which always lands on the
    login page even when clearing fails.

Notes:
    - This module imports `main` inside functions to reuse the shared session
      store, auth API client and settings. Tests monkeypatch those globals.
    - The session cookie carries only an opaque id; tokens stay server-side.
"""

from __future__ import annotations

from typing import Optional
import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from identity_access import hygiene
from identity_access.auth_api import AuthAPIError
from identity_access.domain import MalformedUserRecord, parse_user_record
from identity_access.stores import AUTH_TOKEN_KEY, StorageWriteFailure
from navigation import route_table as rt
from navigation.decisions import resolve_destination

from auth_utils import SESSION_COOKIE_NAME, cookie_opts, safe_next
from components import LoginForm, MessagePage
from rendering import NO_STORE, current_user, layout_response

auth_router = APIRouter(tags=["Auth"])  # explicit paths, no prefix
logger = logging.getLogger("jobboard.web.auth")

# API failures that are the server's fault rather than the user's
_UPSTREAM_ERRORS = frozenset({"auth_api_unreachable", "auth_api_error", "invalid_response"})


def _resolve_active_main(request: Request):
    """Return the `main` module whose app serves this request."""
    import sys as _sys

    mod = _sys.modules.get("main")
    if mod is not None and getattr(mod, "app", None) is getattr(request, "app", None):
        return mod
    import main as mod  # type: ignore

    return mod


def _login_page(
    request: Request,
    *,
    error: Optional[str] = None,
    email: str = "",
    role: str = "candidate",
    next_path: Optional[str] = None,
    status_code: int = 200,
) -> Response:
    form = LoginForm(error=error, email=email, role=role, next_path=next_path)
    content = f'<section class="auth-page"><h1>Sign in</h1>{form.render()}</section>'
    return layout_response(request, "Sign in", content, status_code=status_code, headers=NO_STORE)


def _expired_cookie(response: Response, environment: str) -> None:
    opts = cookie_opts(environment, remember=False, ttl_seconds=0)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        httponly=opts["httponly"],
        secure=opts["secure"],
        samesite=opts["samesite"],
        path=opts["path"],
        expires=0,
        max_age=0,
    )


@auth_router.get("/login")
async def login_form(request: Request, next: Optional[str] = None):
    """Render the login form, or a short notice when already signed in."""
    user = current_user(request)
    if user:
        try:
            destination = resolve_destination(parse_user_record(user))
        except (MalformedUserRecord, rt.UnknownRole):
            destination = None
        if destination:
            page = MessagePage(
                "You are signed in",
                "You are already signed in.",
                link=(destination, "Continue"),
            )
            return layout_response(request, "Signed in", page.render())
    return _login_page(request, next_path=safe_next(next))


@auth_router.post("/login")
async def login_submit(request: Request):
    """Authenticate against the auth API and start a session.

    Behavior:
        - Missing email or password re-renders the form (400).
        - Rejected credentials re-render the form (401); an unreachable or
          misbehaving API re-renders it with 502.
        - On success a fresh session is created (any previous one is dropped),
          the credential cache is written, and the browser is sent (303) to
          the access decision for the user and the sanitized `next` path.
        - A user whose role has no dashboard is signed out again at once.
    """
    mod = _resolve_active_main(request)
    form = await request.form()
    role = str(form.get("role") or "").strip().lower()
    email = str(form.get("email") or "").strip()
    password = str(form.get("password") or "")
    remember = str(form.get("remember") or "").strip().lower() in ("1", "on", "true", "yes")
    next_path = safe_next(form.get("next"))

    if not email or not password:
        return _login_page(
            request, error="missing_fields", email=email, role=role, next_path=next_path, status_code=400
        )

    try:
        result = mod.AUTH_API.login(role=role, email=email, password=password)
    except AuthAPIError as exc:
        status_code = 502 if exc.code in _UPSTREAM_ERRORS else (400 if exc.code == "unknown_role" else 401)
        logger.info("Login rejected: %s", exc.code)
        return _login_page(
            request, error=exc.code, email=email, role=role, next_path=next_path, status_code=status_code
        )

    # Security: never reuse a pre-login session id
    old_sid = request.cookies.get(SESSION_COOKIE_NAME)
    if old_sid:
        mod.SESSION_STORE.delete(old_sid)
    rec = mod.SESSION_STORE.create(ttl_seconds=mod.SETTINGS.session_ttl_seconds)

    try:
        hygiene.establish(
            rec.credentials,
            token=result.token,
            user=result.user,
            refresh_token=result.refresh_token,
            remember=remember,
            expire_hours=mod.SETTINGS.token_expire_hours,
        )
    except StorageWriteFailure as exc:
        logger.error("Credential cache write failed: %s", exc.reason)
        mod.SESSION_STORE.delete(rec.session_id)
        return _login_page(
            request, error="storage_unavailable", email=email, role=role, next_path=next_path, status_code=503
        )

    try:
        target = resolve_destination(result.user, next_path)
    except rt.UnknownRole as exc:
        logger.warning("Login for unsupported role %r; session discarded", exc.role)
        hygiene.safe_logout(rec.credentials, rt.path("LOGIN"), lambda _path: None)
        mod.SESSION_STORE.delete(rec.session_id)
        return _login_page(request, error="unsupported_role", email=email, status_code=403)

    resp = RedirectResponse(url=target, status_code=303, headers=NO_STORE)
    opts = cookie_opts(mod.SETTINGS.environment, remember=remember, ttl_seconds=mod.SETTINGS.session_ttl_seconds)
    resp.set_cookie(key=SESSION_COOKIE_NAME, value=rec.session_id, **opts)
    return resp


@auth_router.api_route("/logout", methods=["GET", "POST"])
async def logout(request: Request):
    """Sign out: notify the API (best effort), clear credentials, end the session.

    Always redirects to the login page and expires the session cookie, even
    when the API call or the credential purge fails.
    """
    mod = _resolve_active_main(request)
    destinations: list[str] = []
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    rec = mod.SESSION_STORE.get(sid) if sid else None
    if rec is not None:
        token = rec.credentials.get(AUTH_TOKEN_KEY)
        if token:
            try:
                mod.AUTH_API.logout(token=token)
            except AuthAPIError as exc:
                logger.warning("Auth API logout failed: %s", exc.code)
        hygiene.safe_logout(rec.credentials, rt.path("LOGIN"), destinations.append)
        mod.SESSION_STORE.delete(rec.session_id)
    else:
        destinations.append(rt.path("LOGIN"))

    resp = RedirectResponse(url=destinations[-1], status_code=303, headers=NO_STORE)
    _expired_cookie(resp, mod.SETTINGS.environment)
    return resp


@auth_router.get("/register")
async def register(request: Request):
    page = MessagePage(
        "Create an account",
        "Registration is handled by our team for now. Contact us to open a candidate or recruiter account.",
        link=(rt.path("CONTACT"), "Contact us"),
    )
    return layout_response(request, "Create an account", page.render())


@auth_router.get("/forgot-password")
async def forgot_password(request: Request):
    page = MessagePage(
        "Forgot your password?",
        "Contact support with the email address of your account and we will send a reset link.",
        link=(rt.path("LOGIN"), "Back to sign in"),
    )
    return layout_response(request, "Forgot password", page.render())


@auth_router.get("/reset-password")
async def reset_password(request: Request):
    page = MessagePage(
        "Reset your password",
        "Open the link from your reset email to choose a new password.",
        link=(rt.path("LOGIN"), "Back to sign in"),
    )
    return layout_response(request, "Reset password", page.render(), headers=NO_STORE)


@auth_router.get("/activate")
async def activate_account(request: Request):
    page = MessagePage(
        "Activate your account",
        "Open the activation link from your welcome email, then sign in.",
        link=(rt.path("LOGIN"), "Sign in"),
    )
    return layout_response(request, "Activate account", page.render(), headers=NO_STORE)
