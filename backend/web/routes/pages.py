"""
Public, account-status and error pages.

The access middleware has already decided whether the visitor may see a page
by the time these handlers run; they only render.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from navigation import route_table as rt

from components import AccountStatusPage, MessagePage
from components.pages.status_page import STATUS_COPY
from rendering import NO_STORE, layout_response

pages_router = APIRouter(tags=["Pages"])


def _message(request: Request, title: str, message: str, *, link=None, status_code: int = 200):
    page = MessagePage(title, message, link=link)
    return layout_response(request, title, page.render(), status_code=status_code)


@pages_router.get("/")
async def home(request: Request):
    return _message(
        request,
        "Find your next role",
        "Browse open positions or post a job to reach qualified candidates.",
        link=(rt.path("LOGIN"), "Sign in"),
    )


@pages_router.get("/pricing")
async def pricing(request: Request):
    return _message(
        request,
        "Pricing",
        "Candidates use the job board for free. Recruiters pay per active job posting.",
        link=(rt.path("CONTACT"), "Talk to sales"),
    )


@pages_router.get("/about")
async def about(request: Request):
    return _message(request, "About us", "We connect candidates and recruiters with a focused, role-based job board.")


@pages_router.get("/contact")
async def contact(request: Request):
    return _message(request, "Contact", "Write to support@jobboard.example and we will get back to you within one business day.")


@pages_router.get("/account/{status}")
async def account_status(request: Request, status: str):
    """Terminal page for banned, suspended or unverified accounts."""
    if status not in STATUS_COPY:
        return _message(
            request,
            "Page not found",
            "The page you are looking for does not exist.",
            link=(rt.path("HOME"), "Back to home"),
            status_code=404,
        )
    page = AccountStatusPage(status)
    return layout_response(request, page.title, page.render(), show_nav=False, headers=NO_STORE)


@pages_router.get("/unauthorized")
async def unauthorized(request: Request):
    return _message(
        request,
        "Sign in required",
        "You need to sign in to view this page.",
        link=(rt.path("LOGIN"), "Sign in"),
        status_code=401,
    )


@pages_router.get("/forbidden")
async def forbidden(request: Request):
    return _message(
        request,
        "Access denied",
        "Your account does not have access to this page.",
        link=(rt.path("HOME"), "Back to home"),
        status_code=403,
    )


@pages_router.get("/404")
async def not_found(request: Request):
    return _message(
        request,
        "Page not found",
        "The page you are looking for does not exist.",
        link=(rt.path("HOME"), "Back to home"),
        status_code=404,
    )


@pages_router.get("/500")
async def server_error(request: Request):
    return _message(
        request,
        "Something went wrong",
        "An unexpected error occurred. Please try again later.",
        link=(rt.path("HOME"), "Back to home"),
        status_code=500,
    )
