"""
Role dashboard routes.

Dashboard views themselves are out of scope for this service; each path
under `/<role>/dashboard` renders a placeholder inside the Layout so that
navigation, breadcrumbs and access enforcement can be exercised end to end.

Permissions:
    The access middleware keeps users inside their own role tree. Handlers
    repeat the role check with `can_access` before rendering.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from identity_access.domain import ALLOWED_ROLES, MalformedUserRecord, UserRecord, parse_user_record
from navigation import route_table as rt
from navigation.decisions import can_access

from components import MessagePage, build_crumbs
from rendering import NO_STORE, current_user, layout_response

dashboards_router = APIRouter(tags=["Dashboards"])


def _user_record(user: Optional[Dict[str, Any]]) -> Optional[UserRecord]:
    if not user:
        return None
    try:
        return parse_user_record(user)
    except MalformedUserRecord:
        return None


def _dashboard_page(request: Request, link: Optional[Tuple[str, str]] = None):
    path = request.url.path
    if not can_access(path, _user_record(current_user(request))):
        page = MessagePage(
            "Access denied",
            "Your account does not have access to this page.",
            link=(rt.path("HOME"), "Back to home"),
        )
        return layout_response(request, "Access denied", page.render(), status_code=403)
    title = build_crumbs(path)[-1][1]
    page = MessagePage(title, "Nothing to show here yet.", link=link)
    return layout_response(request, title, page.render())


def _role_base_redirect(role: str):
    async def handler(request: Request):
        return RedirectResponse(url=rt.default_dashboard(role), status_code=302, headers=NO_STORE)

    handler.__name__ = f"{role}_base"
    return handler


def _dashboard_base(role: str):
    async def handler(request: Request):
        if rt.default_dashboard(role) == request.url.path:
            return _dashboard_page(request)
        return RedirectResponse(url=rt.default_dashboard(role), status_code=302, headers=NO_STORE)

    handler.__name__ = f"{role}_dashboard_base"
    return handler


async def dashboard_view(request: Request, rest: str):
    return _dashboard_page(request)


@dashboards_router.get(rt.path("RECRUITER.VIEW_JOB").replace(":id", "{job_id}"))
async def recruiter_view_job(request: Request, job_id: str):
    return _dashboard_page(request, link=(rt.job_applications_url(job_id), "View applications"))


for _role in sorted(ALLOWED_ROLES):
    dashboards_router.add_api_route(rt.role_base_path(_role), _role_base_redirect(_role), methods=["GET"])
    dashboards_router.add_api_route(rt.dashboard_base_path(_role), _dashboard_base(_role), methods=["GET"])
    dashboards_router.add_api_route(
        rt.dashboard_base_path(_role) + "/{rest:path}",
        dashboard_view,
        methods=["GET"],
        name=f"{_role}_dashboard_view",
    )


@dashboards_router.get("/admin/users")
async def admin_users(request: Request):
    return layout_response(request, "Users", MessagePage("Users", "Nothing to show here yet.").render())


@dashboards_router.get("/admin/users/view/{user_id}")
async def admin_user_view(request: Request, user_id: str):
    title = f"User {user_id}"
    return layout_response(request, title, MessagePage(title, "Nothing to show here yet.").render())


@dashboards_router.get("/admin/users/edit/{user_id}")
async def admin_user_edit(request: Request, user_id: str):
    title = f"Edit user {user_id}"
    return layout_response(request, title, MessagePage(title, "Nothing to show here yet.").render())
