"""
Response helpers shared by `main` and the routers.

Why:
    Every page goes through the same Layout and the same cache policy for
    personalized responses. HTMX requests receive only the main fragment plus
    an out-of-band sidebar update.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse

from components import Layout

NO_STORE = {"Cache-Control": "private, no-store"}


def current_user(request: Request) -> Optional[Dict[str, Any]]:
    """User dict exposed by the access middleware, or None."""
    return getattr(request.state, "user", None)


def layout_response(
    request: Request,
    title: str,
    content: str,
    *,
    status_code: int = 200,
    show_nav: bool = True,
    headers: Optional[Dict[str, str]] = None,
) -> HTMLResponse:
    """Render `content` inside the Layout and return an HTMLResponse.

    Personalized pages default to `Cache-Control: private, no-store` unless
    the caller sets its own Cache-Control header.
    """
    user = current_user(request)
    layout = Layout(title, content, user=user, show_nav=show_nav, current_path=request.url.path)
    body = layout.render_fragment() if request.headers.get("HX-Request") else layout.render()
    response = HTMLResponse(content=body, status_code=status_code)
    if user and not (headers and "Cache-Control" in headers):
        response.headers["Cache-Control"] = NO_STORE["Cache-Control"]
    if headers:
        for key, value in headers.items():
            response.headers[key] = value
    return response
