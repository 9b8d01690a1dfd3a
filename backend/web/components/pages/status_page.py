"""
Informational pages: account-status pages and simple message pages.

Account-status pages are terminal: they replace any dashboard while the
account is banned, suspended or unverified, and only offer sign-out.
"""
from typing import Dict, Optional, Tuple

from navigation import route_table as rt

from ..base import Component

STATUS_COPY: Dict[str, Tuple[str, str]] = {
    "banned": (
        "Account banned",
        "This account has been banned. Contact support if you believe this is a mistake.",
    ),
    "suspended": (
        "Account suspended",
        "This account is temporarily suspended. Access returns once the suspension ends.",
    ),
    "unverified": (
        "Verify your account",
        "Please confirm your email address. Check your inbox for the activation link.",
    ),
}


class AccountStatusPage(Component):
    def __init__(self, status: str):
        if status not in STATUS_COPY:
            raise ValueError(f"unknown account status page: {status}")
        self.status = status

    @property
    def title(self) -> str:
        return STATUS_COPY[self.status][0]

    def render(self) -> str:
        title, message = STATUS_COPY[self.status]
        return f"""
        <section class="account-status account-status--{self.status}">
            <h1>{self.escape(title)}</h1>
            <p>{self.escape(message)}</p>
            <form method="post" action="{rt.path('LOGOUT')}">
                <button type="submit" class="btn">Sign out</button>
            </form>
        </section>"""


class MessagePage(Component):
    """Heading, text and an optional call-to-action link."""

    def __init__(self, title: str, message: str, link: Optional[Tuple[str, str]] = None):
        self.title = title
        self.message = message
        self.link = link

    def render(self) -> str:
        link_html = ""
        if self.link:
            href, label = self.link
            link_html = f'<p><a class="btn" href="{self.escape(href)}">{self.escape(label)}</a></p>'
        return f"""
        <section class="page-message">
            <h1>{self.escape(self.title)}</h1>
            <p>{self.escape(self.message)}</p>
            {link_html}
        </section>"""
