"""
Navigation component for the job board

Role-based sidebar that adapts to the user's role (candidate/recruiter/admin).
All hrefs come from the route table; nothing here builds paths by hand.
"""

from typing import Any, Dict, List, Optional, Tuple

from identity_access.domain import normalize_role
from navigation import route_table as rt

from .base import Component

NavItem = Tuple[str, str]

NAV_CONFIG: Dict[str, List[Tuple[str, str]]] = {
    "recruiter": [
        ("RECRUITER.ACTIVE_JOBS", "Active Jobs"),
        ("RECRUITER.DRAFTS", "Drafts"),
        ("RECRUITER.EXPIRED_JOBS", "Expired"),
        ("RECRUITER.CREATE_JOB", "Post a Job"),
        ("RECRUITER.ALL_APPLICATIONS", "Applications"),
        ("RECRUITER.CANDIDATES", "Candidates"),
        ("RECRUITER.COMPANY_PROFILE", "Company"),
        ("RECRUITER.ACCOUNT.PROFILE", "Account"),
    ],
    "candidate": [
        ("CANDIDATE.DASHBOARD", "Dashboard"),
        ("CANDIDATE.APPLICATIONS", "My Applications"),
        ("CANDIDATE.SAVED_JOBS", "Saved Jobs"),
        ("CANDIDATE.RESUMES", "Resumes"),
        ("CANDIDATE.PROFILE", "Profile"),
    ],
    "admin": [
        ("ADMIN.DASHBOARD", "Dashboard"),
        ("ADMIN.USERS.BASE", "Users"),
        ("ADMIN.SETTINGS", "Settings"),
    ],
}

PUBLIC_MENU: List[Tuple[str, str]] = [
    ("HOME", "Home"),
    ("PRICING", "Pricing"),
    ("ABOUT", "About"),
    ("CONTACT", "Contact"),
    ("LOGIN", "Sign in"),
]


class Navigation(Component):
    """Sidebar with role-based menu items"""

    def __init__(self, user: Optional[Dict[str, Any]] = None, current_path: str = "/"):
        """
        Args:
            user: User dict with 'role' and optional 'fullname'
            current_path: The current URL path for active link highlighting
        """
        self.user = user
        self.current_path = current_path or "/"

    def nav_items(self) -> List[NavItem]:
        """Return (href, label) pairs for the user's role.

        Unknown roles fall back to the public menu; visibility never grants
        access by itself.
        """
        if not self.user:
            entries = PUBLIC_MENU
        else:
            role = normalize_role(self.user.get("role"))
            entries = NAV_CONFIG.get(role, PUBLIC_MENU)
        return [(rt.path(name), label) for name, label in entries]

    def active_href(self, items: List[NavItem]) -> Optional[str]:
        """Pick the single active href using best prefix match."""
        path = self.current_path
        best: Optional[str] = None
        best_len = 0
        for href, _label in items:
            if href == path:
                return href
            if href != "/" and path.startswith(href + "/") and len(href) > best_len:
                best = href
                best_len = len(href)
        return best

    def render(self) -> str:
        items = self.nav_items()
        active = self.active_href(items)
        links = [self._create_nav_link(href, label, is_active=(href == active)) for href, label in items]
        if self.user:
            links.append(self._render_logout())

        name = (self.user or {}).get("fullname") or ""
        role = normalize_role((self.user or {}).get("role"))
        footer = ""
        if self.user:
            footer = f"""
            <div class="sidebar-footer">
                <div class="user-name">{self.escape(name)}</div>
                <div class="user-role">{self.escape(role.capitalize())}</div>
            </div>"""

        return f"""
    <aside class="sidebar" id="sidebar" aria-label="Sidebar">
        <nav class="sidebar-nav" role="navigation" aria-label="Main navigation">
            <div class="sidebar-items">
                {''.join(links)}
            </div>{footer}
        </nav>
    </aside>"""

    def _create_nav_link(self, href: str, text: str, is_active: bool = False) -> str:
        aria_attr = ' aria-current="page"' if is_active else ""
        css = self.classes("sidebar-link", active=is_active)
        return f"""
        <a href="{self.escape(href)}" class="{css}"{aria_attr}>
            <span class="nav-text">{self.escape(text)}</span>
        </a>"""

    @staticmethod
    def _render_logout() -> str:
        """Sign-out button posting to the logout route."""
        return f"""
        <form method="post" action="{rt.path('LOGOUT')}" class="sidebar-logout">
            <button type="submit" class="sidebar-link">Sign out</button>
        </form>"""
