"""
Breadcrumb component for the job board

Generates a breadcrumb trail from the current request path:

    /recruiter/dashboard/jobs         -> Home / Recruiter Dashboard
    /recruiter/dashboard/jobs/active  -> Home / Recruiter Dashboard / Active

Only dashboard paths (`/<role>/dashboard/...`) get crumbs beyond Home. After
the dashboard crumb comes at most one sub-section crumb: the first segment
whose own prefix is a registered page. Grouping segments such as `jobs` have
no page of their own and are skipped.
"""

from typing import List, Tuple

from navigation.route_table import PAGE_PATHS

from .base import Component

HOME_LABEL = "Home"


def capitalize_segment(segment: str) -> str:
    """Uppercase the first letter and leave the rest unchanged."""
    return segment[:1].upper() + segment[1:]


def build_crumbs(path: str) -> List[Tuple[str, str]]:
    """Return the crumb list as (href, label) pairs."""
    clean = (path or "/").split("?")[0].split("#")[0]
    crumbs: List[Tuple[str, str]] = [("/", HOME_LABEL)]

    segments = [segment for segment in clean.split("/") if segment]
    if len(segments) < 2 or segments[1] != "dashboard":
        return crumbs

    role_segment = segments[0]
    dashboard_href = f"/{role_segment}/dashboard"
    crumbs.append((dashboard_href, f"{capitalize_segment(role_segment)} Dashboard"))

    current = dashboard_href
    for segment in segments[2:]:
        current = f"{current}/{segment}"
        if current in PAGE_PATHS:
            crumbs.append((current, capitalize_segment(segment)))
            break

    return crumbs


class Breadcrumbs(Component):
    """Server-rendered breadcrumb trail"""

    def __init__(self, current_path: str = "/"):
        self.current_path = current_path or "/"

    def render(self) -> str:
        crumbs = build_crumbs(self.current_path)
        if len(crumbs) <= 1:
            return ""

        items = []
        last_index = len(crumbs) - 1
        for index, (href, label) in enumerate(crumbs):
            escaped_label = self.escape(label)
            if index == last_index:
                items.append(
                    f'<li class="breadcrumb-item" aria-current="page">{escaped_label}</li>'
                )
            else:
                items.append(
                    f'''<li class="breadcrumb-item">
    <a href="{self.escape(href)}" class="breadcrumb-link">{escaped_label}</a>
</li>'''
                )

        return f"""<nav class="breadcrumb" aria-label="Breadcrumb">
    <ol>
        {''.join(items)}
    </ol>
</nav>"""
