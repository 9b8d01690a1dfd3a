"""
Layout component for the job board

Main layout wrapper that combines navigation, breadcrumbs and page content into
a complete HTML page.
"""

from typing import Any, Dict, Optional

from .base import Component
from .breadcrumbs import Breadcrumbs
from .navigation import Navigation


class Layout(Component):
    """Main layout component that assembles the complete page"""

    def __init__(
        self,
        title: str,
        content: str,
        user: Optional[Dict[str, Any]] = None,
        show_nav: bool = True,
        current_path: str = "/",
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            user: Current user dict (optional)
            show_nav: Whether to show sidebar and breadcrumbs
            current_path: Current URL path for active navigation highlighting
        """
        self.title = title
        self.content = content
        self.user = user
        self.show_nav = show_nav
        self.current_path = current_path

    def render(self) -> str:
        nav_html = Navigation(self.user, self.current_path).render() if self.show_nav else ""
        breadcrumb_html = Breadcrumbs(self.current_path).render() if self.show_nav else ""
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self.escape(self.title)} - JobBoard</title>
    <link rel="stylesheet" href="/public/css/jobboard.css">
</head>
<body>
    <a href="#main-content" class="skip-link">Skip to main content</a>
    {nav_html}
    <main id="main-content" class="main-content" role="main">
        {breadcrumb_html}
        {self.content}
    </main>
</body>
</html>"""

    def render_fragment(self) -> str:
        """HTMX swap body: main content plus an out-of-band sidebar update."""
        breadcrumb_html = Breadcrumbs(self.current_path).render() if self.show_nav else ""
        fragment = f"""<title>{self.escape(self.title)} - JobBoard</title>
{breadcrumb_html}
{self.content}"""
        if not self.show_nav:
            return fragment
        sidebar = Navigation(self.user, self.current_path).render().replace(
            'id="sidebar"', 'id="sidebar" hx-swap-oob="true"', 1
        )
        return fragment + sidebar
