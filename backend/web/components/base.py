"""
Base component class for the job board's server-rendered UI.

Components are plain Python objects that render HTML strings. All dynamic
text goes through `escape`.
"""

from typing import Any, Optional
import html


class Component:
    """Base class for all UI components"""

    def render(self) -> str:
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[str]) -> str:
        """Escape HTML entities; None renders as an empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Build a class string, e.g. classes("nav-link", active=True) -> "nav-link active"."""
        names = [name for name in args if name]
        names.extend(key for key, value in conditionals.items() if value)
        return " ".join(names)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Build an HTML attribute string.

        Trailing underscores are stripped (class_ -> class, for_ -> for) and
        inner underscores become hyphens (aria_invalid -> aria-invalid).
        True renders a boolean attribute; False and None are dropped.
        """
        result = []
        for key, value in attrs.items():
            if key.endswith("_"):
                key = key[:-1]
            else:
                key = key.replace("_", "-")
            if value is True:
                result.append(key)
            elif value is not False and value is not None:
                result.append(f'{key}="{html.escape(str(value))}"')
        return " ".join(result)
