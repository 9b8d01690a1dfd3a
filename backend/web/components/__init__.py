# Job board component system
# Pure Python components for HTML generation

from .base import Component
from .layout import Layout
from .navigation import Navigation
from .breadcrumbs import Breadcrumbs, build_crumbs
from .forms import FormField, SelectField, SubmitButton, TextInputField, LoginForm
from .pages import AccountStatusPage, MessagePage

__all__ = [
    "Component",
    "Layout",
    "Navigation",
    "Breadcrumbs",
    "build_crumbs",
    "FormField",
    "SelectField",
    "SubmitButton",
    "TextInputField",
    "LoginForm",
    "AccountStatusPage",
    "MessagePage",
]
