"""
Form components for the job board.
"""

from .fields import FormField, SelectField, SubmitButton, TextInputField
from .login_form import LoginForm

__all__ = [
    "FormField",
    "SelectField",
    "SubmitButton",
    "TextInputField",
    "LoginForm",
]
