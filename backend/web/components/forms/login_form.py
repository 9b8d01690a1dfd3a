"""
Login form component.

Posts email, password and role to the login route. The optional `next` value
carries the user's intended path through the login round trip.
"""
from typing import Optional

from navigation import route_table as rt

from ..base import Component
from .fields import SelectField, SubmitButton, TextInputField

ROLE_OPTIONS = (
    ("candidate", "Candidate"),
    ("recruiter", "Recruiter"),
    ("admin", "Admin"),
)

ERROR_MESSAGES = {
    "invalid_credentials": "Email or password is incorrect.",
    "missing_fields": "Please enter your email and password.",
    "unknown_role": "Please choose how you want to sign in.",
    "auth_api_unreachable": "The sign-in service is not reachable. Please try again later.",
    "unsupported_role": "This account type cannot sign in here.",
    "storage_unavailable": "Your session could not be saved. Please try again.",
}
DEFAULT_ERROR = "Sign-in failed. Please try again."


class LoginForm(Component):
    def __init__(
        self,
        *,
        error: Optional[str] = None,
        email: str = "",
        role: str = "candidate",
        next_path: Optional[str] = None,
    ):
        self.error = error
        self.email = email
        self.role = role
        self.next_path = next_path

    def render(self) -> str:
        action = rt.path("LOGIN")
        error_html = ""
        if self.error:
            message = ERROR_MESSAGES.get(self.error, DEFAULT_ERROR)
            error_html = f'<div class="form-error" role="alert">{self.escape(message)}</div>'
        next_html = (
            f'<input type="hidden" name="next" value="{self.escape(self.next_path)}">'
            if self.next_path
            else ""
        )
        fields = "\n".join([
            SelectField("role", "Sign in as", required=True).render(options=ROLE_OPTIONS, selected=self.role),
            TextInputField("email", "Email", required=True).render(
                value=self.email, input_type="email", autocomplete="username"
            ),
            TextInputField("password", "Password", required=True).render(
                input_type="password", autocomplete="current-password"
            ),
            '<label class="form-check"><input type="checkbox" name="remember" value="1" checked> Keep me signed in</label>',
        ])
        return f"""
        <form method="post" action="{action}" class="login-form">
            {error_html}
            {next_html}
            {fields}
            <div class="form-actions">
                {SubmitButton("Sign in").render()}
            </div>
            <p class="form-links">
                <a href="{rt.path('FORGOT_PASSWORD')}">Forgot password?</a>
                <a href="{rt.path('REGISTER')}">Create an account</a>
            </p>
        </form>"""
