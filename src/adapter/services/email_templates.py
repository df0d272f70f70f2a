"""
Email template rendering.

Bodies are jinja2 templates under src/adapter/templates/emails; subjects
live here so the set of messages the service can send is visible in one place.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "templates", "emails"
)

SUBJECTS = {
    "verification_code": "Your {app_name} verification code",
    "email_change_code": "Your email change verification code",
    "email_change_warning": "Email change request notification",
    "email_changed": "Your {app_name} email address was changed",
    "password_reset_code": "Password reset code - {app_name}",
    "password_reset_success": "Password reset successful - {app_name}",
    "password_changed": "Your {app_name} password was changed",
}


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str


class EmailTemplateRenderer:
    def __init__(self, app_name: str, template_dir: str = _DEFAULT_TEMPLATE_DIR):
        self._app_name = app_name
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )

    def render(self, template: str, context: Dict[str, Any]) -> RenderedEmail:
        if template not in SUBJECTS:
            raise KeyError(f"Unknown email template: {template}")
        subject = SUBJECTS[template].format(app_name=self._app_name)
        html_body = self._jinja.get_template(f"{template}.html").render(
            app_name=self._app_name, **context
        )
        return RenderedEmail(subject=subject, html_body=html_body)
