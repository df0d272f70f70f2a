import pytest

from src.adapter.services.email_templates import SUBJECTS, EmailTemplateRenderer


@pytest.fixture
def renderer():
    return EmailTemplateRenderer("DenoLite")


def test_every_template_renders(renderer):
    contexts = {
        "verification_code": {"code": "123456", "expires_minutes": 15},
        "email_change_code": {"code": "123456", "expires_minutes": 15, "new_email": "n@example.com"},
        "email_change_warning": {"new_email": "n@example.com"},
        "email_changed": {"new_email": "n@example.com"},
        "password_reset_code": {"code": "123456", "expires_minutes": 15, "sets_first_password": False},
        "password_reset_success": {},
        "password_changed": {},
    }
    assert set(contexts) == set(SUBJECTS)

    for template, context in contexts.items():
        email = renderer.render(template, context)
        assert email.subject
        assert email.html_body.strip()


def test_subject_uses_app_name(renderer):
    email = renderer.render("password_reset_code", {"code": "1", "expires_minutes": 15, "sets_first_password": False})
    assert email.subject == "Password reset code - DenoLite"


def test_first_password_note(renderer):
    with_note = renderer.render(
        "password_reset_code", {"code": "123456", "expires_minutes": 15, "sets_first_password": True}
    )
    without_note = renderer.render(
        "password_reset_code", {"code": "123456", "expires_minutes": 15, "sets_first_password": False}
    )
    assert len(with_note.html_body) > len(without_note.html_body)


def test_context_is_escaped(renderer):
    email = renderer.render("email_change_warning", {"new_email": "<script>x</script>"})
    assert "<script>" not in email.html_body


def test_unknown_template(renderer):
    with pytest.raises(KeyError):
        renderer.render("nope", {})
