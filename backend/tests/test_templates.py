"""Tests for motivational email rendering."""

import pytest

from course_mentor.notify.templates import MOTIVATIONAL_TEMPLATES, NEW_TIPS, TemplateRenderer


def test_render_selected_template() -> None:
    renderer = TemplateRenderer("https://mentor.test", selector=lambda templates: templates[1])
    email = renderer.render("Luis", "Finanzas & Costos", 21)
    assert email.template == NEW_TIPS.name
    assert email.subject == "Luis, ¡tu mentor de IA tiene consejos nuevos! 🎯"
    assert "Finanzas &amp; Costos" in email.html
    assert "<strong>21 días</strong>" in email.html
    assert "https://mentor.test/dashboard/chat" in email.html


def test_default_selector_uses_known_templates() -> None:
    email = TemplateRenderer("https://mentor.test").render("Ana", "Marketing", 15)
    assert email.template in {template.name for template in MOTIVATIONAL_TEMPLATES}
    assert "Ana" in email.subject or "Marketing" in email.subject


def test_requires_templates() -> None:
    with pytest.raises(ValueError):
        TemplateRenderer("https://mentor.test", templates=())
