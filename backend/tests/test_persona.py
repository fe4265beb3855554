"""Tests for persona synthesis."""

from course_mentor.analysis.persona import (
    GENERALIST_PROFILE,
    PERSONA_PROFILES,
    PersonaSynthesizer,
    adaptation_level,
    profile_for,
)
from course_mentor.analysis.themes import THEME_TAXONOMY, ThemeAnalysis


def test_every_theme_has_a_profile() -> None:
    assert {profile.name for profile in THEME_TAXONOMY} == set(PERSONA_PROFILES)


def test_adaptation_levels() -> None:
    assert adaptation_level(0.95) == "ALTAMENTE ESPECIALIZADO"
    assert adaptation_level(0.8) == "ESPECIALIZADO"
    assert adaptation_level(0.61) == "ESPECIALIZADO"
    assert adaptation_level(0.6) == "GENERALISTA ADAPTATIVO"


def test_profile_for_unknown_theme() -> None:
    assert profile_for(None) is GENERALIST_PROFILE
    assert profile_for("Astrología") is GENERALIST_PROFILE
    assert profile_for("Marketing") is PERSONA_PROFILES["Marketing"]


def test_generalist_persona() -> None:
    text = PersonaSynthesizer().synthesize(ThemeAnalysis())
    assert "IDENTIDAD PROFESIONAL (GENERALISTA ADAPTATIVO):" in text
    assert "cultura empresarial y emprendimiento general" in text
    assert "Especialización detectada" not in text


def test_specialist_persona_mentions_class_and_themes() -> None:
    analysis = ThemeAnalysis(
        ranked_themes=["Química", "Ciencias", "Educación", "Tecnología"],
        matched_keywords=["química", "laboratorio"],
        confidence=0.9,
    )
    text = PersonaSynthesizer().synthesize(analysis, class_name="Química General")
    assert "IDENTIDAD PROFESIONAL (ALTAMENTE ESPECIALIZADO):" in text
    assert 'Esta clase se enfoca en: "Química General".' in text
    assert "Especialización detectada: Química, Ciencias, Educación (confianza: 90%)." in text
    assert "Tecnología" not in text.split("Especialización detectada:")[1].splitlines()[0]
    assert "Conceptos clave: química, laboratorio." in text
    assert '"Como especialista en química..."' in text
    assert PERSONA_PROFILES["Química"].methodologies in text
