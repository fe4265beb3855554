"""Test fixtures for Course Mentor."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

_PROVIDER_ENV = (
    "CMENTOR_CONFIG",
    "CMENTOR_EMBEDDING_API_URL",
    "CMENTOR_EMBEDDING_API_KEY",
    "CMENTOR_COMPLETION_API_KEY",
    "CMENTOR_SMTP_USER",
    "CMENTOR_SMTP_PASSWORD",
    "CMENTOR_DOCUMENT_STORE",
)


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset cached settings, API singletons and environment between tests."""
    monkeypatch.setenv("CMENTOR_DB_PATH", str(tmp_path / "mentor.db"))
    monkeypatch.setenv("CMENTOR_ARTIFACTS_DIR", str(tmp_path / "artifacts"))
    monkeypatch.setenv("CMENTOR_EMBED_BATCH_DELAY_MS", "0")
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)

    from course_mentor.api import dependencies as deps
    from course_mentor.core.config import get_settings

    get_settings.cache_clear()
    deps.reset_singletons()
    yield
    get_settings.cache_clear()
    deps.reset_singletons()


@pytest.fixture
def business_text() -> str:
    return (
        "La misión de la empresa define su propósito. "
        "El plan de negocio describe el mercado objetivo y la ventaja competitiva. "
        "El marketing construye la marca y el posicionamiento frente a la audiencia."
    )
