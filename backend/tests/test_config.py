"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from course_mentor.core.config import Settings, get_settings


def test_defaults_from_env(tmp_path: Path) -> None:
    settings = get_settings()
    assert settings.db_path == tmp_path / "mentor.db"
    assert settings.embed_batch_delay_ms == 0
    assert settings.chunk_size == 500
    assert settings.chunk_overlap == 100
    assert settings.document_store == "sqlite"
    assert not settings.remote_embeddings_enabled


def test_yaml_sections_are_flattened(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        """
storage:
  document_store: json
chunking:
  size: 800
  overlap: 200
retrieval:
  top_k: 3
notifications:
  inactivity_days: 10
lexical:
  exact_weight: 7.5
themes:
  single_theme_confidence: 0.7
""",
        encoding="utf-8",
    )
    monkeypatch.setenv("CMENTOR_CONFIG", str(config))
    monkeypatch.setenv("CMENTOR_TOP_K", "8")
    settings = Settings.from_yaml()
    assert settings.document_store == "json"
    assert settings.chunk_size == 800
    assert settings.chunk_overlap == 200
    assert settings.top_k == 8
    assert settings.inactivity_threshold_days == 10
    assert settings.lexical.exact_weight == 7.5
    assert settings.lexical.partial_weight == 2.0
    assert settings.themes.single_theme_confidence == 0.7


def test_invalid_chunk_overlap_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(chunk_size=100, chunk_overlap=100)


def test_remote_embeddings_need_url_and_key() -> None:
    assert not Settings(embedding_api_url="https://emb.test").remote_embeddings_enabled
    assert Settings(embedding_api_url="https://emb.test", embedding_api_key="k").remote_embeddings_enabled
