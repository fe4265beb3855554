"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "CMENTOR_"
DEFAULT_CONFIG_PATH = Path("~/.config/course-mentor/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("storage", "db_path"): "db_path",
    ("storage", "artifacts_dir"): "artifacts_dir",
    ("storage", "document_store"): "document_store",
    ("chunking", "size"): "chunk_size",
    ("chunking", "overlap"): "chunk_overlap",
    ("embeddings", "api_url"): "embedding_api_url",
    ("embeddings", "api_key"): "embedding_api_key",
    ("embeddings", "model"): "embedding_model",
    ("embeddings", "batch_delay_ms"): "embed_batch_delay_ms",
    ("completion", "api_url"): "completion_api_url",
    ("completion", "api_key"): "completion_api_key",
    ("completion", "model"): "completion_model",
    ("completion", "temperature"): "temperature",
    ("completion", "max_tokens"): "max_tokens",
    ("retrieval", "top_k"): "top_k",
    ("mail", "host"): "smtp_host",
    ("mail", "port"): "smtp_port",
    ("mail", "user"): "smtp_user",
    ("mail", "password"): "smtp_password",
    ("mail", "secure"): "smtp_secure",
    ("mail", "from_address"): "mail_from",
    ("notifications", "inactivity_days"): "inactivity_threshold_days",
    ("notifications", "cooldown_days"): "email_cooldown_days",
    ("notifications", "max_attempts"): "delivery_max_attempts",
    ("notifications", "base_backoff_ms"): "delivery_base_backoff_ms",
}

# Sections passed through whole to a nested settings model.
_NESTED_SECTIONS = ("lexical", "themes")


class LexicalScoring(BaseModel):
    """Weights of the keyword fallback ranker."""

    exact_weight: float = 5.0
    partial_weight: float = 2.0
    partial_min_length: int = 4
    proximity_tiers: tuple[tuple[int, float], ...] = ((50, 8.0), (100, 4.0), (200, 2.0))
    coverage_bonus: float = 10.0
    length_floor: int = 10
    scale: float = 100.0


class ThemeScoring(BaseModel):
    """Weights and confidence constants of the theme analyzer."""

    high_weight: float = 3.0
    medium_weight: float = 2.0
    low_weight: float = 1.0
    default_confidence: float = 0.5
    single_theme_confidence: float = 0.8
    confidence_base: float = 0.3
    confidence_spread: float = 0.6
    confidence_cap: float = 0.95


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    db_path: Path = Field(default=Path.home() / ".course-mentor" / "mentor.db")
    artifacts_dir: Path = Field(default=Path.home() / ".course-mentor" / "artifacts")
    document_store: Literal["sqlite", "json"] = "sqlite"

    chunk_size: int = 500
    chunk_overlap: int = 100

    embedding_api_url: str | None = None
    embedding_api_key: str | None = None
    embedding_model: str = "nomic-embed-text-v1.5"
    embed_batch_delay_ms: int = 100

    completion_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    completion_api_key: str | None = None
    completion_model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7
    max_tokens: int = 1024
    request_timeout_s: float = 30.0

    top_k: int = 5
    lexical: LexicalScoring = Field(default_factory=LexicalScoring)
    themes: ThemeScoring = Field(default_factory=ThemeScoring)

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_secure: bool = False
    mail_from: str = "chatbot@residencia.edu"
    mail_from_name: str = "Mentor de IA"
    app_base_url: str = "http://localhost:3000"

    inactivity_threshold_days: int = 15
    email_cooldown_days: int = 7
    delivery_max_attempts: int = 3
    delivery_base_backoff_ms: int = 500

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("db_path", "artifacts_dir", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("paths must be a path or string")

    @model_validator(mode="after")
    def _check_chunking(self) -> "Settings":
        if self.chunk_size <= 0 or self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")
        return self

    @property
    def remote_embeddings_enabled(self) -> bool:
        return bool(self.embedding_api_url and self.embedding_api_key)

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if not prefix and key in _NESTED_SECTIONS and isinstance(value, Mapping):
            flat[key] = dict(value)
        elif isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with CMENTOR_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in _NESTED_SECTIONS:
            continue
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "LexicalScoring", "ThemeScoring", "get_settings"]
