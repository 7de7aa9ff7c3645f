"""Configuration models and YAML loader for the job portal services."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/portal.db"


class MatchingConfig(BaseModel):
    """Weights for rule-based candidate matching."""

    role_weight: int = Field(default=30, ge=0)
    department_weight: int = Field(default=25, ge=0)
    skill_weight: int = Field(default=15, ge=0)
    experience_weight: int = Field(default=20, ge=0)
    location_weight: int = Field(default=10, ge=0)
    term_bonus: int = Field(default=5, ge=0)


class ChatConfig(BaseModel):
    """Recruiter chat search settings."""

    page_size: int = Field(default=3, ge=1, le=50)


class LLMConfig(BaseModel):
    """LLM provider used for intent extraction and salary suggestion."""

    provider: str = "gemini"
    model: str | None = None

    @field_validator("provider")
    @classmethod
    def provider_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "llm provider must not be empty"
            raise ValueError(msg)
        return v.strip().lower()


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_allow_origin: str = "*"


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
