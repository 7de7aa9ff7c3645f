"""Ollama local LLM provider (OpenAI-compatible API)."""

import os
from typing import Any

from jobportal.llm.openai import OpenAIProvider, _import_openai

_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class OllamaProvider(OpenAIProvider):
    """Local Ollama server reached through its OpenAI-compatible endpoint."""

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama3"

    @property
    def env_var(self) -> None:
        return None

    def _connect(self) -> tuple[Any, Any]:
        openai = _import_openai(
            "openai is required for Ollama (OpenAI-compatible API). "
            "Install with: pip install 'academic-job-portal[openai]'"
        )
        base_url = os.environ.get("OLLAMA_BASE_URL", _OLLAMA_BASE_URL)
        return openai, openai.OpenAI(base_url=base_url, api_key="ollama")
