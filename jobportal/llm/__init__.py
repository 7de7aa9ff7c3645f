"""LLM provider registry with lazy loading.

Usage:
    from jobportal.llm import get_provider

    provider = get_provider("gemini")
    raw = provider.complete(prompt, system=SYSTEM_PROMPT)
"""

from __future__ import annotations

import importlib

from jobportal.llm.base import LLMProvider, extract_json_object, strip_code_fence

__all__ = [
    "LLMProvider",
    "available_providers",
    "extract_json_object",
    "get_provider",
    "strip_code_fence",
]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("jobportal.llm.anthropic", "AnthropicProvider"),
    "openai": ("jobportal.llm.openai", "OpenAIProvider"),
    "gemini": ("jobportal.llm.gemini", "GeminiProvider"),
    "ollama": ("jobportal.llm.ollama", "OllamaProvider"),
}


def get_provider(name: str) -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Args:
        name: Provider identifier (anthropic, openai, gemini, ollama).

    Returns:
        An LLMProvider instance.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls()  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
