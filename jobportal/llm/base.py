"""Abstract base class for LLM providers and shared reply parsing."""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

DEFAULT_SYSTEM_PROMPT = (
    "You are an assistant for an academic job portal. "
    "Respond ONLY with a JSON object (no markdown, no explanation)."
)

DEFAULT_TEMPERATURE = 0.3

_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class LLMRequestError(Exception):
    """An LLM API call failed. `status` is the HTTP status, when the API returned one."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RateLimitError(LLMRequestError):
    """The provider is rejecting requests because of rate limits (HTTP 429)."""


class CreditsExhaustedError(LLMRequestError):
    """The account has no credits or quota left (HTTP 402)."""


class EmptyResponseError(LLMRequestError):
    """The provider answered with no content."""


def request_error(message: str, status: int | None) -> LLMRequestError:
    """Map an API status to the matching LLMRequestError subclass."""
    if status == 429:
        return RateLimitError(message, status)
    if status == 402:
        return CreditsExhaustedError(message, status)
    return LLMRequestError(message, status)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def strip_code_fence(raw_text: str) -> str:
    """Return the contents of the first ```json fence, or the trimmed text."""
    match = _FENCED_RE.search(raw_text)
    if match:
        return match.group(1).strip()
    return raw_text.strip()


def extract_json_object(raw_text: str) -> dict[str, Any]:
    """Parse the outermost {...} object embedded in an LLM reply.

    Raises:
        ValueError: If no JSON object can be found or decoded.
    """
    match = _OBJECT_RE.search(raw_text)
    if not match:
        msg = "No JSON object found in LLM response"
        raise ValueError(msg)
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = "LLM response JSON is not an object"
        raise ValueError(msg)
    return data


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Send a prompt to the LLM and return raw response text.

        Args:
            prompt: User message content.
            model: Override the provider's default model. None uses default.
            system: Override the system prompt. None falls back to DEFAULT_SYSTEM_PROMPT.
            temperature: Sampling temperature for this call.

        Returns:
            Raw text response from the LLM (expected to be JSON).

        Raises:
            LLMRequestError: The API call failed; RateLimitError and
                CreditsExhaustedError for HTTP 429 and 402.
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""
