"""Anthropic Claude LLM provider."""

import logging
import os

from jobportal.llm.base import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
    LLMProvider,
    request_error,
)

logger = logging.getLogger(__name__)

MAX_TOKENS = 1024


class AnthropicProvider(LLMProvider):
    """Messages API of Anthropic Claude."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            msg = "ANTHROPIC_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for the Anthropic provider. "
                "Install with: pip install 'academic-job-portal[anthropic]'"
            )
            raise ImportError(msg) from None

        use_model = model or self.default_model
        logger.info("Sending prompt to Anthropic API (%s)...", use_model)
        try:
            message = anthropic.Anthropic(api_key=api_key).messages.create(
                model=use_model,
                max_tokens=MAX_TOKENS,
                temperature=temperature,
                system=system if system is not None else DEFAULT_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise request_error(f"anthropic API error: {e}", getattr(e, "status_code", None)) from e

        return "".join(getattr(block, "text", "") for block in message.content)
