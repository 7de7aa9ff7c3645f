"""OpenAI chat completions provider, also the base for OpenAI-compatible servers."""

import logging
import os
from typing import Any

from jobportal.llm.base import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
    LLMProvider,
    request_error,
)

logger = logging.getLogger(__name__)


def _import_openai(hint: str) -> Any:
    try:
        import openai
    except ImportError:
        raise ImportError(hint) from None
    return openai


class OpenAIProvider(LLMProvider):
    """Chat completions over the OpenAI API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str | None:
        return "OPENAI_API_KEY"

    def _connect(self) -> tuple[Any, Any]:
        """Return the openai module and a client for this endpoint."""
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            msg = "OPENAI_API_KEY environment variable is required"
            raise ValueError(msg)
        openai = _import_openai(
            "openai is required for the OpenAI provider. "
            "Install with: pip install 'academic-job-portal[openai]'"
        )
        return openai, openai.OpenAI(api_key=api_key)

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        openai, client = self._connect()
        use_model = model or self.default_model

        logger.info("Sending prompt to %s (%s)...", self.provider_id, use_model)
        try:
            response = client.chat.completions.create(
                model=use_model,
                messages=[
                    {"role": "system", "content": system if system is not None else DEFAULT_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
            )
        except openai.APIError as e:
            status = getattr(e, "status_code", None)
            # Exhausted quota comes back as a 429 with its own error code.
            if getattr(e, "code", None) == "insufficient_quota":
                status = 402
            raise request_error(f"{self.provider_id} API error: {e}", status) from e

        return response.choices[0].message.content or ""
