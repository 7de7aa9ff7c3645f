"""Google Gemini LLM provider (google-genai SDK)."""

import logging
import os

from jobportal.llm.base import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
    LLMProvider,
    request_error,
)

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """Google Gemini through the google-genai SDK."""

    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    @property
    def env_var(self) -> str:
        return "GOOGLE_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        api_key = os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            msg = "GOOGLE_API_KEY environment variable is required"
            raise ValueError(msg)

        try:
            from google import genai
            from google.genai import errors as genai_errors
            from google.genai import types as genai_types
        except ImportError:
            msg = (
                "google-genai is required for the Gemini provider. "
                "Install with: pip install 'academic-job-portal[gemini]'"
            )
            raise ImportError(msg) from None

        use_model = model or self.default_model
        logger.info("Sending prompt to Gemini API (%s)...", use_model)
        try:
            response = genai.Client(api_key=api_key).models.generate_content(
                model=use_model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    system_instruction=system if system is not None else DEFAULT_SYSTEM_PROMPT,
                    temperature=temperature,
                ),
            )
        except genai_errors.APIError as e:
            raise request_error(f"gemini API error: {e}", e.code) from e

        return response.text or ""
