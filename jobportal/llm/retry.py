"""Exponential backoff around LLM provider calls.

Failed API calls and empty replies are retried with delays of 1s, 2s, 4s...
Rate-limit and exhausted-credit errors are returned to the caller at once,
since retrying them only burns more quota.
"""

import logging
import time

from jobportal.llm.base import (
    DEFAULT_TEMPERATURE,
    CreditsExhaustedError,
    EmptyResponseError,
    LLMProvider,
    LLMRequestError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


def complete_with_retry(
    provider: LLMProvider,
    prompt: str,
    model: str | None = None,
    *,
    system: str | None = None,
    temperature: float = DEFAULT_TEMPERATURE,
    max_attempts: int = 3,
    base_delay: float = 1.0,
) -> str:
    """Call `provider.complete`, retrying transient failures.

    Args:
        provider: LLM provider to call.
        prompt: User message content.
        model: Model override passed through to the provider.
        system: System prompt passed through to the provider.
        temperature: Sampling temperature passed through to the provider.
        max_attempts: Total number of calls before giving up (at least 1).
        base_delay: Delay in seconds after the first failure; doubles each time.

    Returns:
        The first non-empty reply.

    Raises:
        RateLimitError, CreditsExhaustedError: Immediately, without retrying.
        LLMRequestError: The last failure once all attempts are used up.
    """
    max_attempts = max(1, max_attempts)
    last_error: LLMRequestError = LLMRequestError("LLM call failed after retries")

    for attempt in range(1, max_attempts + 1):
        logger.info("LLM call attempt %d/%d", attempt, max_attempts)
        try:
            raw = provider.complete(prompt, model=model, system=system, temperature=temperature)
        except (RateLimitError, CreditsExhaustedError):
            raise
        except LLMRequestError as e:
            logger.warning("LLM call attempt %d failed: %s", attempt, e)
            last_error = e
        else:
            if raw and raw.strip():
                return raw
            logger.warning("Empty LLM response on attempt %d", attempt)
            last_error = EmptyResponseError("No response from AI")

        if attempt < max_attempts:
            delay = base_delay * 2 ** (attempt - 1)
            logger.info("Retrying in %.1fs...", delay)
            time.sleep(delay)

    raise last_error
