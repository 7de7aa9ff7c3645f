"""LLM-backed extraction of a structured search intent from a recruiter message."""

import json
import logging
from typing import Any

from jobportal.core.schemas import IntentExtraction, SearchIntent
from jobportal.llm.base import LLMProvider, strip_code_fence

logger = logging.getLogger(__name__)

INTENT_SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts job requirements from recruiter queries.\n"
    "Extract the following information if mentioned:\n"
    "- role/position (e.g., Manager, Director, Professor, HOD)\n"
    "- department/field (e.g., Human Resources, Computer Science, Marketing)\n"
    "- skills (any specific skills mentioned)\n"
    "- experience_years (minimum years of experience if mentioned)\n"
    "- location (if mentioned)\n\n"
    "Respond ONLY with a JSON object. If the query is a greeting or not a job search, "
    'return {"is_search": false, "greeting_response": "your friendly response"}.\n'
    'For job searches, return {"is_search": true, "role": "...", "department": "...", '
    '"skills": [...], "experience_years": null or number, "location": "..."}.\n'
    "Only include fields that are clearly mentioned."
)

_INTENT_FIELDS = ("role", "department", "skills", "experience_years", "location")


def parse_intent_response(raw_text: str) -> IntentExtraction:
    """Parse the model's JSON reply into an IntentExtraction.

    Handles markdown-wrapped JSON (```json ... ```) and plain JSON.

    Raises:
        ValueError: If the reply is not a JSON object or has invalid field types.
    """
    try:
        data = json.loads(strip_code_fence(raw_text))
    except json.JSONDecodeError as e:
        msg = f"Failed to parse intent response as JSON: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = "Intent response is not a JSON object"
        raise ValueError(msg)

    if not data.get("is_search"):
        greeting = data.get("greeting_response")
        return IntentExtraction(is_search=False, greeting_response=greeting or None)

    fields: dict[str, Any] = {k: data.get(k) for k in _INTENT_FIELDS}
    if isinstance(fields["skills"], str):
        fields["skills"] = [fields["skills"]]
    # Empty strings mean the model had nothing to report for the field.
    fields = {k: v for k, v in fields.items() if v not in (None, "", [])}
    return IntentExtraction(is_search=True, intent=SearchIntent.model_validate(fields))


def extract_intent(
    message: str,
    provider: LLMProvider,
    model: str | None = None,
) -> IntentExtraction:
    """Ask the LLM to turn a recruiter message into a search intent.

    Provider errors propagate; a malformed reply raises ValueError.
    """
    raw = provider.complete(message, model=model, system=INTENT_SYSTEM_PROMPT)
    logger.debug("Intent extraction response: %s", raw)
    return parse_intent_response(raw)
