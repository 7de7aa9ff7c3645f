"""LLM-backed salary range suggestion for academic and professional profiles."""

import logging

from jobportal.core.schemas import SalaryProfile, SalarySuggestion, format_number
from jobportal.llm.base import LLMProvider, extract_json_object
from jobportal.llm.retry import complete_with_retry

logger = logging.getLogger(__name__)

SALARY_SYSTEM_PROMPT = (
    "You are an expert salary analyst for the Indian academic and professional job market.\n"
    "Your task is to suggest a realistic annual salary range based on the candidate's profile.\n\n"
    "Consider these factors:\n"
    "1. Role/designation (Professor, Assistant Professor, Lecturer, HOD, Dean, etc.)\n"
    "2. Years of experience\n"
    "3. Location (metro cities like Delhi, Mumbai, Bangalore pay higher)\n"
    "4. Skills and specializations\n"
    "5. Institution type (IIT/IIM/NIT command premium salaries)\n\n"
    "Indian academic salary guidelines:\n"
    "- Fresher/Lecturer: ₹3L - ₹8L p.a.\n"
    "- Assistant Professor (3-5 years): ₹6L - ₹15L p.a.\n"
    "- Associate Professor (5-10 years): ₹12L - ₹25L p.a.\n"
    "- Professor (10+ years): ₹20L - ₹40L p.a.\n"
    "- HOD/Dean/Director: ₹30L - ₹60L p.a.\n"
    "- IIT/IIM/NIT roles typically pay 20-40% more\n\n"
    "Respond ONLY with a JSON object in this exact format, no other text:\n"
    "{\n"
    '  "minSalary": number (in lakhs, e.g., 8 for ₹8L),\n'
    '  "maxSalary": number (in lakhs, e.g., 15 for ₹15L),\n'
    '  "confidence": "low" | "medium" | "high",\n'
    '  "factors": string[] (2-3 key factors that influenced this estimate)\n'
    "}"
)

FALLBACK_SUGGESTION = SalarySuggestion(
    min_salary=8,
    max_salary=15,
    confidence="low",
    factors=["Unable to analyze profile - using default range"],
)


def build_profile_context(profile: SalaryProfile) -> str:
    """One line per known profile field; empty when nothing is known."""
    lines = [
        f"Role/Position: {profile.role}" if profile.role else None,
        f"Professional Headline: {profile.headline}" if profile.headline else None,
        (
            f"Years of Experience: {format_number(profile.years_experience)} years"
            if profile.years_experience is not None
            else None
        ),
        f"Location: {profile.location}" if profile.location else None,
        f"Skills: {', '.join(profile.skills)}" if profile.skills else None,
        f"University/Institution: {profile.university}" if profile.university else None,
    ]
    return "\n".join(line for line in lines if line)


def _build_user_prompt(profile: SalaryProfile) -> str:
    context = build_profile_context(profile)
    if context:
        return f"Based on this profile, suggest an appropriate salary range:\n\n{context}"
    return "The profile is incomplete. Provide a general entry-level academic salary range for India."


def parse_salary_response(raw_text: str) -> SalarySuggestion:
    """Parse the model's reply, falling back to the default range when unusable."""
    try:
        data = extract_json_object(raw_text)
        return SalarySuggestion(
            min_salary=data["minSalary"],
            max_salary=data["maxSalary"],
            confidence=data.get("confidence", "low"),
            factors=data.get("factors") or [],
        )
    except (ValueError, KeyError):
        logger.warning("Failed to parse salary response: %s", raw_text)
        return FALLBACK_SUGGESTION.model_copy(deep=True)


def suggest_salary(
    profile: SalaryProfile,
    provider: LLMProvider,
    model: str | None = None,
    max_attempts: int = 3,
) -> SalarySuggestion:
    """Suggest an annual salary range for a profile.

    Transient provider failures and empty replies are retried (see
    complete_with_retry); the last error propagates once attempts run out.
    An unparseable reply yields FALLBACK_SUGGESTION.
    """
    logger.info("Calling %s for salary suggestion...", provider.provider_id)
    raw = complete_with_retry(
        provider,
        _build_user_prompt(profile),
        model=model,
        system=SALARY_SYSTEM_PROMPT,
        max_attempts=max_attempts,
    )
    logger.info("AI response received, parsing...")
    return parse_salary_response(raw)
