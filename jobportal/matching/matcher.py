"""Rule-based matching of directory candidates against a recruiter's search intent.

Every rule is a case-insensitive substring test against one lowercase
"searchable text" per candidate:

  role        +30  "Role: {role}"
  department  +25  "Field: {department}"
  skill       +15  "Skill: {skill}" (per matched skill)
  experience  +20  "{years}+ years experience"
  location    +10  "Location: {candidate location}"
  term bonus   +5  no reason (term found but not named by any reason)

Weights come from MatchingConfig. Candidates scoring 0 are dropped.
"""

import logging
from collections.abc import Iterable

from jobportal.core.config import MatchingConfig
from jobportal.core.schemas import CandidateRecord, ScoredCandidate, SearchIntent, format_number

logger = logging.getLogger(__name__)


def build_searchable_text(candidate: CandidateRecord) -> str:
    """Join the candidate's descriptive fields and skills into one lowercase string."""
    parts = [
        candidate.role or "",
        candidate.headline or "",
        candidate.bio or "",
        candidate.professional_summary or "",
        candidate.university or "",
        *candidate.skills,
    ]
    return " ".join(parts).lower()


def score_candidate(
    intent: SearchIntent,
    candidate: CandidateRecord,
    config: MatchingConfig | None = None,
) -> ScoredCandidate:
    """Score a single candidate against the intent.

    Args:
        intent: Structured search intent; absent fields are skipped.
        candidate: Directory record to evaluate.
        config: Rule weights. Defaults to MatchingConfig().

    Returns:
        ScoredCandidate carrying the record's fields, the score and match reasons.
    """
    config = config or MatchingConfig()
    text = build_searchable_text(candidate)
    score = 0
    reasons: list[str] = []

    if intent.role and intent.role.lower() in text:
        score += config.role_weight
        reasons.append(f"Role: {intent.role}")

    if intent.department and intent.department.lower() in text:
        score += config.department_weight
        reasons.append(f"Field: {intent.department}")

    if intent.skills:
        candidate_skills = [s.lower() for s in candidate.skills]
        for skill in intent.skills:
            needle = skill.lower()
            if any(needle in cs for cs in candidate_skills) or needle in text:
                score += config.skill_weight
                reasons.append(f"Skill: {skill}")

    # A zero minimum is no requirement at all.
    if intent.experience_years and candidate.years_experience is not None:
        if candidate.years_experience >= intent.experience_years:
            score += config.experience_weight
            reasons.append(f"{format_number(candidate.years_experience)}+ years experience")

    if intent.location and candidate.location:
        if intent.location.lower() in candidate.location.lower():
            score += config.location_weight
            reasons.append(f"Location: {candidate.location}")

    for term in intent.terms():
        needle = term.lower()
        if needle in text and not any(needle in r.lower() for r in reasons):
            score += config.term_bonus

    return ScoredCandidate(
        **candidate.model_dump(),
        score=score,
        match_reasons=reasons,
    )


def match_candidates(
    intent: SearchIntent,
    candidates: Iterable[CandidateRecord],
    limit: int = 10,
    config: MatchingConfig | None = None,
) -> list[ScoredCandidate]:
    """Score candidates, drop non-matches, and return the top `limit` by score.

    Ties keep the order of the input snapshot.
    """
    scored = [score_candidate(intent, c, config) for c in candidates]
    matched = [s for s in scored if s.score > 0]
    matched.sort(key=lambda s: s.score, reverse=True)
    logger.debug("Matched %d of %d candidates", len(matched), len(scored))
    return matched[:limit]
