"""Seniority categories used to order recruiter chat results.

Higher rank shows first: GOLD (3) > SILVER (2) > BRONZE (1) > FRESHER (0).
"""

from jobportal.core.schemas import CandidateRecord, RankedCandidate, ScoredCandidate

GOLD_KEYWORDS = (
    "hod", "head of department", "dean", "vice chancellor", "vc", "pvc",
    "pro vice chancellor", "director", "principal", "registrar", "ceo", "cto", "cfo",
)
SILVER_KEYWORDS = (
    "professor", "manager", "senior lecturer", "associate professor",
    "coordinator", "lead", "head", "senior",
)
BRONZE_KEYWORDS = (
    "assistant professor", "lecturer", "instructor", "teaching assistant",
    "research associate",
)


def candidate_category(candidate: CandidateRecord) -> tuple[str, int]:
    """Classify a candidate by role/headline keywords, falling back to experience."""
    text = f"{candidate.role or ''} {candidate.headline or ''}".lower()
    experience = candidate.years_experience or 0

    if any(kw in text for kw in GOLD_KEYWORDS):
        return "GOLD", 3
    if any(kw in text for kw in SILVER_KEYWORDS) and "assistant" not in text:
        return "SILVER", 2
    if any(kw in text for kw in BRONZE_KEYWORDS):
        return "BRONZE", 1

    if experience >= 10:
        return "SILVER", 2
    if experience >= 3:
        return "BRONZE", 1
    return "FRESHER", 0


def rank_by_category(scored: list[ScoredCandidate]) -> list[RankedCandidate]:
    """Tag each candidate with its category and order by category rank.

    The sort is stable, so candidates already ordered by score keep that
    order within a category.
    """
    ranked = []
    for s in scored:
        category, rank = candidate_category(s)
        ranked.append(RankedCandidate(**s.model_dump(), category=category, category_rank=rank))
    ranked.sort(key=lambda r: r.category_rank, reverse=True)
    return ranked
