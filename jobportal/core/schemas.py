"""Core data models for the job portal services."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def format_number(value: int | float) -> str:
    """Render a number the way it reads: 12 not 12.0, 7.5 as is, never exponent form."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _not_negative(v: int | float | None, name: str) -> int | float | None:
    if v is not None and v < 0:
        msg = f"{name} must not be negative"
        raise ValueError(msg)
    return v


class CandidateRecord(BaseModel):
    """A job seeker's entry in the candidate directory.

    Frozen: matching never mutates directory records.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str | None = None
    role: str | None = None
    headline: str | None = None
    bio: str | None = None
    professional_summary: str | None = None
    university: str | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    years_experience: int | float | None = None
    email: str | None = None
    avatar_url: str | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v: object) -> object:
        # YAML and JSON sources may carry numeric ids.
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("skills", mode="before")
    @classmethod
    def skills_default(cls, v: object) -> object:
        return [] if v is None else v

    @field_validator("years_experience")
    @classmethod
    def years_not_negative(cls, v: int | float | None) -> int | float | None:
        return _not_negative(v, "years_experience")


class SearchIntent(BaseModel):
    """Structured form of a recruiter's free-text search."""

    model_config = ConfigDict(frozen=True)

    role: str | None = None
    department: str | None = None
    skills: list[str] | None = None
    experience_years: int | float | None = None
    location: str | None = None

    @field_validator("experience_years")
    @classmethod
    def minimum_not_negative(cls, v: int | float | None) -> int | float | None:
        return _not_negative(v, "experience_years")

    def terms(self) -> list[str]:
        """Non-empty role, department and skill keywords, in that order."""
        terms = [t for t in (self.role, self.department) if t]
        terms.extend(s for s in self.skills or [] if s)
        return terms


class ScoredCandidate(CandidateRecord):
    """A directory record with its match score and the reasons behind it."""

    score: int = Field(default=0, ge=0)
    match_reasons: list[str] = Field(default_factory=list, serialization_alias="matchReasons")


class RankedCandidate(ScoredCandidate):
    """A scored candidate tagged with its seniority category."""

    category: str
    category_rank: int = Field(ge=0, le=3)

    def to_payload(self) -> dict[str, object]:
        """Fields returned to the recruiter chat UI."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "role": self.role,
            "headline": self.headline,
            "university": self.university,
            "location": self.location,
            "years_experience": self.years_experience,
            "skills": list(self.skills),
            "email": self.email,
            "matchReasons": list(self.match_reasons),
            "score": self.score,
            "category": self.category,
        }


class IntentExtraction(BaseModel):
    """Result of turning a recruiter message into a search intent."""

    is_search: bool
    greeting_response: str | None = None
    intent: SearchIntent | None = None


class ChatReply(BaseModel):
    """Reply sent back to the recruiter chat."""

    type: str = "text"
    message: str
    candidates: list[dict[str, object]] | None = None
    search_criteria: dict[str, object] | None = Field(
        default=None, serialization_alias="searchCriteria"
    )
    has_more: bool | None = Field(default=None, serialization_alias="hasMore")
    total_matches: int | None = Field(default=None, serialization_alias="totalMatches")
    shown_so_far: int | None = Field(default=None, serialization_alias="shownSoFar")

    def to_json_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SalaryProfile(BaseModel):
    """Profile fields considered for a salary estimate."""

    model_config = ConfigDict(populate_by_name=True)

    role: str | None = None
    headline: str | None = None
    years_experience: int | float | None = Field(default=None, alias="yearsExperience")
    location: str | None = None
    skills: list[str] | None = None
    university: str | None = None


class SalarySuggestion(BaseModel):
    """Suggested annual salary range, in lakhs of rupees."""

    min_salary: int | float = Field(serialization_alias="minSalary")
    max_salary: int | float = Field(serialization_alias="maxSalary")
    confidence: str = "low"
    factors: list[str] = Field(default_factory=list)

    @property
    def salary_range(self) -> str:
        return f"₹{format_number(self.min_salary)}L - ₹{format_number(self.max_salary)}L p.a."

    def to_json_dict(self) -> dict[str, object]:
        data = self.model_dump(by_alias=True)
        data["salaryRange"] = self.salary_range
        return data
