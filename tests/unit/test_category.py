"""Tests for seniority categories and category ranking."""

import pytest

from jobportal.core.schemas import CandidateRecord, ScoredCandidate
from jobportal.matching.category import candidate_category, rank_by_category


def _candidate(**kw: object) -> CandidateRecord:
    return CandidateRecord(id="1", **kw)  # type: ignore[arg-type]


class TestCandidateCategory:
    @pytest.mark.parametrize(
        "role",
        ["HOD", "Dean of Engineering", "Director", "Principal", "Registrar", "CTO"],
    )
    def test_gold_roles(self, role: str) -> None:
        assert candidate_category(_candidate(role=role)) == ("GOLD", 3)

    @pytest.mark.parametrize("role", ["Professor", "HR Manager", "Senior Lecturer", "Team Lead"])
    def test_silver_roles(self, role: str) -> None:
        assert candidate_category(_candidate(role=role)) == ("SILVER", 2)

    def test_assistant_blocks_silver(self) -> None:
        assert candidate_category(_candidate(role="Assistant Professor")) == ("BRONZE", 1)

    @pytest.mark.parametrize("role", ["Lecturer", "Teaching Assistant", "Research Associate"])
    def test_bronze_roles(self, role: str) -> None:
        assert candidate_category(_candidate(role=role)) == ("BRONZE", 1)

    def test_headline_considered(self) -> None:
        assert candidate_category(_candidate(headline="Dean, School of Law")) == ("GOLD", 3)

    def test_experience_fallback(self) -> None:
        assert candidate_category(_candidate(role="Analyst", years_experience=12)) == ("SILVER", 2)
        assert candidate_category(_candidate(role="Analyst", years_experience=3)) == ("BRONZE", 1)
        assert candidate_category(_candidate(role="Analyst", years_experience=2)) == ("FRESHER", 0)

    def test_empty_profile_is_fresher(self) -> None:
        assert candidate_category(_candidate()) == ("FRESHER", 0)


class TestRankByCategory:
    def test_category_before_score(self) -> None:
        scored = [
            ScoredCandidate(id="analyst", role="Analyst", score=90, match_reasons=["x"]),
            ScoredCandidate(id="dean", role="Dean", score=30, match_reasons=["y"]),
        ]
        ranked = rank_by_category(scored)
        assert [r.id for r in ranked] == ["dean", "analyst"]
        assert ranked[0].category == "GOLD"
        assert ranked[1].category == "FRESHER"

    def test_score_order_kept_within_category(self) -> None:
        scored = [
            ScoredCandidate(id="a", role="Professor", score=60),
            ScoredCandidate(id="b", role="Professor", score=40),
        ]
        assert [r.id for r in rank_by_category(scored)] == ["a", "b"]

    def test_payload_fields(self) -> None:
        ranked = rank_by_category(
            [ScoredCandidate(id="a", role="Dean", score=30, match_reasons=["Role: Dean"])]
        )
        payload = ranked[0].to_payload()
        assert payload["matchReasons"] == ["Role: Dean"]
        assert payload["category"] == "GOLD"
        assert payload["score"] == 30
        assert "bio" not in payload
