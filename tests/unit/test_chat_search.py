"""Tests for the recruiter chat search flow (mock LLM, real SQLite)."""

import json
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from jobportal.chat.search import (
    DEFAULT_GREETING,
    HELP_MESSAGE,
    describe_search,
    recruiter_chat,
)
from jobportal.core.config import ChatConfig, Settings
from jobportal.core.db import init_db, upsert_candidate_record
from jobportal.core.schemas import CandidateRecord, SearchIntent

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_provider(payload: dict[str, object] | str) -> MagicMock:
    provider = MagicMock()
    provider.complete.return_value = payload if isinstance(payload, str) else json.dumps(payload)
    return provider


def _settings(page_size: int = 3) -> Settings:
    return Settings(chat=ChatConfig(page_size=page_size))


@pytest.fixture()
def db(tmp_path: Path) -> sqlite3.Connection:
    return init_db(tmp_path / "chat.db")


def _add(db: sqlite3.Connection, id: str, minutes_ago: int = 0, **kw: object) -> None:
    updated_at = datetime(2026, 1, 1, 12, 0) - timedelta(minutes=minutes_ago)
    upsert_candidate_record(db, CandidateRecord(id=id, updated_at=updated_at, **kw))  # type: ignore[arg-type]


SEARCH = {"is_search": True, "role": "Manager", "department": "Human Resources"}

# ---------------------------------------------------------------------------
# describe_search
# ---------------------------------------------------------------------------


class TestDescribeSearch:
    def test_all_parts(self) -> None:
        intent = SearchIntent(
            role="Manager", department="HR", experience_years=5, location="Delhi",
        )
        assert describe_search(intent) == "Manager in HR with 5+ years experience in Delhi"

    def test_role_only(self) -> None:
        assert describe_search(SearchIntent(role="Dean")) == "Dean"

    def test_skills_not_described(self) -> None:
        assert describe_search(SearchIntent(skills=["Python"])) == ""

    def test_experience_printed_plainly(self) -> None:
        assert describe_search(SearchIntent(experience_years=12345678)) == "with 12345678+ years experience"
        assert describe_search(SearchIntent(experience_years=2.5)) == "with 2.5+ years experience"


# ---------------------------------------------------------------------------
# Non-search replies
# ---------------------------------------------------------------------------


class TestTextReplies:
    def test_empty_message_rejected(self, db: sqlite3.Connection) -> None:
        with pytest.raises(ValueError, match="Message is required"):
            recruiter_chat("  ", db, _mock_provider(SEARCH), _settings())

    def test_greeting_passthrough(self, db: sqlite3.Connection) -> None:
        provider = _mock_provider({"is_search": False, "greeting_response": "Hi! Who are you hiring?"})
        reply = recruiter_chat("hello", db, provider, _settings())
        assert reply.type == "text"
        assert reply.message == "Hi! Who are you hiring?"

    def test_default_greeting(self, db: sqlite3.Connection) -> None:
        reply = recruiter_chat("hello", db, _mock_provider({"is_search": False}), _settings())
        assert reply.message == DEFAULT_GREETING

    def test_unparseable_reply_gives_help(self, db: sqlite3.Connection) -> None:
        reply = recruiter_chat("hello", db, _mock_provider("not json"), _settings())
        assert reply.type == "text"
        assert reply.message == HELP_MESSAGE

    def test_provider_error_propagates(self, db: sqlite3.Connection) -> None:
        provider = MagicMock()
        provider.complete.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            recruiter_chat("find a manager", db, provider, _settings())


# ---------------------------------------------------------------------------
# Candidate replies
# ---------------------------------------------------------------------------


class TestCandidateReplies:
    def test_no_matches(self, db: sqlite3.Connection) -> None:
        _add(db, "c1", role="Chemist")
        reply = recruiter_chat("HR manager please", db, _mock_provider(SEARCH), _settings())
        assert reply.type == "candidates"
        assert reply.candidates == []
        assert reply.total_matches == 0
        assert reply.has_more is False
        assert 'matching "Manager in Human Resources"' in reply.message

    def test_ranked_by_category_then_score(self, db: sqlite3.Connection) -> None:
        _add(db, "hr", role="HR Manager", headline="Manager, Human Resources")
        _add(db, "dir", role="Director", bio="Director of Human Resources")
        _add(db, "asst", role="Assistant Manager")
        reply = recruiter_chat("HR manager please", db, _mock_provider(SEARCH), _settings())

        assert reply.candidates is not None
        ids = [c["id"] for c in reply.candidates]
        # Director is GOLD despite the lower score; Assistant Manager is FRESHER.
        assert ids == ["dir", "hr", "asst"]
        assert reply.candidates[1]["score"] == 55
        assert reply.candidates[1]["matchReasons"] == ["Role: Manager", "Field: Human Resources"]
        assert reply.candidates[0]["category"] == "GOLD"
        assert reply.total_matches == 3
        assert reply.message == (
            "I found 3 candidates for Manager in Human Resources. "
            "Here are the top 3 ranked by seniority:"
        )

    def test_search_criteria_echoed(self, db: sqlite3.Connection) -> None:
        _add(db, "c1", role="HR Manager")
        reply = recruiter_chat("HR manager please", db, _mock_provider(SEARCH), _settings())
        assert reply.search_criteria == SEARCH

    def test_page_and_has_more(self, db: sqlite3.Connection) -> None:
        for i in range(5):
            _add(db, f"c{i}", minutes_ago=i, role="Manager")
        reply = recruiter_chat("manager", db, _mock_provider(SEARCH), _settings(page_size=2))
        assert reply.candidates is not None
        assert [c["id"] for c in reply.candidates] == ["c0", "c1"]
        assert reply.has_more is True
        assert reply.total_matches == 5
        assert reply.shown_so_far == 2

    def test_single_match_message(self, db: sqlite3.Connection) -> None:
        _add(db, "c1", role="Manager")
        reply = recruiter_chat("manager", db, _mock_provider({"is_search": True, "role": "Manager"}), _settings())
        assert reply.message == "I found 1 candidate for Manager. Here are the top 1 ranked by seniority:"

    def test_show_more_skips_previous(self, db: sqlite3.Connection) -> None:
        for i in range(5):
            _add(db, f"c{i}", minutes_ago=i, role="Manager")
        reply = recruiter_chat(
            "manager",
            db,
            _mock_provider(SEARCH),
            _settings(page_size=2),
            show_more=True,
            previous_candidate_ids=["c0", "c1"],
        )
        assert reply.candidates is not None
        assert [c["id"] for c in reply.candidates] == ["c2", "c3"]
        assert reply.has_more is True
        assert reply.shown_so_far == 4
        assert reply.message == "Here are 2 more candidates (4 of 5 total):"

    def test_show_more_exhausted(self, db: sqlite3.Connection) -> None:
        _add(db, "c0", role="Manager")
        reply = recruiter_chat(
            "manager",
            db,
            _mock_provider(SEARCH),
            _settings(),
            show_more=True,
            previous_candidate_ids=["c0"],
        )
        assert reply.candidates == []
        assert reply.has_more is False
        assert reply.message.startswith("No more candidates available")

    def test_candidate_payload_shape(self, db: sqlite3.Connection) -> None:
        _add(
            db, "c1",
            full_name="Asha Verma",
            role="HR Manager",
            skills=["Payroll"],
            years_experience=8,
            email="asha@example.com",
            bio="Long private bio",
        )
        reply = recruiter_chat("manager", db, _mock_provider(SEARCH), _settings())
        assert reply.candidates is not None
        payload = reply.candidates[0]
        assert set(payload) == {
            "id", "full_name", "avatar_url", "role", "headline", "university",
            "location", "years_experience", "skills", "email", "matchReasons",
            "score", "category",
        }
        assert payload["years_experience"] == 8
        assert payload["full_name"] == "Asha Verma"
