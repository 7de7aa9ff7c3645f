"""Recruiter chat search: intent extraction → matching → category ranking → reply.

Data flow:
  1. LLM extracts a SearchIntent (or a greeting for non-search messages)
  2. Directory snapshot loaded from the DB, newest profiles first
  3. Matcher scores every candidate
  4. Matches re-ordered by seniority category (score order kept inside a category)
  5. One page of results plus a summary message
"""

import logging
import sqlite3

from jobportal.chat.intent import extract_intent
from jobportal.core.config import Settings
from jobportal.core.db import list_candidates
from jobportal.core.schemas import ChatReply, SearchIntent, format_number
from jobportal.llm.base import LLMProvider
from jobportal.matching.category import rank_by_category
from jobportal.matching.matcher import match_candidates

logger = logging.getLogger(__name__)

HELP_MESSAGE = (
    "I'm here to help you find candidates! Try saying something like "
    "'I need a Manager for Human Resources' or 'Find me candidates with "
    "5 years of experience in Marketing'."
)
DEFAULT_GREETING = (
    "Hello! I'm here to help you find the perfect candidates. Just tell me what "
    "role you're looking for, like 'I need a Manager for Human Resources'."
)


def describe_search(intent: SearchIntent) -> str:
    """Human-readable summary of the search, e.g. 'Manager in Human Resources'."""
    parts = [
        intent.role,
        f"in {intent.department}" if intent.department else None,
        f"with {format_number(intent.experience_years)}+ years experience" if intent.experience_years else None,
        f"in {intent.location}" if intent.location else None,
    ]
    return " ".join(p for p in parts if p)


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def _reply_message(
    intent: SearchIntent,
    shown: int,
    total: int,
    shown_so_far: int,
    show_more: bool,
) -> str:
    if shown == 0:
        if show_more:
            return (
                "No more candidates available for this search. "
                "Try refining your criteria to see different results."
            )
        return (
            f'I couldn\'t find any candidates matching "{describe_search(intent)}". '
            "Try broadening your search criteria or check back later as new candidates join."
        )
    if show_more:
        return f"Here are {shown} more candidate{_plural(shown)} ({shown_so_far} of {total} total):"
    return (
        f"I found {total} candidate{_plural(total)} for {describe_search(intent)}. "
        f"Here are the top {shown} ranked by seniority:"
    )


def recruiter_chat(
    message: str,
    conn: sqlite3.Connection,
    provider: LLMProvider,
    settings: Settings,
    show_more: bool = False,
    previous_candidate_ids: list[str] | None = None,
) -> ChatReply:
    """Answer a recruiter chat message with a page of ranked candidates.

    Args:
        message: Free-text recruiter message.
        conn: Connection to the candidate directory.
        provider: LLM provider used for intent extraction.
        settings: Matching weights, page size and model override.
        show_more: Continue a previous search, skipping candidates already shown.
        previous_candidate_ids: IDs returned by earlier pages of this search.

    Returns:
        A text reply for greetings/unparseable messages, otherwise a candidates reply.

    Raises:
        ValueError: If message is empty.
    """
    if not message or not message.strip():
        msg = "Message is required"
        raise ValueError(msg)

    try:
        extraction = extract_intent(message, provider, model=settings.llm.model)
    except ValueError:
        logger.warning("Could not parse intent from LLM reply", exc_info=True)
        return ChatReply(type="text", message=HELP_MESSAGE)

    if not extraction.is_search or extraction.intent is None:
        return ChatReply(type="text", message=extraction.greeting_response or DEFAULT_GREETING)

    intent = extraction.intent
    logger.info("Search terms: %s", intent.terms())

    candidates = list_candidates(conn)
    matched = match_candidates(
        intent, candidates, limit=len(candidates), config=settings.matching,
    )
    ranked = rank_by_category(matched)

    previous = previous_candidate_ids or []
    to_show = ranked
    if show_more and previous:
        excluded = set(previous)
        to_show = [r for r in ranked if r.id not in excluded]

    page_size = settings.chat.page_size
    page = to_show[:page_size]
    total = len(ranked)
    shown_so_far = len(previous) + len(page) if show_more else len(page)

    logger.info("Found %d matching candidates, showing %d", total, len(page))

    return ChatReply(
        type="candidates",
        message=_reply_message(intent, len(page), total, shown_so_far, show_more),
        candidates=[r.to_payload() for r in page],
        search_criteria={"is_search": True, **intent.model_dump(exclude_none=True)},
        has_more=len(to_show) > page_size,
        total_matches=total,
        shown_so_far=shown_so_far,
    )
