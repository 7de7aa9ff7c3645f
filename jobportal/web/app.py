"""Flask application exposing tracking, recruiter chat and salary endpoints."""

import logging
import sqlite3
from typing import Any

from flask import Flask, Response, current_app, g, jsonify, request

from jobportal.chat.search import recruiter_chat
from jobportal.core.config import Settings
from jobportal.core.db import init_db
from jobportal.core.schemas import SalaryProfile
from jobportal.llm import get_provider
from jobportal.llm.base import CreditsExhaustedError, LLMProvider, RateLimitError
from jobportal.salary.suggest import suggest_salary
from jobportal.tracking.events import MessageCounterStore, record_event

logger = logging.getLogger(__name__)

ALLOW_HEADERS = (
    "authorization, x-client-info, apikey, content-type, x-supabase-client-platform, "
    "x-supabase-client-platform-version, x-supabase-client-runtime, "
    "x-supabase-client-runtime-version"
)
CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
CREDITS_MESSAGE = "AI credits exhausted. Please add credits to continue."


def _settings() -> Settings:
    return current_app.config["PORTAL_SETTINGS"]


def _provider() -> LLMProvider:
    provider = current_app.config.get("LLM_PROVIDER")
    if provider is None:
        provider = get_provider(_settings().llm.provider)
        current_app.config["LLM_PROVIDER"] = provider
    return provider


def get_db() -> sqlite3.Connection:
    """Per-request connection, closed on app context teardown."""
    if "db" not in g:
        g.db = init_db(_settings().database.path)
    return g.db


def _close_db(exc: BaseException | None = None) -> None:
    conn = g.pop("db", None)
    if conn is not None:
        conn.close()


def track_email_event() -> Response:
    result = record_event(
        MessageCounterStore(get_db),
        request.args.get("id"),
        request.args.get("event"),
        request.args.get("url"),
    )
    resp = Response(result.body, status=result.status, content_type=result.content_type)
    for name, value in result.headers.items():
        resp.headers[name] = value
    return resp


def chat() -> tuple[Response, int] | Response:
    payload: dict[str, Any] = request.get_json(silent=True) or {}
    message = payload.get("message")
    if not message:
        return jsonify({"error": "Message is required"}), 400

    try:
        reply = recruiter_chat(
            message,
            get_db(),
            _provider(),
            _settings(),
            show_more=bool(payload.get("showMore")),
            previous_candidate_ids=payload.get("previousCandidateIds") or None,
        )
    except Exception as e:
        logger.exception("Error in recruiter chat")
        return jsonify({"type": "error", "error": str(e), "message": CHAT_ERROR_MESSAGE}), 500
    return jsonify(reply.to_json_dict())


def salary() -> tuple[Response, int] | Response:
    payload: dict[str, Any] = request.get_json(silent=True) or {}
    try:
        profile = SalaryProfile.model_validate(payload.get("profile") or {})
        suggestion = suggest_salary(profile, _provider(), model=_settings().llm.model)
    except RateLimitError:
        logger.warning("Salary suggestion rate limited")
        return jsonify({"error": RATE_LIMIT_MESSAGE}), 429
    except CreditsExhaustedError:
        logger.warning("Salary suggestion failed: AI credits exhausted")
        return jsonify({"error": CREDITS_MESSAGE}), 402
    except Exception as e:
        logger.exception("Salary suggestion error")
        return jsonify({"error": str(e) or "Failed to generate salary suggestion"}), 500
    return jsonify(suggestion.to_json_dict())


def create_app(settings: Settings, provider: LLMProvider | None = None) -> Flask:
    """Build the Flask app.

    Args:
        settings: Loaded portal settings.
        provider: LLM provider override; by default created lazily from settings.llm.
    """
    app = Flask(__name__)
    app.config["PORTAL_SETTINGS"] = settings
    app.config["LLM_PROVIDER"] = provider
    app.json.ensure_ascii = False  # type: ignore[attr-defined]

    app.add_url_rule("/track-email-event", "track_email_event", track_email_event, methods=["GET"])
    app.add_url_rule("/recruiter-chat", "recruiter_chat", chat, methods=["POST"])
    app.add_url_rule("/suggest-salary", "suggest_salary", salary, methods=["POST"])
    app.teardown_appcontext(_close_db)

    @app.after_request
    def add_cors_headers(resp: Response) -> Response:
        resp.headers["Access-Control-Allow-Origin"] = settings.server.cors_allow_origin
        resp.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        return resp

    return app
