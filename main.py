"""CLI entry point for the job portal services."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from jobportal.core.config import Settings
from jobportal.core.db import init_db, upsert_candidate_record
from jobportal.core.schemas import CandidateRecord, SalaryProfile


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    parser = argparse.ArgumentParser(
        description="Academic job portal - candidate matching, chat search and e-mail tracking",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- serve subcommand ---
    serve_parser = subparsers.add_parser("serve", parents=[common], help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default: from settings)")
    serve_parser.add_argument("--port", type=int, help="Port (default: from settings)")

    # --- import-candidates subcommand ---
    import_parser = subparsers.add_parser(
        "import-candidates",
        parents=[common],
        help="Load candidate directory records from a YAML list",
    )
    import_parser.add_argument("--file", required=True, help="Path to candidates YAML file")

    # --- search subcommand ---
    search_parser = subparsers.add_parser(
        "search",
        parents=[common],
        help="Run a one-shot recruiter chat search",
    )
    search_parser.add_argument("message", help="Recruiter request, e.g. 'I need an HR Manager'")
    search_parser.add_argument(
        "--show-more",
        nargs="*",
        metavar="CANDIDATE_ID",
        help="Continue a search, skipping the given candidate IDs",
    )

    # --- suggest-salary subcommand ---
    salary_parser = subparsers.add_parser(
        "suggest-salary",
        parents=[common],
        help="Suggest a salary range for a YAML profile",
    )
    salary_parser.add_argument("--profile", required=True, help="Path to profile YAML file")

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_yaml(path: str | Path) -> Any:
    path = Path(path)
    if not path.exists():
        msg = f"File not found: {path}"
        raise FileNotFoundError(msg)
    return yaml.safe_load(path.read_text())


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    """Handle serve subcommand."""
    from jobportal.web.app import create_app

    app = create_app(settings)
    app.run(host=args.host or settings.server.host, port=args.port or settings.server.port)


def cmd_import_candidates(args: argparse.Namespace, settings: Settings) -> None:
    """Handle import-candidates subcommand."""
    raw = _load_yaml(args.file) or []
    if not isinstance(raw, list):
        msg = f"{args.file} must contain a list of candidates"
        raise ValueError(msg)

    records = [CandidateRecord.model_validate(item) for item in raw]
    conn = init_db(settings.database.path)
    new_count = sum(1 for r in records if upsert_candidate_record(conn, r))
    conn.close()
    print(f"Imported {len(records)} candidates ({new_count} new) into {settings.database.path}")


def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    """Handle search subcommand."""
    from jobportal.chat.search import recruiter_chat
    from jobportal.llm import get_provider

    provider = get_provider(settings.llm.provider)
    conn = init_db(settings.database.path)
    try:
        reply = recruiter_chat(
            args.message,
            conn,
            provider,
            settings,
            show_more=args.show_more is not None,
            previous_candidate_ids=args.show_more or None,
        )
    finally:
        conn.close()
    print(json.dumps(reply.to_json_dict(), indent=2, ensure_ascii=False))


def cmd_suggest_salary(args: argparse.Namespace, settings: Settings) -> None:
    """Handle suggest-salary subcommand."""
    from jobportal.llm import get_provider
    from jobportal.salary.suggest import suggest_salary

    profile = SalaryProfile.model_validate(_load_yaml(args.profile) or {})
    provider = get_provider(settings.llm.provider)
    suggestion = suggest_salary(profile, provider, model=settings.llm.model)
    print(json.dumps(suggestion.to_json_dict(), indent=2, ensure_ascii=False))


_COMMANDS = {
    "serve": cmd_serve,
    "import-candidates": cmd_import_candidates,
    "search": cmd_search,
    "suggest-salary": cmd_suggest_salary,
}


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        _COMMANDS[args.command](args, settings)
    except (FileNotFoundError, ImportError, ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
