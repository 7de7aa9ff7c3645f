"""SQLite database layer for the candidate directory and recruiter message counters."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from jobportal.core.schemas import CandidateRecord

_CANDIDATE_DIRECTORY_TABLE = """
CREATE TABLE IF NOT EXISTS candidate_directory (
    id                   TEXT PRIMARY KEY,
    full_name            TEXT,
    role                 TEXT,
    headline             TEXT,
    bio                  TEXT,
    professional_summary TEXT,
    university           TEXT,
    location             TEXT,
    skills_json          TEXT NOT NULL DEFAULT '[]',
    years_experience     REAL,
    email                TEXT,
    avatar_url           TEXT,
    updated_at           TEXT NOT NULL
);
"""

_RECRUITER_MESSAGES_TABLE = """
CREATE TABLE IF NOT EXISTS recruiter_messages (
    id               TEXT PRIMARY KEY,
    candidate_id     TEXT,
    subject          TEXT NOT NULL DEFAULT '',
    open_count       INTEGER NOT NULL DEFAULT 0,
    opened_at        TEXT,
    click_count      INTEGER NOT NULL DEFAULT 0,
    last_clicked_at  TEXT,
    sent_at          TEXT NOT NULL
);
"""

# Counter columns and the timestamp column each one stamps.
COUNTER_FIELDS: dict[str, str] = {
    "open_count": "opened_at",
    "click_count": "last_clicked_at",
}

_TEXT_FIELDS = (
    "full_name",
    "role",
    "headline",
    "bio",
    "professional_summary",
    "university",
    "location",
    "email",
    "avatar_url",
)


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_CANDIDATE_DIRECTORY_TABLE)
    conn.execute(_RECRUITER_MESSAGES_TABLE)
    conn.commit()
    return conn


def upsert_candidate_record(conn: sqlite3.Connection, record: CandidateRecord) -> bool:
    """Insert or replace a directory record.

    Returns True if a new row was inserted, False if an existing one was updated.
    """
    exists = conn.execute(
        "SELECT 1 FROM candidate_directory WHERE id = ?", (record.id,)
    ).fetchone()
    updated_at = record.updated_at or datetime.now()
    conn.execute(
        """
        INSERT OR REPLACE INTO candidate_directory
            (id, full_name, role, headline, bio, professional_summary, university,
             location, skills_json, years_experience, email, avatar_url, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.full_name,
            record.role,
            record.headline,
            record.bio,
            record.professional_summary,
            record.university,
            record.location,
            json.dumps(record.skills),
            record.years_experience,
            record.email,
            record.avatar_url,
            updated_at.isoformat(),
        ),
    )
    conn.commit()
    return exists is None


def list_candidates(conn: sqlite3.Connection) -> list[CandidateRecord]:
    """Return the full directory snapshot, most recently updated first."""
    rows = conn.execute(
        "SELECT * FROM candidate_directory ORDER BY updated_at DESC"
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def _row_to_record(row: sqlite3.Row) -> CandidateRecord:
    data: dict[str, Any] = {field: row[field] for field in _TEXT_FIELDS}
    years = row["years_experience"]
    # REAL columns hand back floats; keep whole years as ints.
    if years is not None and float(years).is_integer():
        years = int(years)
    data.update(
        id=row["id"],
        skills=json.loads(row["skills_json"] or "[]"),
        years_experience=years,
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )
    return CandidateRecord.model_validate(data)


def insert_message(
    conn: sqlite3.Connection,
    message_id: str,
    candidate_id: str | None = None,
    subject: str = "",
    sent_at: datetime | None = None,
) -> None:
    """Record a sent recruiter message so its opens and clicks can be counted."""
    conn.execute(
        """
        INSERT INTO recruiter_messages (id, candidate_id, subject, sent_at)
        VALUES (?, ?, ?, ?)
        """,
        (message_id, candidate_id, subject, (sent_at or datetime.now()).isoformat()),
    )
    conn.commit()


def increment_message_counter(
    conn: sqlite3.Connection,
    message_id: str,
    counter: str,
    at: datetime,
    overwrite_timestamp: bool = True,
) -> bool:
    """Add one to a message counter and stamp its timestamp column.

    With overwrite_timestamp False the timestamp is only set when still empty.
    Returns True if the message exists.
    """
    if counter not in COUNTER_FIELDS:
        msg = f"Unknown counter '{counter}'. Available: {', '.join(sorted(COUNTER_FIELDS))}"
        raise ValueError(msg)
    stamp = COUNTER_FIELDS[counter]
    stamp_expr = "?" if overwrite_timestamp else f"COALESCE({stamp}, ?)"
    cursor = conn.execute(
        f"UPDATE recruiter_messages SET {counter} = {counter} + 1, "
        f"{stamp} = {stamp_expr} WHERE id = ?",
        (at.isoformat(), message_id),
    )
    conn.commit()
    return cursor.rowcount > 0


def get_message_counters(conn: sqlite3.Connection, message_id: str) -> dict[str, Any] | None:
    """Return counters and timestamps for a message, or None if unknown."""
    row = conn.execute(
        """
        SELECT open_count, opened_at, click_count, last_clicked_at
        FROM recruiter_messages WHERE id = ?
        """,
        (message_id,),
    ).fetchone()
    if row is None:
        return None
    return dict(row)
