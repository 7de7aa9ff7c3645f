"""E-mail open/click tracking: counter bookkeeping plus pixel or redirect responses.

Counting is best-effort. A failing store never prevents the pixel or the
redirect from being returned, so e-mail rendering and links keep working.
"""

import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from typing import Any
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field

from jobportal.core.db import get_message_counters, increment_message_counter

logger = logging.getLogger(__name__)

# 1x1 transparent GIF.
TRACKING_PIXEL = bytes([
    0x47, 0x49, 0x46, 0x38, 0x39, 0x61, 0x01, 0x00, 0x01, 0x00, 0x80, 0x00,
    0x00, 0xFF, 0xFF, 0xFF, 0x00, 0x00, 0x00, 0x21, 0xF9, 0x04, 0x01, 0x00,
    0x00, 0x00, 0x00, 0x2C, 0x00, 0x00, 0x00, 0x00, 0x01, 0x00, 0x01, 0x00,
    0x00, 0x02, 0x02, 0x44, 0x01, 0x00, 0x3B,
])

NO_CACHE = "no-store, no-cache, must-revalidate, private"

EVENT_OPEN = "open"
EVENT_CLICK = "click"


class TrackingResponse(BaseModel):
    """Framework-neutral HTTP response for a tracking request."""

    model_config = ConfigDict(frozen=True)

    status: int
    body: bytes = b""
    content_type: str = "text/plain"
    headers: dict[str, str] = Field(default_factory=dict)


class MessageCounterStore:
    """Open/click counters for recruiter messages, kept in SQLite.

    The connection is opened on first use through `connect`, so a database
    that cannot be opened fails inside the counting call rather than before
    the response is built. Increments are single UPDATE statements, so
    concurrent events do not overwrite each other's counts.
    """

    def __init__(self, connect: Callable[[], sqlite3.Connection]) -> None:
        self._connect = connect
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = self._connect()
        return self._conn

    def increment(
        self,
        message_id: str,
        counter: str,
        overwrite_timestamp: bool = True,
        at: datetime | None = None,
    ) -> bool:
        """Add one to `counter` and stamp its timestamp. False if the message is unknown."""
        return increment_message_counter(
            self._connection(), message_id, counter, at or datetime.now(), overwrite_timestamp,
        )

    def read_timestamp_fields(self, message_id: str) -> dict[str, Any] | None:
        """Counters with their opened_at/last_clicked_at stamps, or None if unknown."""
        return get_message_counters(self._connection(), message_id)


def pixel_response() -> TrackingResponse:
    return TrackingResponse(
        status=200,
        body=TRACKING_PIXEL,
        content_type="image/gif",
        headers={"Cache-Control": NO_CACHE},
    )


def _count(store: MessageCounterStore, message_id: str, counter: str, overwrite: bool) -> None:
    try:
        found = store.increment(message_id, counter, overwrite_timestamp=overwrite)
    except Exception:
        logger.warning(
            "Failed to record %s for message %s", counter, message_id, exc_info=True,
        )
        return
    if not found:
        logger.info("No recruiter message with id %s; %s not recorded", message_id, counter)


def record_event(
    store: MessageCounterStore,
    message_id: str | None,
    kind: str | None,
    redirect_target: str | None = None,
) -> TrackingResponse:
    """Count an open or click for a message and build the response for the mail client.

    Args:
        store: Counter store for recruiter messages.
        message_id: Recruiter message identifier (required).
        kind: "open" or "click" (required).
        redirect_target: URL-encoded link target for clicks.

    Returns:
        open: 200 tracking pixel. click: 302 to the decoded target, or 200 text.
        Missing parameters or an unknown kind: 400.
    """
    if not message_id or not kind:
        logger.error("Missing required parameters: id=%r event=%r", message_id, kind)
        return TrackingResponse(status=400, body=b"Missing parameters")

    logger.info("Tracking %s event for message: %s", kind, message_id)

    if kind == EVENT_OPEN:
        _count(store, message_id, "open_count", overwrite=False)
        return pixel_response()

    if kind == EVENT_CLICK:
        _count(store, message_id, "click_count", overwrite=True)
        if redirect_target:
            return TrackingResponse(status=302, headers={"Location": unquote(redirect_target)})
        return TrackingResponse(status=200, body=b"Click tracked")

    return TrackingResponse(status=400, body=b"Unknown event type")
