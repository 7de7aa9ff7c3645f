"""Tests for e-mail open/click tracking."""

import sqlite3
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from jobportal.core.db import init_db, insert_message
from jobportal.tracking.events import (
    NO_CACHE,
    TRACKING_PIXEL,
    MessageCounterStore,
    record_event,
)


@pytest.fixture()
def store(tmp_path: Path) -> MessageCounterStore:
    conn: sqlite3.Connection = init_db(tmp_path / "tracking.db")
    insert_message(conn, "m1", subject="Interview invitation")
    return MessageCounterStore(lambda: conn)


def _failing_store() -> MagicMock:
    store = MagicMock(spec=MessageCounterStore)
    store.increment.side_effect = sqlite3.OperationalError("database is locked")
    return store


def _unopenable_store() -> MessageCounterStore:
    def connect() -> sqlite3.Connection:
        raise sqlite3.OperationalError("unable to open database file")

    return MessageCounterStore(connect)


class TestTrackingPixel:
    def test_pixel_is_43_byte_gif(self) -> None:
        assert TRACKING_PIXEL.startswith(b"GIF89a")
        assert len(TRACKING_PIXEL) == 43


class TestOpenEvent:
    def test_returns_pixel(self, store: MessageCounterStore) -> None:
        resp = record_event(store, "m1", "open")
        assert resp.status == 200
        assert resp.content_type == "image/gif"
        assert resp.body == TRACKING_PIXEL
        assert resp.headers["Cache-Control"] == NO_CACHE

    def test_counts_and_keeps_first_open(self, store: MessageCounterStore) -> None:
        record_event(store, "m1", "open")
        first = store.read_timestamp_fields("m1")
        record_event(store, "m1", "open")
        counters = store.read_timestamp_fields("m1")
        assert first is not None and counters is not None
        assert counters["open_count"] == 2
        assert counters["opened_at"] == first["opened_at"]
        assert counters["click_count"] == 0

    def test_pixel_despite_store_failure(self) -> None:
        resp = record_event(_failing_store(), "m1", "open")
        assert resp.status == 200
        assert resp.content_type == "image/gif"

    def test_pixel_when_database_cannot_be_opened(self) -> None:
        resp = record_event(_unopenable_store(), "m1", "open")
        assert resp.status == 200
        assert resp.body == TRACKING_PIXEL

    def test_unknown_message_still_gets_pixel(self, store: MessageCounterStore) -> None:
        resp = record_event(store, "ghost", "open")
        assert resp.status == 200
        assert store.read_timestamp_fields("ghost") is None


class TestClickEvent:
    def test_redirect_to_decoded_url(self, store: MessageCounterStore) -> None:
        resp = record_event(store, "m1", "click", "https%3A%2F%2Fexample.com")
        assert resp.status == 302
        assert resp.headers["Location"] == "https://example.com"

    def test_counts_click(self, store: MessageCounterStore) -> None:
        record_event(store, "m1", "click")
        record_event(store, "m1", "click", "https://example.com/job/1")
        counters = store.read_timestamp_fields("m1")
        assert counters is not None
        assert counters["click_count"] == 2
        assert counters["last_clicked_at"] is not None
        assert counters["open_count"] == 0

    def test_plain_ack_without_url(self, store: MessageCounterStore) -> None:
        resp = record_event(store, "m1", "click")
        assert resp.status == 200
        assert resp.body == b"Click tracked"

    def test_redirect_despite_store_failure(self) -> None:
        resp = record_event(_failing_store(), "m1", "click", "https://example.com")
        assert resp.status == 302
        assert resp.headers["Location"] == "https://example.com"

    def test_redirect_when_database_cannot_be_opened(self) -> None:
        resp = record_event(_unopenable_store(), "m1", "click", "https%3A%2F%2Fexample.com")
        assert resp.status == 302
        assert resp.headers["Location"] == "https://example.com"


class TestBadRequests:
    @pytest.mark.parametrize(("message_id", "kind"), [(None, "open"), ("", "open"), ("m1", None)])
    def test_missing_parameters(self, message_id: str | None, kind: str | None) -> None:
        store = MagicMock(spec=MessageCounterStore)
        resp = record_event(store, message_id, kind)
        assert resp.status == 400
        assert resp.body == b"Missing parameters"
        store.increment.assert_not_called()

    def test_unknown_event(self) -> None:
        store = MagicMock(spec=MessageCounterStore)
        resp = record_event(store, "m1", "bounce")
        assert resp.status == 400
        assert resp.body == b"Unknown event type"
        store.increment.assert_not_called()
