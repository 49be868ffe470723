"""Tests for SMS unread-thread logic and read-status tracking."""

import json

import pytest

from eventready.adapters.file_store import FileKeyValueStore, InMemoryKeyValueStore
from eventready.core.messages import SmsMessage, find_unread_threads, normalize_phone
from eventready.read_status import ThreadReadTracker

INIT = "2025-11-01T00:00:00.000Z"


def inbound(msg_id, phone, when):
    return SmsMessage(id=msg_id, direction="inbound", communication_date=when, from_number=phone)


@pytest.fixture
def messages():
    return [
        inbound("1", "+1 (555) 123-4567", "2025-11-02T10:00:00.000Z"),
        inbound("2", "555-123-4567", "2025-11-03T10:00:00.000Z"),
        inbound("3", "+1 555 999 0000", "2025-11-02T12:00:00.000Z"),
        inbound("old", "555-999-0000", "2025-10-30T12:00:00.000Z"),
        SmsMessage(id="4", direction="outbound", communication_date="2025-11-04T00:00:00.000Z", from_number="5551234567"),
        inbound("5", None, "2025-11-04T00:00:00.000Z"),
    ]


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "raw", ["+1 (555) 123-4567", "555-123-4567", "15551234567", "(555)1234567"]
    )
    def test_normalizes_to_last_ten(self, raw):
        assert normalize_phone(raw) == "5551234567"

    def test_short_numbers_kept(self):
        assert normalize_phone("12-34") == "1234"


class TestSmsMessage:
    def test_from_record(self):
        msg = SmsMessage.from_record(
            {
                "id": 9,
                "direction": "inbound",
                "communication_date": "2025-11-02T10:00:00Z",
                "metadata": {"from_number": "+15551234567"},
            }
        )
        assert msg.id == "9"
        assert msg.is_inbound
        assert msg.from_number == "+15551234567"

    def test_from_record_without_metadata(self):
        assert SmsMessage.from_record({"id": 1, "direction": "outbound"}).from_number is None


class TestFindUnreadThreads:
    def test_groups_inbound_by_sender(self, messages):
        threads = {t.normalized_phone: t for t in find_unread_threads(messages, {}, INIT)}

        assert set(threads) == {"5551234567", "5559990000"}
        assert threads["5551234567"].unread_count == 2
        assert threads["5551234567"].last_message_date == "2025-11-03T10:00:00.000Z"
        assert threads["5551234567"].phone_number == "+1 (555) 123-4567"
        assert threads["5559990000"].unread_count == 1

    def test_no_initialization_means_nothing_unread(self, messages):
        assert find_unread_threads(messages, {}, None) == []

    def test_messages_before_initialization_ignored(self, messages):
        threads = find_unread_threads(messages, {}, "2025-11-02T11:00:00.000Z")
        counts = {t.normalized_phone: t.unread_count for t in threads}
        assert counts == {"5551234567": 1, "5559990000": 1}

    def test_read_status_hides_older_messages(self, messages):
        read = {"5551234567": "2025-11-02T23:00:00.000Z", "5559990000": "2025-11-05T00:00:00.000Z"}
        threads = find_unread_threads(messages, read, INIT)
        assert [(t.normalized_phone, t.unread_count) for t in threads] == [("5551234567", 1)]


class TestThreadReadTracker:
    @pytest.fixture
    def store(self):
        return InMemoryKeyValueStore({"sms_feature_initialized_at_t1": INIT})

    @pytest.fixture
    def tracker(self, store):
        return ThreadReadTracker(store, tenant_id="t1")

    def test_tenant_scoped_keys(self, tracker):
        assert tracker.status_key == "sms_thread_read_status_t1"
        assert tracker.init_key == "sms_feature_initialized_at_t1"

    def test_unscoped_keys_without_tenant(self):
        tracker = ThreadReadTracker(InMemoryKeyValueStore())
        assert tracker.status_key == "sms_thread_read_status"

    def test_initialized_at_set_once(self):
        store = InMemoryKeyValueStore()
        tracker = ThreadReadTracker(store, "t2")

        first = tracker.initialized_at()

        assert first.endswith("Z")
        assert store.get("sms_feature_initialized_at_t2") == first
        assert tracker.initialized_at() == first

    def test_first_use_has_no_unread(self, messages):
        tracker = ThreadReadTracker(InMemoryKeyValueStore(), "fresh")
        assert tracker.unread_threads(messages) == []

    def test_unread_count(self, tracker, messages):
        assert tracker.unread_count(messages) == 3

    def test_mark_read(self, tracker, store, messages):
        tracker.mark_read("(555) 123-4567", at="2025-11-10T00:00:00.000Z")

        assert tracker.read_status() == {"5551234567": "2025-11-10T00:00:00.000Z"}
        assert not tracker.is_thread_unread("+15551234567", messages)
        assert tracker.is_thread_unread("555-999-0000", messages)
        assert json.loads(store.get("sms_thread_read_status_t1")) == tracker.read_status()

    def test_mark_read_defaults_to_now(self, tracker, messages):
        tracker.mark_read("555-999-0000")
        assert not tracker.is_thread_unread("555-999-0000", messages)

    def test_clear(self, tracker, messages):
        tracker.mark_read("555-123-4567", at="2025-12-01T00:00:00.000Z")
        tracker.clear()
        assert tracker.read_status() == {}
        assert tracker.is_thread_unread("555-123-4567", messages)

    def test_tenants_are_isolated(self, store):
        ThreadReadTracker(store, "t1").mark_read("5551234567", at=INIT)
        assert ThreadReadTracker(store, "t2").read_status() == {}

    def test_corrupt_status_treated_as_empty(self, store, caplog):
        store.set("sms_thread_read_status_t1", "{not json")
        assert ThreadReadTracker(store, "t1").read_status() == {}
        assert "corrupt" in caplog.text


class TestFileKeyValueStore:
    def test_roundtrip_persists(self, tmp_path):
        path = tmp_path / "state" / "state.json"
        FileKeyValueStore(path).set("a", "1")
        assert FileKeyValueStore(path).get("a") == "1"

    def test_missing_key(self, tmp_path):
        assert FileKeyValueStore(tmp_path / "s.json").get("nope") is None

    def test_delete(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "s.json")
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        store.delete("missing")
        assert store.get("a") is None
        assert store.get("b") == "2"

    def test_unreadable_file_is_empty(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("garbage")
        store = FileKeyValueStore(path)
        assert store.get("a") is None
        store.set("a", "1")
        assert store.get("a") == "1"

    def test_tracker_over_file_store(self, tmp_path, messages):
        path = tmp_path / "s.json"
        store = FileKeyValueStore(path)
        store.set("sms_feature_initialized_at_t1", INIT)
        ThreadReadTracker(store, "t1").mark_read("555-123-4567", at="2025-12-01T00:00:00.000Z")

        reloaded = ThreadReadTracker(FileKeyValueStore(path), "t1")
        assert not reloaded.is_thread_unread("5551234567", messages)
