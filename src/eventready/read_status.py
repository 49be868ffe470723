"""Tenant-scoped SMS thread read-status tracking over a key-value store."""

import json
import logging
from datetime import datetime, timezone
from typing import Iterable

from .core.messages import SmsMessage, UnreadThread, find_unread_threads, normalize_phone
from .ports import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "sms_thread_read_status"
INIT_KEY = "sms_feature_initialized_at"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ThreadReadTracker:
    """
    Remembers when each SMS thread was last read, per tenant.

    Read status maps normalized phone numbers to ISO timestamps. Messages
    received before the tracker was first used never count as unread.
    """

    def __init__(self, store: KeyValueStore, tenant_id: str = ""):
        self.store = store
        self.tenant_id = tenant_id

    @property
    def status_key(self) -> str:
        return f"{STORAGE_KEY}_{self.tenant_id}" if self.tenant_id else STORAGE_KEY

    @property
    def init_key(self) -> str:
        return f"{INIT_KEY}_{self.tenant_id}" if self.tenant_id else INIT_KEY

    def initialized_at(self) -> str:
        """When tracking started for this tenant. Set to now on first call."""
        stored = self.store.get(self.init_key)
        if stored:
            return stored
        now = _now()
        self.store.set(self.init_key, now)
        return now

    def read_status(self) -> dict[str, str]:
        raw = self.store.get(self.status_key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding corrupt read status for tenant {self.tenant_id!r}")
            return {}
        return data if isinstance(data, dict) else {}

    def mark_read(self, phone_number: str, at: str | None = None) -> None:
        status = self.read_status()
        status[normalize_phone(phone_number)] = at or _now()
        self.store.set(self.status_key, json.dumps(status))

    def clear(self) -> None:
        """Forget all read status for this tenant."""
        self.store.delete(self.status_key)

    def unread_threads(self, messages: Iterable[SmsMessage]) -> list[UnreadThread]:
        return find_unread_threads(messages, self.read_status(), self.initialized_at())

    def unread_count(self, messages: Iterable[SmsMessage]) -> int:
        return sum(t.unread_count for t in self.unread_threads(messages))

    def is_thread_unread(self, phone_number: str, messages: Iterable[SmsMessage]) -> bool:
        normalized = normalize_phone(phone_number)
        return any(t.normalized_phone == normalized for t in self.unread_threads(messages))
