"""Pure SMS unread-thread logic - no I/O dependencies."""

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

_PHONE_NOISE = re.compile(r"[\s\-()+]")


@dataclass(frozen=True)
class SmsMessage:
    """One SMS communication row."""

    id: str
    direction: str
    communication_date: str
    from_number: str | None = None

    @property
    def is_inbound(self) -> bool:
        return self.direction == "inbound"

    @classmethod
    def from_record(cls, data: Mapping) -> "SmsMessage":
        metadata = data.get("metadata") or {}
        return cls(
            id=str(data.get("id", "")),
            direction=data.get("direction") or "",
            communication_date=data.get("communication_date") or "",
            from_number=metadata.get("from_number"),
        )


@dataclass
class UnreadThread:
    phone_number: str
    normalized_phone: str
    unread_count: int
    last_message_date: str


def normalize_phone(phone: str) -> str:
    """Strip formatting and keep the last 10 digits."""
    return _PHONE_NOISE.sub("", phone)[-10:]


def find_unread_threads(
    messages: Iterable[SmsMessage],
    read_status: Mapping[str, str],
    initialized_at: str | None,
) -> list[UnreadThread]:
    """
    Group unread inbound messages into threads by sender.

    Only messages newer than ``initialized_at`` can be unread. A message is
    unread when its thread has never been read or it arrived after the
    thread's last-read timestamp. Timestamps are ISO-8601 strings and are
    compared as strings.
    """
    if not initialized_at:
        return []

    threads: dict[str, tuple[str, list[SmsMessage]]] = {}
    for msg in messages:
        if not msg.is_inbound or msg.communication_date <= initialized_at:
            continue
        if not msg.from_number:
            continue
        normalized = normalize_phone(msg.from_number)
        threads.setdefault(normalized, (msg.from_number, []))[1].append(msg)

    unread = []
    for normalized, (phone_number, thread_messages) in threads.items():
        last_read_at = read_status.get(normalized)
        if last_read_at:
            thread_messages = [m for m in thread_messages if m.communication_date > last_read_at]
        if not thread_messages:
            continue
        unread.append(
            UnreadThread(
                phone_number=phone_number,
                normalized_phone=normalized,
                unread_count=len(thread_messages),
                last_message_date=max(m.communication_date for m in thread_messages),
            )
        )

    return unread
