"""Helpers shared by the entity services."""

from collections.abc import Iterable
from datetime import datetime, timezone
from uuid import uuid4

from userlink.db import AnyOf, Record


def new_id() -> str:
    return str(uuid4())


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string, the format stored on every record."""
    return datetime.now(timezone.utc).isoformat()


def _created_at(record: Record) -> datetime:
    value = record.get("createdAt")
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_by_created(records: Iterable[Record]) -> list[Record]:
    """Oldest first; records without createdAt sort to the front."""
    return sorted(records, key=_created_at)


class ThreadKeySet:
    """
    Thread-affiliation keys a message may be filed under.

    A conversation can be addressed by its local chat thread id or by the
    provider-side thread id, and messages exist under both. Queries take a key
    set rather than a single id so that every alias is matched.
    """

    def __init__(self, keys: Iterable[str | None] = ()):
        self._keys: set[str] = set()
        for key in keys:
            self.add(key)

    @classmethod
    def for_chat_threads(cls, threads: Iterable[Record]) -> "ThreadKeySet":
        """Local and external keys of every given chat thread."""
        key_set = cls()
        for thread in threads:
            key_set.add(thread.get("id"))
            key_set.add(thread.get("openaiThreadId"))
        return key_set

    def add(self, key: str | None) -> None:
        if key:
            self._keys.add(key)

    def as_predicate(self) -> dict[str, AnyOf]:
        """Message predicate matching any key in the set."""
        return {"threadId": AnyOf(self._keys)}

    def __len__(self) -> int:
        return len(self._keys)
