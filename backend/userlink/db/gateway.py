"""
Persistence gateway shared by every backend.

Services only talk to a DocumentStore. Records are plain dicts keyed by a
caller-assigned string ``id``; predicates are backend-neutral mappings:

    {"userId": user_id}                        # equality (str, int, float, bool)
    {"threadId": AnyOf(["t1", "thread_abc"])}  # membership
    {"assistantId": None}                      # null or missing

Multiple keys are AND-combined and an empty predicate matches every record.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

Record = dict[str, Any]
Predicate = Mapping[str, Any]


class Collection(str, Enum):
    """Collections held by every store."""

    USERS = "users"
    ASSISTANTS = "assistants"
    CHAT_THREADS = "chat_threads"
    MESSAGES = "messages"
    FILES = "files"


class AnyOf:
    """Predicate value matching a field against a set of candidates."""

    __slots__ = ("values",)

    def __init__(self, values: Iterable[str]):
        self.values = frozenset(values)

    def __repr__(self) -> str:
        return f"AnyOf({sorted(self.values)!r})"

    def __contains__(self, value: object) -> bool:
        return value in self.values


def matches(record: Mapping[str, Any], predicate: Predicate) -> bool:
    """Evaluate a predicate against a record held in memory."""
    for field, expected in predicate.items():
        actual = record.get(field)
        if isinstance(expected, AnyOf):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class DocumentStore(ABC):
    """Record-oriented storage interface implemented by each backend."""

    async def init(self) -> None:
        """Prepare the backing store. Safe to call more than once."""

    async def close(self) -> None:
        """Release any held resources."""

    @abstractmethod
    async def insert(self, collection: Collection, record: Record) -> Record:
        """Store a new record. ``record["id"]`` must be set and unused."""

    @abstractmethod
    async def find_one(self, collection: Collection, predicate: Predicate) -> Record | None:
        """Return the first matching record, or None."""

    @abstractmethod
    async def find_many(self, collection: Collection, predicate: Predicate) -> list[Record]:
        """Return every matching record in insertion order."""

    @abstractmethod
    async def update_one(
        self, collection: Collection, predicate: Predicate, patch: Mapping[str, Any]
    ) -> Record | None:
        """Shallow-merge ``patch`` into the first match and return it, or None."""

    @abstractmethod
    async def remove_many(self, collection: Collection, predicate: Predicate) -> int:
        """Delete every matching record and return how many were removed."""
