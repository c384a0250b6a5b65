"""Persistence gateway and its two backends."""

import logging

from userlink.config import Settings
from userlink.db.gateway import AnyOf, Collection, DocumentStore, Predicate, Record
from userlink.db.json_store import JsonFileStore
from userlink.db.session import create_engine_from_settings
from userlink.db.sql_store import SqlDocumentStore
from userlink.errors import StorageError

logger = logging.getLogger(__name__)

__all__ = [
    "AnyOf",
    "Collection",
    "DocumentStore",
    "JsonFileStore",
    "Predicate",
    "Record",
    "SqlDocumentStore",
    "open_store",
]


async def open_store(settings: Settings) -> DocumentStore:
    """
    Build and initialise the store selected by ``settings.storage_backend``.

    If the database cannot be reached and ``storage_fallback_to_memory`` is
    set, an in-memory JSON store is returned instead so the app still boots.
    """
    if settings.storage_backend == "json":
        store: DocumentStore = JsonFileStore(settings.json_db_path or None)
        await store.init()
        return store

    store = SqlDocumentStore(
        create_engine_from_settings(settings),
        auto_create=settings.database_auto_create,
    )
    try:
        await store.init()
    except StorageError:
        if not settings.storage_fallback_to_memory:
            raise
        logger.exception("Document database unavailable, falling back to in-memory store")
        await store.close()
        store = JsonFileStore(None)
        await store.init()
    return store
