"""Document store behaviour shared by the JSON and database backends."""

import json

import pytest

from userlink.config import Settings
from userlink.db import AnyOf, Collection, JsonFileStore, SqlDocumentStore, open_store
from userlink.db.session import create_engine_for
from userlink.errors import StorageError


@pytest.fixture(params=["memory", "json_file", "sqlite"])
async def doc_store(request, tmp_path):
    if request.param == "memory":
        store = JsonFileStore(None)
    elif request.param == "json_file":
        store = JsonFileStore(tmp_path / "db.json")
    else:
        engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}")
        store = SqlDocumentStore(engine)
    await store.init()
    yield store
    await store.close()


async def _seed_messages(store):
    await store.insert(Collection.MESSAGES, {"id": "m1", "threadId": "t1", "userId": "u1", "content": "a"})
    await store.insert(Collection.MESSAGES, {"id": "m2", "threadId": "thread_x", "userId": None, "content": "b"})
    await store.insert(Collection.MESSAGES, {"id": "m3", "threadId": "t2", "userId": "u2", "content": "c"})


async def test_insert_and_find_one(doc_store):
    record = {"id": "u1", "name": "Ada", "assistantId": None}
    assert await doc_store.insert(Collection.USERS, record) == record

    assert await doc_store.find_one(Collection.USERS, {"id": "u1"}) == record
    assert await doc_store.find_one(Collection.USERS, {"name": "Ada"}) == record
    assert await doc_store.find_one(Collection.USERS, {"id": "missing"}) is None


async def test_insert_duplicate_id_fails(doc_store):
    await doc_store.insert(Collection.USERS, {"id": "u1", "name": "Ada"})
    with pytest.raises(StorageError):
        await doc_store.insert(Collection.USERS, {"id": "u1", "name": "Grace"})


async def test_same_id_allowed_in_different_collections(doc_store):
    await doc_store.insert(Collection.USERS, {"id": "x"})
    await doc_store.insert(Collection.FILES, {"id": "x", "userId": "u1"})

    assert await doc_store.find_one(Collection.FILES, {"id": "x"}) == {"id": "x", "userId": "u1"}


async def test_find_many_preserves_insertion_order(doc_store):
    await _seed_messages(doc_store)

    everything = await doc_store.find_many(Collection.MESSAGES, {})
    assert [m["id"] for m in everything] == ["m1", "m2", "m3"]


async def test_find_many_any_of(doc_store):
    await _seed_messages(doc_store)

    found = await doc_store.find_many(Collection.MESSAGES, {"threadId": AnyOf(["t1", "thread_x"])})
    assert [m["id"] for m in found] == ["m1", "m2"]
    assert await doc_store.find_many(Collection.MESSAGES, {"threadId": AnyOf([])}) == []


async def test_find_many_null_matches_missing_and_null(doc_store):
    await _seed_messages(doc_store)
    await doc_store.insert(Collection.MESSAGES, {"id": "m4", "threadId": "t3", "content": "d"})

    found = await doc_store.find_many(Collection.MESSAGES, {"userId": None})
    assert [m["id"] for m in found] == ["m2", "m4"]


async def test_predicate_keys_are_and_combined(doc_store):
    await _seed_messages(doc_store)

    found = await doc_store.find_many(Collection.MESSAGES, {"threadId": "t1", "userId": "u2"})
    assert found == []


async def test_find_many_compares_typed_values(doc_store):
    await doc_store.insert(Collection.FILES, {"id": "f1", "size": 3, "ratio": 0.5, "public": True})
    await doc_store.insert(Collection.FILES, {"id": "f2", "size": 10, "ratio": 1.5, "public": False})

    assert [f["id"] for f in await doc_store.find_many(Collection.FILES, {"size": 10})] == ["f2"]
    assert [f["id"] for f in await doc_store.find_many(Collection.FILES, {"ratio": 0.5})] == ["f1"]
    assert [f["id"] for f in await doc_store.find_many(Collection.FILES, {"public": False})] == ["f2"]
    assert [f["id"] for f in await doc_store.find_many(Collection.FILES, {"public": True, "size": 3})] == ["f1"]
    assert await doc_store.find_many(Collection.FILES, {"size": 4}) == []


async def test_update_one_merges_patch(doc_store):
    await doc_store.insert(Collection.USERS, {"id": "u1", "name": "Ada", "assistantId": "a1"})

    updated = await doc_store.update_one(Collection.USERS, {"id": "u1"}, {"assistantId": None, "id": "hijack"})

    assert updated == {"id": "u1", "name": "Ada", "assistantId": None}
    assert await doc_store.find_one(Collection.USERS, {"id": "u1"}) == updated


async def test_update_one_without_match_returns_none(doc_store):
    assert await doc_store.update_one(Collection.USERS, {"id": "nope"}, {"name": "x"}) is None


async def test_remove_many_returns_count(doc_store):
    await _seed_messages(doc_store)

    removed = await doc_store.remove_many(Collection.MESSAGES, {"threadId": AnyOf(["t1", "t2"])})

    assert removed == 2
    remaining = await doc_store.find_many(Collection.MESSAGES, {})
    assert [m["id"] for m in remaining] == ["m2"]
    assert await doc_store.remove_many(Collection.MESSAGES, {"threadId": "t1"}) == 0


async def test_returned_records_are_copies(doc_store):
    await doc_store.insert(Collection.ASSISTANTS, {"id": "a1", "tools": [{"type": "code_interpreter"}]})

    found = await doc_store.find_one(Collection.ASSISTANTS, {"id": "a1"})
    found["tools"].append({"type": "retrieval"})

    again = await doc_store.find_one(Collection.ASSISTANTS, {"id": "a1"})
    assert again["tools"] == [{"type": "code_interpreter"}]


async def test_json_file_store_persists_lowdb_layout(tmp_path):
    path = tmp_path / "db.json"
    store = JsonFileStore(path)
    await store.init()
    await store.insert(Collection.USERS, {"id": "u1", "name": "Ada"})

    on_disk = json.loads(path.read_text())
    assert set(on_disk) == {"users", "assistants", "chat_threads", "messages", "files"}
    assert on_disk["users"] == [{"id": "u1", "name": "Ada"}]

    reopened = JsonFileStore(path)
    await reopened.init()
    assert await reopened.find_one(Collection.USERS, {"id": "u1"}) == {"id": "u1", "name": "Ada"}


async def test_json_file_store_rejects_corrupt_file(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("{not json")

    with pytest.raises(StorageError):
        await JsonFileStore(path).init()


async def test_open_store_falls_back_to_memory(tmp_path):
    settings = Settings(
        jwt_secret_key="x",
        storage_backend="database",
        database_url_override=f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'documents.db'}",
    )

    store = await open_store(settings)

    assert isinstance(store, JsonFileStore)
    assert store.path is None
    await store.close()


async def test_open_store_without_fallback_raises(tmp_path):
    settings = Settings(
        jwt_secret_key="x",
        storage_backend="database",
        storage_fallback_to_memory=False,
        database_url_override=f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'documents.db'}",
    )

    with pytest.raises(StorageError):
        await open_store(settings)


async def test_open_store_json_backend(tmp_path):
    settings = Settings(jwt_secret_key="x", storage_backend="json", json_db_path=str(tmp_path / "db.json"))

    store = await open_store(settings)

    assert isinstance(store, JsonFileStore)
    assert (tmp_path / "db.json").exists()
