"""Chat thread CRUD and thread-scoped messages."""

from userlink.db import Collection


async def test_create_chat_thread_defaults_to_anonymous(client):
    response = await client.post("/chat_threads", json={"name": "Scratch"})

    assert response.status_code == 201
    body = response.json()
    assert body["userId"] == "anonymous"
    assert body["members"] == ["anonymous"]


async def test_create_chat_thread_requires_name(client):
    response = await client.post("/chat_threads", json={"userId": "u1"})

    assert response.status_code == 400


async def test_list_chat_threads_by_user(client, create_user):
    user = await create_user("Ada")
    mine = (await client.post("/chat_threads", json={"name": "Mine", "userId": user["id"]})).json()
    await client.post("/chat_threads", json={"name": "Someone else's"})

    listed = (await client.get("/chat_threads", params={"userId": user["id"]})).json()

    assert [t["id"] for t in listed] == [mine["id"]]
    assert len((await client.get("/chat_threads")).json()) == 2


async def test_update_chat_thread(client):
    thread = (await client.post("/chat_threads", json={"name": "Scratch", "description": "old"})).json()

    response = await client.patch(f"/chat_threads/{thread['id']}", json={"name": "Renamed"})

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["description"] == "old"


async def test_get_missing_chat_thread(client):
    response = await client.get("/chat_threads/missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Chat thread not found"}


async def test_thread_messages_round_trip(client):
    thread = (await client.post("/chat_threads", json={"name": "Scratch", "userId": "u1"})).json()

    first = await client.post(f"/chat_threads/{thread['id']}/messages", json={"content": "one"})
    second = await client.post(f"/chat_threads/{thread['id']}/messages", json={"text": "two", "role": "assistant"})

    assert first.status_code == 201
    assert first.json()["userId"] == "anonymous"
    assert second.json()["role"] == "assistant"

    listed = (await client.get(f"/chat_threads/{thread['id']}/messages")).json()
    assert [m["content"] for m in listed] == ["one", "two"]


async def test_thread_messages_require_existing_thread(client):
    assert (await client.get("/chat_threads/missing/messages")).status_code == 404
    response = await client.post("/chat_threads/missing/messages", json={"content": "hello"})
    assert response.status_code == 404


async def test_delete_chat_thread_removes_messages_under_both_keys(client, store):
    thread = (
        await client.post("/chat_threads", json={"name": "Scratch", "openaiThreadId": "thread_ext"})
    ).json()
    await client.post("/messages", json={"threadId": thread["id"], "content": "local"})
    await client.post("/messages", json={"threadId": "thread_ext", "content": "external"})
    await client.post("/messages", json={"threadId": "unrelated", "content": "kept"})

    response = await client.delete(f"/chat_threads/{thread['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Chat thread deleted successfully"}
    remaining = await store.find_many(Collection.MESSAGES, {})
    assert [m["content"] for m in remaining] == ["kept"]


async def test_delete_chat_thread_keeps_live_assistant_thread(client, store, create_user, create_assistant):
    user = await create_user("Ada")
    assistant = await create_assistant("Helper", owner_id=user["id"])
    await client.post("/messages", json={"threadId": assistant["threadId"], "content": "assistant history"})
    thread = (await client.get("/chat_threads", params={"userId": user["id"]})).json()[0]

    await client.delete(f"/chat_threads/{thread['id']}")

    remaining = await store.find_many(Collection.MESSAGES, {"threadId": assistant["threadId"]})
    assert [m["content"] for m in remaining] == ["assistant history"]


async def test_thread_messages_include_provider_thread_key(client):
    thread = (
        await client.post("/chat_threads", json={"name": "Scratch", "openaiThreadId": "thread_ext"})
    ).json()
    await client.post(f"/chat_threads/{thread['id']}/messages", json={"content": "local"})
    await client.post("/messages/thread/thread_ext", json={"content": "external"})
    await client.post("/messages/thread/unrelated", json={"content": "elsewhere"})

    listed = (await client.get(f"/chat_threads/{thread['id']}/messages")).json()

    assert [m["content"] for m in listed] == ["local", "external"]
