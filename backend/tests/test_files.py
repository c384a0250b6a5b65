"""File metadata endpoints."""


async def test_create_and_get_file(client, create_user):
    user = await create_user("Ada")

    response = await client.post(
        "/files",
        json={"userId": user["id"], "name": "notes.txt", "size": 42, "type": "text/plain", "openaiFileId": "file_1"},
    )

    assert response.status_code == 201
    created = response.json()
    assert created["openaiFileId"] == "file_1"
    assert created["assistantId"] is None

    fetched = await client.get(f"/files/{created['id']}")
    assert fetched.json() == created


async def test_create_file_validates_input(client):
    assert (await client.post("/files", json={"name": "orphan.txt"})).status_code == 400
    assert (await client.post("/files", json={"userId": "u1", "name": "x", "size": -1})).status_code == 400


async def test_create_file_unknown_assistant(client):
    response = await client.post("/files", json={"userId": "u1", "name": "x.txt", "assistantId": "ghost"})

    assert response.status_code == 400


async def test_list_files_filters(client, create_user, create_assistant):
    ada = await create_user("Ada")
    grace = await create_user("Grace")
    assistant = await create_assistant("Helper")
    await client.post("/files", json={"userId": ada["id"], "name": "a.txt", "assistantId": assistant["id"]})
    await client.post("/files", json={"userId": ada["id"], "name": "b.txt"})
    await client.post("/files", json={"userId": grace["id"], "name": "c.txt"})

    by_user = (await client.get("/files", params={"userId": ada["id"]})).json()
    assert [f["name"] for f in by_user] == ["a.txt", "b.txt"]

    by_assistant = (await client.get("/files", params={"assistantId": assistant["id"]})).json()
    assert [f["name"] for f in by_assistant] == ["a.txt"]

    assert len((await client.get("/files")).json()) == 3


async def test_file_content_and_download(client):
    created = (await client.post("/files", json={"userId": "u1", "name": "notes.txt"})).json()

    content = (await client.get(f"/files/{created['id']}/content")).json()
    assert content == {
        "content": "This is the content of file notes.txt",
        "url": f"https://example.com/files/{created['id']}",
    }

    download = await client.get(f"/files/{created['id']}/download")
    assert download.status_code == 200
    assert download.text == "This is the content of file notes.txt"
    assert download.headers["content-disposition"] == 'attachment; filename="notes.txt"'


async def test_delete_file(client):
    created = (await client.post("/files", json={"userId": "u1", "name": "notes.txt"})).json()

    response = await client.delete(f"/files/{created['id']}")

    assert response.json() == {"message": "File deleted successfully"}
    assert (await client.get(f"/files/{created['id']}")).status_code == 404
    assert (await client.delete(f"/files/{created['id']}")).status_code == 404
