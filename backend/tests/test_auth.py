"""Registration, login and token-protected profile."""

from userlink.security import create_access_token, hash_password, verify_password


def test_password_hashing():
    hashed = hash_password("s3cret")

    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret", None)


async def test_register_returns_token(client):
    response = await client.post(
        "/auth/register",
        json={"username": "ada", "email": "ada@userlink.io", "password": "s3cret"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["tokenType"] == "bearer"
    assert body["user"]["name"] == "ada"
    assert "password" not in body["user"]


async def test_register_duplicate_email(client):
    payload = {"username": "ada", "email": "ada@userlink.io", "password": "s3cret"}
    await client.post("/auth/register", json=payload)

    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "User already exists"}


async def test_register_rejects_invalid_email(client):
    response = await client.post(
        "/auth/register",
        json={"username": "ada", "email": "not-an-email", "password": "s3cret"},
    )

    assert response.status_code == 400


async def test_login_and_me(client):
    await client.post(
        "/auth/register",
        json={"username": "ada", "email": "ada@userlink.io", "password": "s3cret"},
    )

    login = await client.post("/auth/login", json={"email": "ada@userlink.io", "password": "s3cret"})
    assert login.status_code == 200
    token = login.json()["token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ada@userlink.io"


async def test_login_wrong_password(client):
    await client.post(
        "/auth/register",
        json={"username": "ada", "email": "ada@userlink.io", "password": "s3cret"},
    )

    response = await client.post("/auth/login", json={"email": "ada@userlink.io", "password": "nope"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid credentials"}


async def test_login_user_without_password(client, create_user):
    await create_user("Ada")

    response = await client.post("/auth/login", json={"email": "ada@userlink.io", "password": "anything"})

    assert response.status_code == 400


async def test_me_requires_token(client):
    response = await client.get("/auth/me")

    assert response.status_code == 401
    assert response.json() == {"detail": "Access denied. No token provided."}


async def test_me_rejects_bad_token(client):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401


async def test_me_after_user_deleted(client, create_user):
    user = await create_user("Ada")
    token = create_access_token(user["id"], user["email"])
    await client.delete(f"/users/{user['id']}")

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
