"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("MOCK_REPLY_DELAY_SECONDS", "0")
os.environ.setdefault("ENVIRONMENT", "development")

import itertools
from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from userlink.api.deps import get_relay, get_remote_client, get_store
from userlink.db import JsonFileStore
from userlink.errors import UpstreamError
from userlink.main import app
from userlink.services import MessageRelay, RemoteAssistantClient


class FakeRemoteClient(RemoteAssistantClient):
    """In-process stand-in for the provider. Records every call; failures are switchable."""

    def __init__(self):
        self.calls: list[tuple[str, Any]] = []
        self.fail_create_assistant = False
        self.fail_update_assistant = False
        self.fail_delete_assistant = False
        self.fail_create_thread = False
        self.fail_delete_thread = False
        self._ids = itertools.count(1)

    def calls_to(self, name: str) -> list[Any]:
        return [arg for call, arg in self.calls if call == name]

    async def create_assistant(self, config: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create_assistant", config))
        if self.fail_create_assistant:
            raise UpstreamError("Error creating assistant: provider unavailable")
        return {"id": f"asst_{next(self._ids)}"}

    async def update_assistant(self, assistant_id: str, config: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update_assistant", (assistant_id, config)))
        if self.fail_update_assistant:
            raise UpstreamError("Error updating assistant: provider unavailable")
        return {"id": assistant_id}

    async def delete_assistant(self, assistant_id: str) -> None:
        self.calls.append(("delete_assistant", assistant_id))
        if self.fail_delete_assistant:
            raise UpstreamError("Error deleting assistant: provider unavailable")

    async def create_thread(self) -> dict[str, Any]:
        self.calls.append(("create_thread", None))
        if self.fail_create_thread:
            raise UpstreamError("Error creating thread: provider unavailable")
        return {"id": f"thread_{next(self._ids)}"}

    async def delete_thread(self, thread_id: str) -> None:
        self.calls.append(("delete_thread", thread_id))
        if self.fail_delete_thread:
            raise UpstreamError("Error deleting thread: provider unavailable")


@pytest.fixture
async def store() -> AsyncGenerator[JsonFileStore, None]:
    """Fresh in-memory document store."""
    store = JsonFileStore(None)
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def remote() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture
def relay() -> MessageRelay:
    return MessageRelay()


@pytest.fixture
async def client(store, remote, relay) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_remote_client] = lambda: remote
    app.dependency_overrides[get_relay] = lambda: relay
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test/api",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(client):
    """Factory creating a user through the API."""

    async def _create(name: str = "Ada", email: str | None = None, **extra) -> dict:
        payload = {"name": name, "email": email or f"{name.lower()}@userlink.io", **extra}
        response = await client.post("/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_assistant(client):
    """Factory provisioning an assistant through the API."""

    async def _create(name: str = "Helper", owner_id: str | None = None, **extra) -> dict:
        payload = {"name": name, "instructions": "Be helpful.", **extra}
        if owner_id:
            payload["ownerUserId"] = owner_id
        response = await client.post("/assistants", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
