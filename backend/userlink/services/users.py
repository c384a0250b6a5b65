"""User management."""

import logging

from userlink.db import Collection, DocumentStore, Record
from userlink.errors import InputValidationError, NotFoundError
from userlink.schemas.user import UserCreate, UserUpdate
from userlink.security import hash_password
from userlink.services.cascade import CascadeEngine
from userlink.services.common import new_id, utc_now

logger = logging.getLogger(__name__)


class UserService:
    """CRUD for users; deletion goes through the cascade engine."""

    def __init__(self, store: DocumentStore, cascade: CascadeEngine):
        self.store = store
        self.cascade = cascade

    async def get(self, user_id: str) -> Record:
        user = await self.store.find_one(Collection.USERS, {"id": user_id})
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> list[Record]:
        return await self.store.find_many(Collection.USERS, {})

    async def find_by_email(self, email: str) -> Record | None:
        return await self.store.find_one(Collection.USERS, {"email": email})

    async def _ensure_email_free(self, email: str | None, *, current_id: str | None = None) -> None:
        if not email:
            return
        existing = await self.find_by_email(email)
        if existing is not None and existing["id"] != current_id:
            raise InputValidationError("User already exists")

    async def _ensure_assistant_exists(self, assistant_id: str | None) -> None:
        if assistant_id is None:
            return
        if await self.store.find_one(Collection.ASSISTANTS, {"id": assistant_id}) is None:
            raise InputValidationError(f"Assistant {assistant_id} does not exist")

    async def create(self, data: UserCreate) -> Record:
        name = data.display_name
        if not name:
            raise InputValidationError("Name is required")
        await self._ensure_email_free(data.email)
        await self._ensure_assistant_exists(data.assistant_id)

        user = {
            "id": new_id(),
            "name": name,
            "email": data.email,
            "password": hash_password(data.password) if data.password else None,
            "assistantId": data.assistant_id,
            "createdAt": utc_now(),
        }
        await self.store.insert(Collection.USERS, user)
        logger.info("Created user %s", user["id"])
        return user

    async def update(self, user_id: str, data: UserUpdate) -> Record:
        user = await self.get(user_id)
        changes = data.model_dump(exclude_unset=True, by_alias=True)

        patch: dict = {"updatedAt": utc_now()}
        if changes.get("name"):
            patch["name"] = changes["name"]
        if changes.get("email"):
            await self._ensure_email_free(changes["email"], current_id=user["id"])
            patch["email"] = changes["email"]
        if "assistantId" in changes:
            await self._ensure_assistant_exists(changes["assistantId"])
            patch["assistantId"] = changes["assistantId"]

        updated = await self.store.update_one(Collection.USERS, {"id": user_id}, patch)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    async def delete(self, user_id: str) -> None:
        """Delete the user and all associated data."""
        user = await self.get(user_id)
        await self.cascade.purge_user(user)
