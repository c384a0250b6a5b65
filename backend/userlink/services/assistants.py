"""Assistant lifecycle: provisioning, updates and deletion."""

import logging

from userlink.db import Collection, DocumentStore, Record
from userlink.errors import NotFoundError, UpstreamError
from userlink.schemas.assistants import AssistantCreate, AssistantUpdate
from userlink.services.cascade import CascadeEngine
from userlink.services.common import new_id, utc_now
from userlink.services.remote_assistants import RemoteAssistantClient

logger = logging.getLogger(__name__)

# Fields mirrored to the provider on create/update
_REMOTE_FIELDS = ("name", "instructions", "description", "model", "tools")


class AssistantService:
    """
    Local assistant records paired with a provider assistant and thread.

    Remote failures are fatal on create and update but only logged on delete
    (see CascadeEngine.purge_assistant).
    """

    def __init__(
        self,
        store: DocumentStore,
        remote: RemoteAssistantClient,
        cascade: CascadeEngine,
        default_model: str,
    ):
        self.store = store
        self.remote = remote
        self.cascade = cascade
        self.default_model = default_model

    async def get(self, assistant_id: str) -> Record:
        assistant = await self.store.find_one(Collection.ASSISTANTS, {"id": assistant_id})
        if assistant is None:
            raise NotFoundError("Assistant not found")
        return assistant

    async def list_assistants(self, user_id: str | None = None) -> list[Record]:
        """All assistants, or only the one linked to ``user_id``."""
        if user_id is None:
            return await self.store.find_many(Collection.ASSISTANTS, {})

        user = await self.store.find_one(Collection.USERS, {"id": user_id})
        if user is None or not user.get("assistantId"):
            return []
        return await self.store.find_many(Collection.ASSISTANTS, {"id": user["assistantId"]})

    async def create(self, data: AssistantCreate) -> Record:
        """
        Provision an assistant.

        Steps, each depending on the previous one:
        1. create the provider assistant
        2. create its companion provider thread
        3. store the local assistant record
        4. with an owner: store a chat thread for (owner, assistant) and link the owner
        """
        owner = None
        if data.owner_user_id:
            owner = await self.store.find_one(Collection.USERS, {"id": data.owner_user_id})
            if owner is None:
                raise NotFoundError("User not found")

        config = {
            "name": data.name,
            "instructions": data.instructions,
            "description": data.description,
            "model": data.model or self.default_model,
            "tools": data.tools,
        }

        remote_assistant = await self.remote.create_assistant(config)
        try:
            remote_thread = await self.remote.create_thread()
        except UpstreamError:
            # Undo step 1 so the provider assistant is not leaked
            try:
                await self.remote.delete_assistant(remote_assistant["id"])
            except Exception:
                logger.exception("Failed to roll back provider assistant %s", remote_assistant["id"])
            raise

        now = utc_now()
        assistant = {
            "id": new_id(),
            "openai_id": remote_assistant["id"],
            **config,
            "threadId": remote_thread["id"],
            "createdAt": now,
        }
        await self.store.insert(Collection.ASSISTANTS, assistant)

        if owner is not None:
            await self.store.insert(
                Collection.CHAT_THREADS,
                {
                    "id": new_id(),
                    "name": f"{data.name}'s Thread",
                    "userId": owner["id"],
                    "assistantId": assistant["id"],
                    "openaiThreadId": remote_thread["id"],
                    "members": [owner["id"]],
                    "createdAt": now,
                },
            )
            await self.store.update_one(
                Collection.USERS,
                {"id": owner["id"]},
                {"assistantId": assistant["id"], "updatedAt": now},
            )

        logger.info("Created assistant %s (provider id %s)", assistant["id"], assistant["openai_id"])
        return assistant

    async def update(self, assistant_id: str, data: AssistantUpdate) -> Record:
        """Merge supplied fields over current values, push to the provider, then persist."""
        assistant = await self.get(assistant_id)
        changes = data.model_dump(exclude_unset=True)

        merged = {}
        for field in _REMOTE_FIELDS:
            value = changes.get(field)
            merged[field] = value if value is not None else assistant.get(field)

        await self.remote.update_assistant(assistant["openai_id"], merged)

        updated = await self.store.update_one(
            Collection.ASSISTANTS,
            {"id": assistant_id},
            {**merged, "updatedAt": utc_now()},
        )
        if updated is None:
            raise NotFoundError("Assistant not found")
        return updated

    async def delete(self, assistant_id: str) -> None:
        assistant = await self.get(assistant_id)
        await self.cascade.purge_assistant(assistant)
