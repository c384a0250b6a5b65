"""Chat thread management."""

from userlink.db import Collection, DocumentStore, Record
from userlink.errors import NotFoundError
from userlink.schemas.chat_threads import ChatThreadCreate, ChatThreadUpdate
from userlink.services.cascade import CascadeEngine
from userlink.services.common import new_id, utc_now

ANONYMOUS_OWNER = "anonymous"


class ChatThreadService:
    def __init__(self, store: DocumentStore, cascade: CascadeEngine):
        self.store = store
        self.cascade = cascade

    async def get(self, thread_id: str) -> Record:
        thread = await self.store.find_one(Collection.CHAT_THREADS, {"id": thread_id})
        if thread is None:
            raise NotFoundError("Chat thread not found")
        return thread

    async def list_threads(self, user_id: str | None = None) -> list[Record]:
        predicate = {"userId": user_id} if user_id else {}
        return await self.store.find_many(Collection.CHAT_THREADS, predicate)

    async def create(self, data: ChatThreadCreate) -> Record:
        owner = data.user_id or ANONYMOUS_OWNER
        thread = {
            "id": new_id(),
            "name": data.name,
            "description": data.description,
            "userId": owner,
            "assistantId": data.assistant_id,
            "openaiThreadId": data.openai_thread_id,
            "members": [owner],
            "createdAt": utc_now(),
        }
        return await self.store.insert(Collection.CHAT_THREADS, thread)

    async def update(self, thread_id: str, data: ChatThreadUpdate) -> Record:
        await self.get(thread_id)
        patch = {key: value for key, value in data.model_dump(exclude_unset=True, by_alias=True).items() if value is not None}
        patch["updatedAt"] = utc_now()
        updated = await self.store.update_one(Collection.CHAT_THREADS, {"id": thread_id}, patch)
        if updated is None:
            raise NotFoundError("Chat thread not found")
        return updated

    async def delete(self, thread_id: str) -> None:
        thread = await self.get(thread_id)
        await self.cascade.purge_chat_thread(thread)
