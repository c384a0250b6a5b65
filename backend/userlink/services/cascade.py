"""
Cascade-consistency engine.

Removes a parent entity together with everything that references it so no
message, file, chat thread or user is left pointing at something deleted.

Policy for every cascade:
1. Remote provider calls go first and are best-effort: failures are logged
   and swallowed, the local cascade always continues.
2. Local steps run strictly in order, one at a time.
3. Storage failures propagate. There is no compensating transaction, so a
   storage outage mid-cascade can leave partially removed data behind.
"""

import logging
from collections.abc import Awaitable, Callable

from userlink.db import Collection, DocumentStore, Record
from userlink.services.common import ThreadKeySet, utc_now
from userlink.services.remote_assistants import RemoteAssistantClient

logger = logging.getLogger(__name__)


class CascadeEngine:
    """Ordered multi-collection deletes shared by the entity services."""

    def __init__(self, store: DocumentStore, remote: RemoteAssistantClient):
        self.store = store
        self.remote = remote

    async def _best_effort(self, action: str, call: Callable[[str], Awaitable[None]], remote_id: str) -> bool:
        """Run a remote call whose failure must not abort the cascade."""
        try:
            await call(remote_id)
        except Exception:
            logger.exception("Best-effort remote call failed: %s %s", action, remote_id)
            return False
        return True

    async def purge_assistant(self, assistant: Record, *, delete_remote_thread: bool = False) -> None:
        """
        Delete an assistant and detach everything that referenced it.

        Order:
        1. remote thread (only when ``delete_remote_thread``) and remote assistant, best-effort
        2. messages filed under the assistant's thread
        3. files attached to the assistant
        4. users and chat threads pointing at the assistant get ``assistantId = None``
        5. the assistant record
        """
        assistant_id = assistant["id"]
        thread_id = assistant.get("threadId")

        if delete_remote_thread and thread_id:
            await self._best_effort("delete thread", self.remote.delete_thread, thread_id)
        if assistant.get("openai_id"):
            await self._best_effort("delete assistant", self.remote.delete_assistant, assistant["openai_id"])

        removed_messages = 0
        if thread_id:
            removed_messages = await self.store.remove_many(Collection.MESSAGES, {"threadId": thread_id})

        removed_files = 0
        associated_files = await self.store.find_many(Collection.FILES, {"assistantId": assistant_id})
        if associated_files:
            # Provider-side files are kept; other assistants may still use them
            removed_files = await self.store.remove_many(Collection.FILES, {"assistantId": assistant_id})

        owners = await self.store.find_many(Collection.USERS, {"assistantId": assistant_id})
        for owner in owners:
            await self.store.update_one(
                Collection.USERS,
                {"id": owner["id"]},
                {"assistantId": None, "updatedAt": utc_now()},
            )

        linked_threads = await self.store.find_many(Collection.CHAT_THREADS, {"assistantId": assistant_id})
        for thread in linked_threads:
            await self.store.update_one(
                Collection.CHAT_THREADS,
                {"id": thread["id"]},
                {"assistantId": None, "updatedAt": utc_now()},
            )

        await self.store.remove_many(Collection.ASSISTANTS, {"id": assistant_id})
        logger.info(
            "Deleted assistant %s (%d messages, %d files, %d users and %d chat threads unlinked)",
            assistant_id,
            removed_messages,
            removed_files,
            len(owners),
            len(linked_threads),
        )

    async def purge_chat_thread(self, thread: Record) -> None:
        """
        Delete a chat thread and its messages.

        Messages filed under the thread's provider-side id go too, unless a
        live assistant still owns that id as its own thread.
        """
        keys = ThreadKeySet([thread["id"]])
        external_id = thread.get("openaiThreadId")
        if external_id:
            owner = await self.store.find_one(Collection.ASSISTANTS, {"threadId": external_id})
            if owner is None:
                keys.add(external_id)

        removed_messages = await self.store.remove_many(Collection.MESSAGES, keys.as_predicate())
        await self.store.remove_many(Collection.CHAT_THREADS, {"id": thread["id"]})
        logger.info("Deleted chat thread %s (%d messages)", thread["id"], removed_messages)

    async def purge_user(self, user: Record) -> None:
        """
        Delete a user and all associated data.

        Assistant cleanup (the only step touching the provider) runs first so a
        remote failure cannot block the purely local steps after it:
        1. the user's assistant, remote thread included
        2. the user's chat threads and every message under their local or external keys
        3. remaining files owned by the user
        4. remaining messages authored by the user
        5. the user record
        """
        user_id = user["id"]

        if user.get("assistantId"):
            assistant = await self.store.find_one(Collection.ASSISTANTS, {"id": user["assistantId"]})
            if assistant is not None:
                await self.purge_assistant(assistant, delete_remote_thread=True)

        threads = await self.store.find_many(Collection.CHAT_THREADS, {"userId": user_id})
        keys = ThreadKeySet.for_chat_threads(threads)
        thread_messages = 0
        if keys:
            thread_messages = await self.store.remove_many(Collection.MESSAGES, keys.as_predicate())
        await self.store.remove_many(Collection.CHAT_THREADS, {"userId": user_id})

        removed_files = await self.store.remove_many(Collection.FILES, {"userId": user_id})
        authored_messages = await self.store.remove_many(Collection.MESSAGES, {"userId": user_id})

        await self.store.remove_many(Collection.USERS, {"id": user_id})
        logger.info(
            "Deleted user %s (%d chat threads, %d messages, %d files)",
            user_id,
            len(threads),
            thread_messages + authored_messages,
            removed_files,
        )
