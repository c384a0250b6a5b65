"""Message storage, thread-key queries and the ask-a-question flow."""

import asyncio
import logging

from userlink.db import Collection, DocumentStore, Record
from userlink.errors import NotFoundError
from userlink.schemas.messages import MessageRole
from userlink.services.common import ThreadKeySet, new_id, sort_by_created, utc_now
from userlink.services.relay import MessageRelay

logger = logging.getLogger(__name__)

# Strong references to in-flight reply tasks so they are not garbage collected
_background_tasks: set[asyncio.Task] = set()


def mock_reply_for(question: str) -> str:
    return f'This is a mock response to your question: "{question}"'


class MessageService:
    """
    Messages filed under thread-affiliation keys.

    Creating a message never checks that the key belongs to a known thread:
    callers may be using a provider-side id the local store has not mirrored.
    """

    def __init__(self, store: DocumentStore, relay: MessageRelay, reply_delay: float = 1.0):
        self.store = store
        self.relay = relay
        self.reply_delay = reply_delay

    async def create(
        self,
        thread_key: str,
        content: str,
        role: MessageRole = MessageRole.USER,
        user_id: str | None = None,
    ) -> Record:
        message = {
            "id": new_id(),
            "threadId": thread_key,
            "content": content,
            "role": MessageRole(role).value,
            "userId": user_id,
            "createdAt": utc_now(),
        }
        await self.store.insert(Collection.MESSAGES, message)
        # Only broadcast once the write succeeded
        self.relay.publish(message)
        return message

    async def for_keys(self, keys: ThreadKeySet) -> list[Record]:
        """Messages under any key of ``keys``, oldest first."""
        if not keys:
            return []
        return sort_by_created(await self.store.find_many(Collection.MESSAGES, keys.as_predicate()))

    async def for_thread(self, thread_key: str) -> list[Record]:
        return await self.for_keys(ThreadKeySet([thread_key]))

    async def thread_keys_for_user(self, user: Record) -> ThreadKeySet:
        """
        Every key the user's conversations may be filed under: local and
        provider ids of the user's chat threads, plus the thread of the
        user's assistant.
        """
        threads = await self.store.find_many(Collection.CHAT_THREADS, {"userId": user["id"]})
        keys = ThreadKeySet.for_chat_threads(threads)
        if user.get("assistantId"):
            assistant = await self.store.find_one(Collection.ASSISTANTS, {"id": user["assistantId"]})
            if assistant is not None:
                keys.add(assistant.get("threadId"))
        return keys

    async def for_user(self, user_id: str) -> list[Record]:
        """Union of all messages across the user's threads, deduplicated, oldest first."""
        user = await self.store.find_one(Collection.USERS, {"id": user_id})
        if user is None:
            raise NotFoundError("User not found")
        return await self.for_keys(await self.thread_keys_for_user(user))

    async def list_messages(self, thread_id: str | None = None, user_id: str | None = None) -> list[Record]:
        if user_id:
            messages = await self.for_user(user_id)
            if thread_id:
                messages = [m for m in messages if m.get("threadId") == thread_id]
            return messages
        if thread_id:
            return await self.for_thread(thread_id)
        return sort_by_created(await self.store.find_many(Collection.MESSAGES, {}))

    async def ask(self, user_id: str, question: str) -> Record:
        """
        Store the user's question and schedule a mock assistant reply.

        The user's first chat thread is used, or one is created. The reply is
        written by a fire-and-forget task after ``reply_delay`` seconds.
        """
        user = await self.store.find_one(Collection.USERS, {"id": user_id})
        if user is None:
            raise NotFoundError("User not found")

        thread = await self.store.find_one(Collection.CHAT_THREADS, {"userId": user_id})
        if thread is None:
            thread = await self.store.insert(
                Collection.CHAT_THREADS,
                {
                    "id": new_id(),
                    "name": "Conversation",
                    "userId": user_id,
                    "assistantId": user.get("assistantId"),
                    "openaiThreadId": f"thread_{new_id()}",
                    "members": [user_id],
                    "createdAt": utc_now(),
                },
            )

        user_message = await self.create(thread["id"], question, MessageRole.USER, user_id)

        # TODO: skip the reply when the thread or user was deleted during the delay
        task = asyncio.create_task(self._deliver_mock_reply(thread["id"], question))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

        return user_message

    async def _deliver_mock_reply(self, thread_id: str, question: str) -> None:
        try:
            await asyncio.sleep(self.reply_delay)
            await self.create(thread_id, mock_reply_for(question), MessageRole.ASSISTANT)
        except Exception:
            logger.exception("Failed to store mock reply for thread %s", thread_id)
