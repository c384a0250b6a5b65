"""Chat thread routes."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from userlink.api.deps import ChatThreads, Messages
from userlink.schemas.base import StatusMessage
from userlink.schemas.chat_threads import ChatThreadCreate, ChatThreadRead, ChatThreadUpdate
from userlink.schemas.messages import MessageRead, ThreadMessageCreate
from userlink.services.chat_threads import ANONYMOUS_OWNER
from userlink.services.common import ThreadKeySet

router = APIRouter(prefix="/chat_threads", tags=["chat_threads"])


@router.post("", response_model=ChatThreadRead, status_code=status.HTTP_201_CREATED)
async def create_chat_thread(data: ChatThreadCreate, threads: ChatThreads) -> ChatThreadRead:
    """Create a chat thread. Without ``userId`` the thread is owned by "anonymous"."""
    return ChatThreadRead.model_validate(await threads.create(data))


@router.get("", response_model=list[ChatThreadRead])
async def list_chat_threads(
    threads: ChatThreads,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> list[ChatThreadRead]:
    return [ChatThreadRead.model_validate(t) for t in await threads.list_threads(user_id)]


@router.get("/{thread_id}", response_model=ChatThreadRead)
async def get_chat_thread(thread_id: str, threads: ChatThreads) -> ChatThreadRead:
    return ChatThreadRead.model_validate(await threads.get(thread_id))


@router.api_route("/{thread_id}", methods=["PUT", "PATCH"], response_model=ChatThreadRead)
async def update_chat_thread(
    thread_id: str,
    data: ChatThreadUpdate,
    threads: ChatThreads,
) -> ChatThreadRead:
    return ChatThreadRead.model_validate(await threads.update(thread_id, data))


@router.delete("/{thread_id}", response_model=StatusMessage)
async def delete_chat_thread(thread_id: str, threads: ChatThreads) -> StatusMessage:
    """Delete a chat thread and all its messages."""
    await threads.delete(thread_id)
    return StatusMessage(message="Chat thread deleted successfully")


@router.get("/{thread_id}/messages", response_model=list[MessageRead])
async def list_chat_thread_messages(
    thread_id: str,
    threads: ChatThreads,
    messages: Messages,
) -> list[MessageRead]:
    """Messages of an existing chat thread under its local or provider thread id, oldest first."""
    thread = await threads.get(thread_id)
    keys = ThreadKeySet.for_chat_threads([thread])
    return [MessageRead.model_validate(m) for m in await messages.for_keys(keys)]


@router.post("/{thread_id}/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_chat_thread_message(
    thread_id: str,
    data: ThreadMessageCreate,
    threads: ChatThreads,
    messages: Messages,
) -> MessageRead:
    """Post a message to an existing chat thread."""
    await threads.get(thread_id)
    message = await messages.create(thread_id, data.content, data.role, data.user_id or ANONYMOUS_OWNER)
    return MessageRead.model_validate(message)
