"""Message routes, including the ask flow and the live message stream."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request, status
from sse_starlette.sse import EventSourceResponse

from userlink.api.deps import Messages, Relay
from userlink.schemas.messages import AskRequest, MessageCreate, MessageRead, ThreadMessageCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["messages"])

# How often the stream loop checks for a disconnected client
_POLL_SECONDS = 15.0


@router.get("", response_model=list[MessageRead])
async def list_messages(
    messages: Messages,
    thread_id: Annotated[str | None, Query(alias="threadId")] = None,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> list[MessageRead]:
    """
    List messages, oldest first.

    Query parameters:
    - threadId: only messages filed under this thread key
    - userId: messages across all of the user's threads (404 for an unknown user)
    """
    return [MessageRead.model_validate(m) for m in await messages.list_messages(thread_id, user_id)]


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def create_message(data: MessageCreate, messages: Messages) -> MessageRead:
    """Store a message under any thread key. The thread is not required to exist locally."""
    message = await messages.create(data.thread_id, data.content, data.role, data.user_id)
    return MessageRead.model_validate(message)


@router.get("/thread/{thread_id}", response_model=list[MessageRead])
async def list_thread_messages(thread_id: str, messages: Messages) -> list[MessageRead]:
    return [MessageRead.model_validate(m) for m in await messages.for_thread(thread_id)]


@router.post("/thread/{thread_id}", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def create_thread_message(
    thread_id: str,
    data: ThreadMessageCreate,
    messages: Messages,
) -> MessageRead:
    message = await messages.create(thread_id, data.content, data.role, data.user_id)
    return MessageRead.model_validate(message)


@router.get("/thread/{thread_id}/events")
async def stream_thread_messages(thread_id: str, request: Request, relay: Relay):
    """
    Live stream of messages stored under ``thread_id`` (Server-Sent Events).

    Events:
    - 'message': a newly stored message as JSON

    Delivery is at-most-once; messages stored before subscribing are not replayed.
    """
    subscription = relay.subscribe(thread_id)

    async def event_generator():
        try:
            while not await request.is_disconnected():
                try:
                    message = await asyncio.wait_for(subscription.get(), timeout=_POLL_SECONDS)
                except asyncio.TimeoutError:
                    continue
                yield {"event": "message", "data": MessageRead.model_validate(message).model_dump_json(by_alias=True)}
        finally:
            relay.unsubscribe(subscription)
            logger.debug("Stream for thread %s closed", thread_id)

    return EventSourceResponse(event_generator())


@router.get("/user/{user_id}", response_model=list[MessageRead])
async def list_user_messages(user_id: str, messages: Messages) -> list[MessageRead]:
    """
    All messages of a user, oldest first.

    Collected from every chat thread the user owns (local and provider thread
    ids) and from the thread of the user's assistant.
    """
    return [MessageRead.model_validate(m) for m in await messages.for_user(user_id)]


@router.post("/ask/{user_id}", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def ask_question(user_id: str, data: AskRequest, messages: Messages) -> MessageRead:
    """
    Ask the user's assistant a question.

    Returns the stored question right away; the assistant reply is stored
    shortly after by a background task.
    """
    return MessageRead.model_validate(await messages.ask(user_id, data.question))
