"""Message schemas."""

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, Field

from userlink.schemas.base import BaseSchema, IDMixin


class MessageRole(str, Enum):
    """Author role of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageCreate(BaseSchema):
    """Message filed under any thread-affiliation key, local or provider-side."""

    thread_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, validation_alias=AliasChoices("content", "text"))
    role: MessageRole = MessageRole.USER
    user_id: str | None = None


class ThreadMessageCreate(BaseSchema):
    """Message body when the thread key comes from the URL."""

    content: str = Field(..., min_length=1, validation_alias=AliasChoices("content", "text"))
    role: MessageRole = MessageRole.USER
    user_id: str | None = None


class AskRequest(BaseSchema):
    """Question for the user's assistant."""

    question: str = Field(..., min_length=1, max_length=10000)


class MessageRead(IDMixin):
    """Message response. Messages are immutable, so there is no updatedAt."""

    thread_id: str
    content: str
    role: MessageRole
    user_id: str | None = None
    created_at: datetime
