"""Chat thread schemas."""

from pydantic import Field

from userlink.schemas.base import BaseSchema, IDMixin, TimestampMixin


class ChatThreadCreate(BaseSchema):
    """Request to create a chat thread. Owner defaults to "anonymous"."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    user_id: str | None = None
    assistant_id: str | None = None
    openai_thread_id: str | None = None


class ChatThreadUpdate(BaseSchema):
    """Partial update of name/description."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class ChatThreadRead(IDMixin, TimestampMixin):
    """Chat thread response."""

    name: str | None = None
    description: str | None = None
    user_id: str
    assistant_id: str | None = None
    openai_thread_id: str | None = None
    members: list[str] = Field(default_factory=list)
