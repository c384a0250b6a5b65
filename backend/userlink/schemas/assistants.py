"""Assistant schemas."""

from typing import Any

from pydantic import AliasChoices, Field

from userlink.schemas.base import BaseSchema, IDMixin, TimestampMixin


class AssistantCreate(BaseSchema):
    """Request to provision an assistant and its companion thread."""

    name: str = Field(..., min_length=1, max_length=255)
    instructions: str | None = None
    description: str | None = None
    model: str | None = None  # Falls back to settings.default_assistant_model
    tools: list[dict[str, Any]] = Field(default_factory=list)
    owner_user_id: str | None = Field(
        None,
        validation_alias=AliasChoices("ownerUserId", "userId", "owner_user_id"),
    )


class AssistantUpdate(BaseSchema):
    """Partial update. Omitted fields keep their current value."""

    name: str | None = Field(None, min_length=1, max_length=255)
    instructions: str | None = None
    description: str | None = None
    model: str | None = None
    tools: list[dict[str, Any]] | None = None


class AssistantRead(IDMixin, TimestampMixin):
    """Assistant response."""

    openai_id: str | None = Field(None, alias="openai_id")
    name: str
    instructions: str | None = None
    description: str | None = None
    model: str
    tools: list[dict[str, Any]] = Field(default_factory=list)
    thread_id: str | None = None
