"""File metadata schemas."""

from pydantic import Field

from userlink.schemas.base import BaseSchema, IDMixin, TimestampMixin


class FileCreate(BaseSchema):
    """File metadata registered after an upload to the provider."""

    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    size: int | None = Field(None, ge=0)
    type: str | None = None  # MIME type
    openai_file_id: str | None = None
    assistant_id: str | None = None


class FileRead(IDMixin, TimestampMixin):
    """File metadata response."""

    user_id: str
    name: str
    size: int | None = None
    type: str | None = None
    openai_file_id: str | None = None
    assistant_id: str | None = None


class FileContent(BaseSchema):
    """Placeholder content until files are pulled from storage."""

    content: str
    url: str
