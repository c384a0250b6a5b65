"""User schemas."""

from pydantic import EmailStr, Field

from userlink.schemas.base import BaseSchema, IDMixin, TimestampMixin


class UserCreate(BaseSchema):
    """Schema for creating a user. Either ``name`` or ``username`` is required."""

    name: str | None = Field(None, max_length=255)
    username: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1)
    assistant_id: str | None = None

    @property
    def display_name(self) -> str | None:
        return self.name or self.username


class UserRead(IDMixin, TimestampMixin):
    """Schema for reading user data. The password hash is never exposed."""

    name: str
    email: str | None = None
    assistant_id: str | None = None


class UserUpdate(BaseSchema):
    """Schema for updating a user. Omitted fields keep their current value."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    assistant_id: str | None = None  # Explicit null unlinks the assistant
