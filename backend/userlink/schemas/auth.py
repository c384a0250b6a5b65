"""Authentication schemas."""

from pydantic import EmailStr, Field

from userlink.schemas.base import BaseSchema
from userlink.schemas.user import UserRead


class RegisterRequest(BaseSchema):
    """Request schema for account registration."""

    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseSchema):
    """Request schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseSchema):
    """Response schema for successful authentication."""

    token: str
    token_type: str = "bearer"
    user: UserRead
