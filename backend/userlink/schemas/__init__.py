"""Pydantic schemas for API request/response validation."""

from userlink.schemas.base import StatusMessage
from userlink.schemas.user import UserCreate, UserRead, UserUpdate
from userlink.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from userlink.schemas.assistants import AssistantCreate, AssistantRead, AssistantUpdate
from userlink.schemas.chat_threads import ChatThreadCreate, ChatThreadRead, ChatThreadUpdate
from userlink.schemas.messages import (
    AskRequest,
    MessageCreate,
    MessageRead,
    MessageRole,
    ThreadMessageCreate,
)
from userlink.schemas.files import FileContent, FileCreate, FileRead

__all__ = [
    "StatusMessage",
    # User
    "UserCreate",
    "UserRead",
    "UserUpdate",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    # Assistants
    "AssistantCreate",
    "AssistantRead",
    "AssistantUpdate",
    # Chat threads
    "ChatThreadCreate",
    "ChatThreadRead",
    "ChatThreadUpdate",
    # Messages
    "AskRequest",
    "MessageCreate",
    "MessageRead",
    "MessageRole",
    "ThreadMessageCreate",
    # Files
    "FileContent",
    "FileCreate",
    "FileRead",
]
