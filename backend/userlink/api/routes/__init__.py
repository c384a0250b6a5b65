"""API routes package."""

from userlink.api.routes import (
    assistants,
    auth,
    chat_threads,
    files,
    messages,
    users,
)

__all__ = [
    "assistants",
    "auth",
    "chat_threads",
    "files",
    "messages",
    "users",
]
