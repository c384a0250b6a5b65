"""
FastAPI dependencies.

Key patterns:
1. The document store, remote client and relay are created once in the app
   lifespan and read from ``app.state``; nothing is module-global.
2. Services are built per request from those shared collaborators.
3. Tests swap collaborators with ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from userlink.config import Settings, get_settings
from userlink.db import DocumentStore
from userlink.errors import NotFoundError
from userlink.security import decode_access_token
from userlink.services import (
    AssistantService,
    CascadeEngine,
    ChatThreadService,
    FileService,
    MessageRelay,
    MessageService,
    RemoteAssistantClient,
    UserService,
)

# =============================================================================
# SHARED COLLABORATORS
# =============================================================================


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_remote_client(request: Request) -> RemoteAssistantClient:
    return request.app.state.remote


def get_relay(request: Request) -> MessageRelay:
    return request.app.state.relay


AppSettings = Annotated[Settings, Depends(get_settings)]
Store = Annotated[DocumentStore, Depends(get_store)]
Remote = Annotated[RemoteAssistantClient, Depends(get_remote_client)]
Relay = Annotated[MessageRelay, Depends(get_relay)]


# =============================================================================
# SERVICES
# =============================================================================


def get_cascade(store: Store, remote: Remote) -> CascadeEngine:
    return CascadeEngine(store, remote)


Cascade = Annotated[CascadeEngine, Depends(get_cascade)]


def get_user_service(store: Store, cascade: Cascade) -> UserService:
    return UserService(store, cascade)


def get_assistant_service(
    store: Store, remote: Remote, cascade: Cascade, settings: AppSettings
) -> AssistantService:
    return AssistantService(store, remote, cascade, settings.default_assistant_model)


def get_chat_thread_service(store: Store, cascade: Cascade) -> ChatThreadService:
    return ChatThreadService(store, cascade)


def get_message_service(store: Store, relay: Relay, settings: AppSettings) -> MessageService:
    return MessageService(store, relay, reply_delay=settings.mock_reply_delay_seconds)


def get_file_service(store: Store, settings: AppSettings) -> FileService:
    return FileService(store, settings.file_base_url)


Users = Annotated[UserService, Depends(get_user_service)]
Assistants = Annotated[AssistantService, Depends(get_assistant_service)]
ChatThreads = Annotated[ChatThreadService, Depends(get_chat_thread_service)]
Messages = Annotated[MessageService, Depends(get_message_service)]
Files = Annotated[FileService, Depends(get_file_service)]


# =============================================================================
# AUTHENTICATION
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the JWT from an ``Authorization: Bearer <token>`` header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Access denied. No token provided.",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    users: Users,
) -> dict:
    """
    Validate JWT and return the current user record.

    Raises 401 if the token is invalid/expired or the user no longer exists.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    try:
        return await users.get(user_id)
    except NotFoundError:
        raise credentials_exception from None


CurrentUser = Annotated[dict, Depends(get_current_user)]
