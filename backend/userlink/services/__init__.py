"""Entity services, the cascade engine and external integrations."""

from userlink.services.assistants import AssistantService
from userlink.services.cascade import CascadeEngine
from userlink.services.chat_threads import ChatThreadService
from userlink.services.files import FileService
from userlink.services.messages import MessageService
from userlink.services.relay import MessageRelay
from userlink.services.remote_assistants import OpenAIAssistantClient, RemoteAssistantClient
from userlink.services.users import UserService

__all__ = [
    "AssistantService",
    "CascadeEngine",
    "ChatThreadService",
    "FileService",
    "MessageRelay",
    "MessageService",
    "OpenAIAssistantClient",
    "RemoteAssistantClient",
    "UserService",
]
