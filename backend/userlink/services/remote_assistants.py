"""Client for the LLM provider's assistant and thread management endpoints."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from openai import AsyncOpenAI, NotFoundError, OpenAIError

from userlink.config import Settings
from userlink.errors import UpstreamError

logger = logging.getLogger(__name__)


class RemoteAssistantClient(ABC):
    """
    Remote assistant/thread operations.

    Every call is a single network round trip with no retry; callers decide
    whether a failure is fatal (create/update) or best-effort (delete).
    Implementations raise UpstreamError on failure.
    """

    @abstractmethod
    async def create_assistant(self, config: dict[str, Any]) -> dict[str, Any]:
        """Create an assistant and return at least ``{"id": ...}``."""

    @abstractmethod
    async def update_assistant(self, assistant_id: str, config: dict[str, Any]) -> dict[str, Any]:
        """Update an assistant and return at least ``{"id": ...}``."""

    @abstractmethod
    async def delete_assistant(self, assistant_id: str) -> None:
        """Delete an assistant. An assistant that is already gone is not an error."""

    @abstractmethod
    async def create_thread(self) -> dict[str, Any]:
        """Create an empty conversation thread and return ``{"id": ...}``."""

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> None:
        """Delete a thread. A thread that is already gone is not an error."""


class OpenAIAssistantClient(RemoteAssistantClient):
    """RemoteAssistantClient backed by the OpenAI Assistants v2 API."""

    def __init__(self, client: AsyncOpenAI):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIAssistantClient":
        return cls(
            AsyncOpenAI(
                api_key=settings.openai_api_key,
                organization=settings.openai_org_id,
                base_url=settings.openai_base_url,
                max_retries=0,
            )
        )

    @staticmethod
    def _clean(config: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in config.items() if value is not None}

    async def create_assistant(self, config: dict[str, Any]) -> dict[str, Any]:
        try:
            assistant = await self.client.beta.assistants.create(**self._clean(config))
        except OpenAIError as e:
            logger.error("Error creating assistant: %s", e)
            raise UpstreamError(f"Error creating assistant: {e}") from e
        return {"id": assistant.id}

    async def update_assistant(self, assistant_id: str, config: dict[str, Any]) -> dict[str, Any]:
        try:
            assistant = await self.client.beta.assistants.update(assistant_id, **self._clean(config))
        except OpenAIError as e:
            logger.error("Error updating assistant %s: %s", assistant_id, e)
            raise UpstreamError(f"Error updating assistant: {e}") from e
        return {"id": assistant.id}

    async def delete_assistant(self, assistant_id: str) -> None:
        try:
            await self.client.beta.assistants.delete(assistant_id)
        except NotFoundError:
            logger.info("Assistant %s already deleted upstream", assistant_id)
        except OpenAIError as e:
            raise UpstreamError(f"Error deleting assistant: {e}") from e

    async def create_thread(self) -> dict[str, Any]:
        try:
            thread = await self.client.beta.threads.create()
        except OpenAIError as e:
            logger.error("Error creating thread: %s", e)
            raise UpstreamError(f"Error creating thread: {e}") from e
        return {"id": thread.id}

    async def delete_thread(self, thread_id: str) -> None:
        try:
            await self.client.beta.threads.delete(thread_id)
        except NotFoundError:
            logger.info("Thread %s already deleted upstream", thread_id)
        except OpenAIError as e:
            raise UpstreamError(f"Error deleting thread: {e}") from e
