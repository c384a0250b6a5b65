"""Assistant routes."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from userlink.api.deps import Assistants
from userlink.schemas.assistants import AssistantCreate, AssistantRead, AssistantUpdate
from userlink.schemas.base import StatusMessage

router = APIRouter(prefix="/assistants", tags=["assistants"])


@router.post("", response_model=AssistantRead, status_code=status.HTTP_201_CREATED)
async def create_assistant(data: AssistantCreate, assistants: Assistants) -> AssistantRead:
    """
    Provision an assistant.

    Creates the provider assistant and its companion thread, stores the local
    record, and with ``ownerUserId`` (or ``userId``) links it to that user
    through a new chat thread. Fails with 500 if either provider call fails.
    """
    assistant = await assistants.create(data)
    return AssistantRead.model_validate(assistant)


@router.get("", response_model=list[AssistantRead])
async def list_assistants(
    assistants: Assistants,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> list[AssistantRead]:
    """List assistants, or only the assistant linked to ``userId``."""
    return [AssistantRead.model_validate(a) for a in await assistants.list_assistants(user_id)]


@router.get("/{assistant_id}", response_model=AssistantRead)
async def get_assistant(assistant_id: str, assistants: Assistants) -> AssistantRead:
    return AssistantRead.model_validate(await assistants.get(assistant_id))


@router.api_route("/{assistant_id}", methods=["PUT", "PATCH"], response_model=AssistantRead)
async def update_assistant(
    assistant_id: str,
    data: AssistantUpdate,
    assistants: Assistants,
) -> AssistantRead:
    """Update an assistant. The provider is updated first; its failure aborts the request."""
    return AssistantRead.model_validate(await assistants.update(assistant_id, data))


@router.delete("/{assistant_id}", response_model=StatusMessage)
async def delete_assistant(assistant_id: str, assistants: Assistants) -> StatusMessage:
    """
    Delete an assistant.

    The provider deletion is best-effort. Messages on the assistant's thread
    and files attached to it are removed, and users linked to it are unlinked.
    """
    await assistants.delete(assistant_id)
    return StatusMessage(message="Assistant deleted successfully")
