"""File metadata routes."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import PlainTextResponse

from userlink.api.deps import Files
from userlink.schemas.base import StatusMessage
from userlink.schemas.files import FileContent, FileCreate, FileRead

router = APIRouter(prefix="/files", tags=["files"])


@router.get("", response_model=list[FileRead])
async def list_files(
    files: Files,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    assistant_id: Annotated[str | None, Query(alias="assistantId")] = None,
) -> list[FileRead]:
    return [FileRead.model_validate(f) for f in await files.list_files(user_id, assistant_id)]


@router.post("", response_model=FileRead, status_code=status.HTTP_201_CREATED)
async def create_file(data: FileCreate, files: Files) -> FileRead:
    """Register file metadata, optionally attached to an assistant."""
    return FileRead.model_validate(await files.create(data))


@router.get("/{file_id}", response_model=FileRead)
async def get_file(file_id: str, files: Files) -> FileRead:
    return FileRead.model_validate(await files.get(file_id))


@router.delete("/{file_id}", response_model=StatusMessage)
async def delete_file(file_id: str, files: Files) -> StatusMessage:
    await files.delete(file_id)
    return StatusMessage(message="File deleted successfully")


@router.get("/{file_id}/content", response_model=FileContent)
async def get_file_content(file_id: str, files: Files) -> FileContent:
    return FileContent.model_validate(await files.content(file_id))


@router.get("/{file_id}/download", response_class=PlainTextResponse)
async def download_file(file_id: str, files: Files) -> PlainTextResponse:
    file = await files.get(file_id)
    content = await files.content(file_id)
    return PlainTextResponse(
        content["content"],
        headers={"Content-Disposition": f'attachment; filename="{file["name"]}"'},
    )
