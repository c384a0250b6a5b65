"""File metadata records."""

from userlink.db import Collection, DocumentStore, Record
from userlink.errors import InputValidationError, NotFoundError
from userlink.schemas.files import FileCreate
from userlink.services.common import new_id, utc_now


class FileService:
    def __init__(self, store: DocumentStore, file_base_url: str):
        self.store = store
        self.file_base_url = file_base_url.rstrip("/")

    async def get(self, file_id: str) -> Record:
        file = await self.store.find_one(Collection.FILES, {"id": file_id})
        if file is None:
            raise NotFoundError("File not found")
        return file

    async def list_files(self, user_id: str | None = None, assistant_id: str | None = None) -> list[Record]:
        predicate = {}
        if user_id:
            predicate["userId"] = user_id
        if assistant_id:
            predicate["assistantId"] = assistant_id
        return await self.store.find_many(Collection.FILES, predicate)

    async def create(self, data: FileCreate) -> Record:
        if data.assistant_id:
            assistant = await self.store.find_one(Collection.ASSISTANTS, {"id": data.assistant_id})
            if assistant is None:
                raise InputValidationError(f"Assistant {data.assistant_id} does not exist")

        file = {
            "id": new_id(),
            "userId": data.user_id,
            "name": data.name,
            "size": data.size,
            "type": data.type,
            "openaiFileId": data.openai_file_id,
            "assistantId": data.assistant_id,
            "createdAt": utc_now(),
        }
        return await self.store.insert(Collection.FILES, file)

    async def delete(self, file_id: str) -> None:
        await self.get(file_id)
        await self.store.remove_many(Collection.FILES, {"id": file_id})

    async def content(self, file_id: str) -> dict[str, str]:
        """Placeholder content; file bytes are not stored locally."""
        file = await self.get(file_id)
        return {
            "content": f"This is the content of file {file['name']}",
            "url": f"{self.file_base_url}/{file['id']}",
        }
