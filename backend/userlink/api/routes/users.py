"""User CRUD routes."""

from fastapi import APIRouter, status

from userlink.api.deps import Users
from userlink.schemas.base import StatusMessage
from userlink.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, users: Users) -> UserRead:
    """Create a user. The password, if given, is stored hashed and never returned."""
    user = await users.create(data)
    return UserRead.model_validate(user)


@router.get("", response_model=list[UserRead])
async def list_users(users: Users) -> list[UserRead]:
    """List all users."""
    return [UserRead.model_validate(u) for u in await users.list_users()]


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str, users: Users) -> UserRead:
    """Get a specific user by ID."""
    return UserRead.model_validate(await users.get(user_id))


@router.api_route("/{user_id}", methods=["PUT", "PATCH"], response_model=UserRead)
async def update_user(user_id: str, data: UserUpdate, users: Users) -> UserRead:
    """Update a user. Omitted fields keep their value; ``assistantId: null`` unlinks."""
    return UserRead.model_validate(await users.update(user_id, data))


@router.delete("/{user_id}", response_model=StatusMessage)
async def delete_user(user_id: str, users: Users) -> StatusMessage:
    """
    Delete a user and all associated data.

    Removes the user's assistant (provider side best-effort), chat threads,
    their messages and the user's files.
    """
    await users.delete(user_id)
    return StatusMessage(message="User and all associated data deleted successfully")
