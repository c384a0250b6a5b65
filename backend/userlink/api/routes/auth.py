"""
Authentication Routes

Endpoints:
- POST /auth/register - Create an account with email + password, returns a JWT
- POST /auth/login - Exchange email + password for a JWT
- GET /auth/me - Current user from a bearer token

Tokens are HS256 JWTs carrying the user id in ``sub``. They are stateless;
revocation would need a blocklist (not implemented).
"""

from fastapi import APIRouter, status

from userlink.api.deps import CurrentUser, Users
from userlink.errors import InputValidationError
from userlink.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from userlink.schemas.user import UserCreate, UserRead
from userlink.security import create_access_token, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, users: Users) -> TokenResponse:
    """Register a new user. Duplicate emails are rejected with 400."""
    user = await users.create(
        UserCreate(username=data.username, email=data.email, password=data.password)
    )
    return TokenResponse(
        token=create_access_token(user["id"], user["email"]),
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, users: Users) -> TokenResponse:
    """Log in with email and password."""
    user = await users.find_by_email(data.email)
    if user is None or not verify_password(data.password, user.get("password")):
        raise InputValidationError("Invalid credentials")

    return TokenResponse(
        token=create_access_token(user["id"], user["email"]),
        user=UserRead.model_validate(user),
    )


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Get the authenticated user's profile."""
    return UserRead.model_validate(current_user)
