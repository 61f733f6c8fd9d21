"""Authentication API endpoints."""

from fastapi import APIRouter, HTTPException, status

from ...shared.db.models import User, UserRole
from ...shared.db.repositories import UserRepository
from ...shared.schemas import (
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from ..auth import CurrentUser, create_access_token, hash_password, verify_password
from ..auth.jwt import token_ttl_seconds
from ..deps import DbSession

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: DbSession):
    """
    Register a new dashboard user.

    New accounts always get the viewer role; roles are raised by an admin.
    """
    user_repo = UserRepository(db)

    if await user_repo.email_exists(request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    await user_repo.create(User(
        name=request.name,
        email=request.email,
        password_hash=hash_password(request.password),
        role=UserRole.VIEWER,
    ))

    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: DbSession):
    """
    Login with email and password.

    Returns a bearer token for the REST API and the live channel.
    """
    user = await UserRepository(db).get_by_email(request.email)

    if not user or not verify_password(request.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email or password",
        )

    token = create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
    )

    return LoginResponse(
        token=token,
        expires_in=token_ttl_seconds(),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=IdentityResponse)
async def me(auth: CurrentUser):
    """Get the identity carried by the current token."""
    return IdentityResponse(
        id=auth.user_id,
        email=auth.email,
        role=auth.role,
        expires_at=auth.token_data.exp,
    )
