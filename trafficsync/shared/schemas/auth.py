"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from ..db.models import UserRole


class LoginRequest(BaseModel):
    """Login request schema."""
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterRequest(BaseModel):
    """Registration request schema."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    """User response schema."""
    id: UUID
    name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Login response: bearer token plus the user it identifies."""
    token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user: UserResponse


class IdentityResponse(BaseModel):
    """Identity carried by the current token."""
    id: UUID
    email: str
    role: UserRole
    expires_at: datetime
