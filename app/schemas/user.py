from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional, List

from app.models.user import UserRole, UserStatus
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel, OptionalText, OptionalUrl


class UserBase(ApiModel):
    """Base user schema."""
    firebase_uid: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    display_name: OptionalText = None
    photo_url: OptionalUrl = None
    role: UserRole = UserRole.user
    estado: UserStatus = UserStatus.activo


class UserCreate(UserBase):
    """Schema for creating a user."""
    pass


class UserUpdate(ApiModel):
    """Schema for updating a user (all fields optional)."""
    email: Optional[EmailStr] = None
    display_name: OptionalText = None
    photo_url: OptionalUrl = None
    role: Optional[UserRole] = None
    estado: Optional[UserStatus] = None

    @field_validator("email", "role", "estado", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v


class UserResponse(ApiModel):
    """Schema for user response."""
    id: int
    firebase_uid: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole
    estado: Optional[UserStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserListResponse(ListEnvelope):
    """User list response."""
    users: List[UserResponse]
