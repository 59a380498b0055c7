"""
User and Authentication Schemas
Pydantic models for request/response validation
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, validator

from flexispace.models.user import UserType


def _check_password_strength(v: str) -> str:
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not any(char.isdigit() for char in v):
        raise ValueError("Password must contain at least one digit")
    if not any(char.isupper() for char in v):
        raise ValueError("Password must contain at least one uppercase letter")
    return v


# Authentication Schemas
class Token(BaseModel):
    """Response schema for login"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: "UserResponse"


class TokenRefresh(BaseModel):
    """Request schema for token refresh"""

    refresh_token: str


class LoginRequest(BaseModel):
    """Request schema for login"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChange(BaseModel):
    """Request schema for password change"""

    old_password: str
    new_password: str = Field(..., min_length=8)

    @validator("new_password")
    def validate_password_strength(cls, v):
        """Ensure password has minimum strength"""
        return _check_password_strength(v)


# User Schemas
class UserBase(BaseModel):
    """Base user schema with common fields"""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    company_name: Optional[str] = Field(None, max_length=255)


class UserCreate(UserBase):
    """Schema for creating a new user"""

    password: str = Field(..., min_length=8)
    user_type: UserType = UserType.GUEST

    @validator("password")
    def validate_password(cls, v):
        """Ensure password meets requirements"""
        return _check_password_strength(v)


class UserUpdate(BaseModel):
    """Schema for updating the current user's profile"""

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    company_name: Optional[str] = Field(None, max_length=255)
    image: Optional[str] = Field(None, max_length=500)


class UserResponse(BaseModel):
    """Schema for user response (without sensitive data)"""

    id: UUID
    email: str
    name: str
    phone: Optional[str] = None
    company_name: Optional[str] = None
    image: Optional[str] = None
    user_type: UserType
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Owner or guest as embedded in other responses"""

    id: UUID
    name: str
    email: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


# Update forward references
Token.model_rebuild()
