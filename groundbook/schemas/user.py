"""User and auth schemas."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserRegister(BaseModel):
    """Schema for registering a new account."""

    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    """Schema for logging in."""

    email: EmailStr
    password: str


class UserPublic(BaseModel):
    """Schema for a user as returned by the API."""

    id: int
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(UserPublic):
    """Schema for a successful login."""

    token: str
