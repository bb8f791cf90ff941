"""
Pydantic schemas for user-related request/response validation.
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, EmailStr, Field

UserRole = Literal["tenant", "owner"]


class UserCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=150)
    # bcrypt only considers the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    role: UserRole = "tenant"


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole


class CallerSession(BaseModel):
    """Identity of the caller for the current request, as issued in the token."""

    id: int
    role: UserRole

    model_config = {"frozen": True}

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"

    @property
    def is_tenant(self) -> bool:
        return self.role == "tenant"
