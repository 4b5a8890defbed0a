"""Application DTOs for accounts and authentication."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from core.domain.enums import UserRole


class UserContext(BaseModel):
    """Authenticated principal, decoded from the bearer token."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(default="", description="Display name")
    role: UserRole = Field(..., description="Account role")

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class RegisterRequest(BaseModel):
    """Request DTO for self-registration."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6, description="Plain password")
    name: str = Field(..., min_length=1, description="Display name")
    role: UserRole = Field(default=UserRole.BUYER, description="BUYER or PRODUCER")
    phone: Optional[str] = Field(None, description="Phone number")
    business_name: Optional[str] = Field(None, description="Producer business name")
    location: Optional[str] = Field(None, description="Producer location")

    model_config = {"frozen": True}


class LoginRequest(BaseModel):
    """Request DTO for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Plain password")

    model_config = {"frozen": True}


class UserDTO(BaseModel):
    """Response DTO for a user profile."""

    id: str
    email: str
    name: str
    role: UserRole
    phone: Optional[str] = None
    buyer_id: Optional[str] = Field(None, description="Buyer profile ID")
    producer_id: Optional[str] = Field(None, description="Producer profile ID")
    business_name: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}


class TokenDTO(BaseModel):
    """Access token response."""

    access_token: str
    token_type: str = "bearer"
    user: UserDTO

    model_config = {"frozen": True}
