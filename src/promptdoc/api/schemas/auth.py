"""Auth and profile request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str
    name: str | None = Field(default=None, min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserInfo(BaseModel):
    id: int
    email: str
    name: str | None = None
    role: str
    theme_preference: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    # None while the account awaits admin approval
    access_token: str | None = None
    token_type: str = "bearer"
    user: UserInfo


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    theme_preference: str | None = None
