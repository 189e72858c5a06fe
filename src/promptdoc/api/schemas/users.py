"""User management schemas."""

from datetime import datetime

from pydantic import BaseModel


class UpdateUserRequest(BaseModel):
    role: str | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: str | None = None
    role: str
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None
