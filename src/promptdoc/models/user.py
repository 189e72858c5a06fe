from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from promptdoc.models.base import Base, int_pk, created_at
from promptdoc.models.enums import ThemePreference, UserRole


class User(Base):
    __tablename__ = "users"

    id: Mapped[int_pk]
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.user,
        server_default="user",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true"),
    )
    theme_preference: Mapped[ThemePreference] = mapped_column(
        Enum(ThemePreference, name="theme_preference"),
        nullable=False,
        default=ThemePreference.system,
        server_default="system",
    )
    created_at: Mapped[created_at]
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
