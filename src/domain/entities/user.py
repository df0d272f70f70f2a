"""
User Entity

Represents an account that signs in with email and password.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - an account identified by its email address.

    Business Rules:
    - Email must be unique across all users, stored trimmed and lowercased
    - Email verification required before login
    - Password stored as bcrypt hash; None for accounts created by an
      external identity provider that never set a password
    - notifications_enabled only gates optional notices (password changed,
      email changed); verification and reset codes are always sent
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=320)
    password_hash: Optional[str] = Field(default=None, max_length=60)

    status: UserStatus = Field(default=UserStatus.active)
    email_verified: bool = Field(default=False)
    notifications_enabled: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_email_verified", "email_verified"),)
