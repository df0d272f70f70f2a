"""
VerificationRecord Entity

Pending one-time code for a single (user, purpose) pair.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import VerificationPurpose


class VerificationRecord(SQLModel, table=True):
    """
    VerificationRecord entity - hashed six-digit code awaiting confirmation.

    Business Rules:
    - At most one record per (user_id, purpose); a new code replaces the old one
    - Only the HMAC of the code is stored, never the code itself
    - Expires 15 minutes after issuance
    - attempts only grows, and only on a wrong code; 5 wrong codes lock the record
    - send_count / last_sent_at drive the resend cooldown and hourly cap
    - payload holds purpose-specific data bound into the hash
      (the target address for an email change)
    """

    __tablename__ = "verification_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False)
    purpose: VerificationPurpose = Field(nullable=False)
    payload: Optional[str] = Field(default=None, max_length=320)

    code_hash: str = Field(max_length=200)
    attempts: int = Field(default=0)
    send_count: int = Field(default=1)
    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    last_sent_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("user_id", "purpose", name="uq_verification_user_purpose"),
        Index("idx_verification_expires_at", "expires_at"),
    )
