from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.verification_record_repository import (
    IVerificationRecordRepository,
)
from src.domain.entities import VerificationPurpose, VerificationRecord


class VerificationRecordRepository(IVerificationRecordRepository):
    """
    VerificationRecord repository implementation using SQLModel.

    Attempt counting and consumption are single conditional statements so
    that concurrent requests against one record are decided by the database,
    not by whatever copy of the row each request happened to read.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_user(
        self, user_id: UUID, purpose: VerificationPurpose
    ) -> Optional[VerificationRecord]:
        """Get the record issued to a user for a purpose"""
        stmt = select(VerificationRecord).where(
            VerificationRecord.user_id == user_id,
            VerificationRecord.purpose == purpose,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, record: VerificationRecord) -> VerificationRecord:
        """Create a new record"""
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def delete_for_user(self, user_id: UUID, purpose: VerificationPurpose) -> int:
        """Delete any record for (user, purpose), returns rows deleted"""
        stmt = delete(VerificationRecord).where(
            VerificationRecord.user_id == user_id,
            VerificationRecord.purpose == purpose,
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete(self, record: VerificationRecord) -> None:
        """Delete a single record"""
        await self.session.delete(record)
        await self.session.flush()

    async def reserve_attempt(self, record_id: UUID, max_attempts: int) -> bool:
        """Add one attempt, only if still unused and under the attempt cap"""
        stmt = (
            update(VerificationRecord)
            .where(
                VerificationRecord.id == record_id,
                VerificationRecord.used.is_(False),
                VerificationRecord.attempts < max_attempts,
            )
            .values(attempts=VerificationRecord.attempts + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def consume(self, record_id: UUID, mark_used: bool) -> bool:
        """Mark used or delete, only if still unused"""
        guard = (
            VerificationRecord.id == record_id,
            VerificationRecord.used.is_(False),
        )
        if mark_used:
            # A correct code does not count against the budget
            stmt = (
                update(VerificationRecord)
                .where(*guard)
                .values(used=True, attempts=VerificationRecord.attempts - 1)
            )
        else:
            stmt = delete(VerificationRecord).where(*guard)
        result = await self.session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
