from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import VerificationPurpose, VerificationRecord


class IVerificationRecordRepository(ABC):
    """VerificationRecord repository interface - application layer"""

    @abstractmethod
    async def get_for_user(
        self, user_id: UUID, purpose: VerificationPurpose
    ) -> Optional[VerificationRecord]:
        """Get the record issued to a user for a purpose"""
        pass

    @abstractmethod
    async def create(self, record: VerificationRecord) -> VerificationRecord:
        """Create a new record"""
        pass

    @abstractmethod
    async def delete_for_user(self, user_id: UUID, purpose: VerificationPurpose) -> int:
        """Delete any record for (user, purpose), returns rows deleted"""
        pass

    @abstractmethod
    async def delete(self, record: VerificationRecord) -> None:
        """Delete a single record"""
        pass

    @abstractmethod
    async def reserve_attempt(self, record_id: UUID, max_attempts: int) -> bool:
        """
        Atomically spend one attempt on an unused record under the cap.

        Returns False when the record is used, gone or out of attempts.
        The reservation holds until the transaction ends.
        """
        pass

    @abstractmethod
    async def consume(self, record_id: UUID, mark_used: bool) -> bool:
        """
        Consume a record that is still unused, returning its reserved attempt.

        Marks it used (mark_used=True) or deletes it. Returns False when
        another request already consumed it.
        """
        pass
