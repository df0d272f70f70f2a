"""
Verification Flow

Issue / confirm state machine shared by every one-time-code purpose:

    no record -> issued -> consumed | expired | exhausted

Purpose-specific behaviour comes from a VerificationPurposeHooks object.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, User, VerificationRecord
from src.libs.result import Error, Result, Return

from .code_generator import CodeGenerator, parse_code
from .code_hasher import CodeHasher
from .policy import VerificationPolicy
from .purposes import VerificationPurposeHooks

logger = logging.getLogger(__name__)


class VerificationFlow:
    """
    Generic one-time-code flow.

    Business Rules:
    - Issuing replaces any earlier record for the same (user, purpose)
    - Issuing is subject to the resend cooldown and hourly cap
    - Codes expire after 15 minutes and lock after 5 wrong attempts
    - An attempt is reserved in the database before the code is compared,
      so parallel guesses cannot get past the cap
    - Only a wrong code keeps its attempt; a correct one hands it back and
      a malformed one never takes one
    - The notification is handed off after commit and never awaited

    Both operations run inside the caller's ``async with uow`` block and
    commit on their own.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hooks: VerificationPurposeHooks,
        hasher: CodeHasher,
        dispatcher: INotificationDispatcher,
        policy: Optional[VerificationPolicy] = None,
        generator: Optional[CodeGenerator] = None,
        clock: Callable = utc_now,
    ):
        self.uow = uow
        self.hooks = hooks
        self.hasher = hasher
        self.dispatcher = dispatcher
        self.policy = policy or VerificationPolicy()
        self.generator = generator or CodeGenerator()
        self.clock = clock

    async def initiate(
        self, user: User, payload: Optional[str] = None
    ) -> Result[Optional[VerificationRecord]]:
        """
        Issue a fresh code and send it.

        Returns:
            Result with the new record, None when the account needs no code,
            or RATE_LIMITED / RESEND_LIMIT_REACHED
        """
        purpose = self.hooks.purpose
        user_id = user.id

        if self.hooks.should_skip(user):
            logger.info("Skipping %s code for user %s", purpose.value, user_id)
            return Return.ok(None)

        now = self.clock()
        records = self.uow.verification_records

        existing = await records.get_for_user(user_id, purpose)
        gate = self.policy.check_resend(existing, now)
        if gate.is_err():
            logger.info(
                "Refused %s code for user %s: %s", purpose.value, user_id, gate.error.code
            )
            return Return.err(gate.error)

        # Delete-then-insert; the (user_id, purpose) unique index settles races
        await records.delete_for_user(user_id, purpose)

        code = self.generator.generate()
        binding = self.hooks.binding_identity(user, payload)
        recipient = self.hooks.recipient(user, payload)
        context = {
            "code": code,
            "expires_minutes": int(self.policy.code_ttl.total_seconds() // 60),
            **self.hooks.notification_context(user, payload),
        }

        record = VerificationRecord(
            user_id=user_id,
            purpose=purpose,
            payload=payload,
            code_hash=self.hasher.hash(binding, code),
            attempts=0,
            send_count=gate.value + 1,
            used=False,
            expires_at=now + self.policy.code_ttl,
            last_sent_at=now,
        )

        try:
            record = await records.create(record)
            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="verification_code_issued",
                    event_metadata={
                        "purpose": purpose.value,
                        "send_count": record.send_count,
                    },
                )
            )
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            logger.info("Concurrent %s code issuance for user %s", purpose.value, user_id)
            return Return.err(
                Error("RATE_LIMITED", "Please wait before requesting another code.")
            )

        logger.info(
            "Issued %s code for user %s (send %d in window)",
            purpose.value,
            user_id,
            record.send_count,
        )

        self.dispatcher.notify(recipient, self.hooks.template, context)

        return Return.ok(record)

    async def complete(
        self, user: User, code: str, payload: Optional[str] = None, **kwargs
    ) -> Result[VerificationRecord]:
        """
        Confirm a submitted code and apply the purpose's side effect.

        Args:
            user: Account the code was issued to
            code: Submitted code
            payload: Purpose payload the code must have been issued for
            **kwargs: Passed through to the purpose side effect

        Errors:
            - INVALID_CODE_FORMAT: Not exactly 6 digits
            - VERIFICATION_NOT_FOUND: No pending code
            - CODE_ALREADY_USED: Code already consumed
            - CODE_EXPIRED: Past expiry
            - TOO_MANY_ATTEMPTS: Attempt budget spent
            - INVALID_CODE: Wrong code (costs one attempt)
            - purpose conflict error from the side effect
        """
        parsed = parse_code(code)
        if parsed.is_err():
            return Return.err(parsed.error)
        code = parsed.value

        purpose = self.hooks.purpose
        label = self.hooks.code_label
        user_id = user.id
        now = self.clock()
        records = self.uow.verification_records

        record = await records.get_for_user(user_id, purpose)
        if record is None or (payload is not None and record.payload != payload):
            return Return.err(
                Error(
                    "VERIFICATION_NOT_FOUND",
                    f"No pending {label} found. Please request a new code.",
                )
            )

        if record.used:
            return Return.err(
                Error(
                    "CODE_ALREADY_USED",
                    f"This {label} was already used. Please request a new code.",
                )
            )

        if now > record.expires_at:
            if self.hooks.delete_when_expired:
                await records.delete(record)
                await self.uow.commit()
            return Return.err(
                Error(
                    "CODE_EXPIRED",
                    f"The {label} has expired. Please request a new code.",
                )
            )

        too_many_attempts = Error(
            "TOO_MANY_ATTEMPTS", "Too many attempts. Please request a new code."
        )
        if record.attempts >= self.policy.max_attempts:
            return Return.err(too_many_attempts)

        record_id = record.id

        # The row read above may be stale under concurrency; the attempt is
        # reserved in the database before the code is compared
        reserved = await records.reserve_attempt(
            record_id, max_attempts=self.policy.max_attempts
        )
        if not reserved:
            await self.uow.rollback()
            logger.info("No attempts left on %s code for user %s", purpose.value, user_id)
            return Return.err(too_many_attempts)

        binding = self.hooks.binding_identity(user, record.payload)
        submitted_hash = self.hasher.hash(binding, code)

        if not self.hasher.equals(record.code_hash, submitted_hash):
            # The reservation stands as the spent attempt
            await self.uow.commit()
            logger.info("Wrong %s code for user %s", purpose.value, user_id)
            return Return.err(Error("INVALID_CODE", f"Invalid {label}."))

        try:
            side_effect = await self.hooks.apply_side_effect(
                self.uow, user, record, **kwargs
            )
            if side_effect.is_err():
                await self.uow.rollback()
                return Return.err(side_effect.error)

            consumed = await records.consume(
                record_id, mark_used=self.hooks.mark_used_on_success
            )
            if not consumed:
                # Another request consumed the record first
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "CODE_ALREADY_USED",
                        f"This {label} was already used. Please request a new code.",
                    )
                )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action=self.hooks.audit_action,
                    event_metadata={"purpose": purpose.value},
                )
            )
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            return Return.err(self.hooks.conflict_error())

        logger.info("Confirmed %s code for user %s", purpose.value, user_id)
        return Return.ok(record)
