from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from src.domain.entities import VerificationRecord
from src.libs.result import Error, Result, Return


@dataclass(frozen=True)
class VerificationPolicy:
    """
    Lifetime, attempt and resend limits for one-time codes.

    Resend rules, evaluated lazily on every issuance:
    - Cooldown: no new code while a live code is younger than resend_cooldown
    - Rolling window: send_count starts over once the last send is older
      than resend_window
    - Cap: at most max_sends_per_window codes per window
    """

    code_ttl: timedelta = timedelta(minutes=15)
    max_attempts: int = 5
    resend_cooldown: timedelta = timedelta(seconds=60)
    resend_window: timedelta = timedelta(hours=1)
    max_sends_per_window: int = 5

    @classmethod
    def from_config(cls, config) -> "VerificationPolicy":
        return cls(
            code_ttl=timedelta(minutes=config.OTP_CODE_TTL_MINUTES),
            max_attempts=config.OTP_MAX_ATTEMPTS,
            resend_cooldown=timedelta(seconds=config.OTP_RESEND_COOLDOWN_SECONDS),
            resend_window=timedelta(minutes=config.OTP_RESEND_WINDOW_MINUTES),
            max_sends_per_window=config.OTP_MAX_SENDS_PER_WINDOW,
        )

    def is_live(self, record: VerificationRecord, now: datetime) -> bool:
        return not record.used and now <= record.expires_at

    def check_resend(
        self, existing: Optional[VerificationRecord], now: datetime
    ) -> Result[int]:
        """
        Decide whether a new code may be issued.

        Returns the effective send count carried into the new record
        (0 when there is no prior record or its window has rolled over).
        """
        if existing is None:
            return Return.ok(0)

        since_last_send = now - existing.last_sent_at

        if self.is_live(existing, now) and since_last_send < self.resend_cooldown:
            return Return.err(
                Error("RATE_LIMITED", "Please wait before requesting another code.")
            )

        if since_last_send >= self.resend_window:
            effective_send_count = 0
        else:
            effective_send_count = existing.send_count

        if effective_send_count >= self.max_sends_per_window:
            return Return.err(
                Error(
                    "RESEND_LIMIT_REACHED",
                    "Too many code requests. Please try again in an hour.",
                )
            )

        return Return.ok(effective_send_count)
