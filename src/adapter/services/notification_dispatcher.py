import asyncio
import logging
from typing import Any, Dict, Set

from src.app.services.notification_dispatcher import (
    IEmailSender,
    INotificationDispatcher,
)
from src.adapter.services.email_templates import EmailTemplateRenderer

logger = logging.getLogger(__name__)


class BackgroundNotificationDispatcher(INotificationDispatcher):
    """
    Delivers notifications on background asyncio tasks.

    Each delivery is its own error boundary: rendering or relay failures are
    logged and dropped, never raised into the request that scheduled them.
    There is no retry; a lost code is recovered by requesting a new one.
    The context may carry a one-time code, so it is never logged.
    """

    def __init__(
        self,
        sender: IEmailSender,
        renderer: EmailTemplateRenderer,
        timeout_seconds: float = 15.0,
    ):
        self.sender = sender
        self.renderer = renderer
        self.timeout_seconds = timeout_seconds
        # Strong references so pending tasks are not garbage collected
        self._pending: Set[asyncio.Task] = set()

    def notify(self, to: str, template: str, context: Dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(
            self._deliver(to, template, dict(context))
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, to: str, template: str, context: Dict[str, Any]) -> None:
        try:
            email = self.renderer.render(template, context)
            await asyncio.wait_for(
                self.sender.send(to, email.subject, email.html_body),
                timeout=self.timeout_seconds,
            )
            logger.info("Sent %s email to %s", template, to)
        except Exception:
            logger.exception("Failed to send %s email to %s", template, to)

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
