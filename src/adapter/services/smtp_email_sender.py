import asyncio
import smtplib
from email.message import EmailMessage
from typing import Optional

from src.app.services.notification_dispatcher import IEmailSender


class SmtpEmailSender(IEmailSender):
    """
    Sends HTML mail through an SMTP relay.

    smtplib is blocking, so each send runs in a worker thread. The socket
    timeout keeps a dead relay from pinning that thread indefinitely.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        from_name: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = False,
        timeout_seconds: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.from_email = from_email
        self.from_name = from_name
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config) -> "SmtpEmailSender":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            from_email=config.SMTP_FROM_EMAIL,
            from_name=config.SMTP_FROM_NAME,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            timeout_seconds=config.SMTP_TIMEOUT_SECONDS,
        )

    def build_message(self, to: str, subject: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Your email client does not support HTML.")
        msg.add_alternative(html_body, subtype="html")
        return msg

    async def send(self, to: str, subject: str, html_body: str) -> None:
        msg = self.build_message(to, subject, html_body)
        await asyncio.to_thread(self._send_blocking, msg)

    def _send_blocking(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as s:
            if self.use_tls:
                s.starttls()
            if self.username:
                s.login(self.username, self.password or "")
            s.send_message(msg)
