from __future__ import annotations

import logging
import smtplib
import ssl
import time
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Callable, Sequence

from ..core.exceptions import ServiceUnavailableError
from .email_sender import BulkSendResult, EmailSender, MailConfig, Recipient, SendResult

logger = logging.getLogger(__name__)


class SmtpEmailSender(EmailSender):
    """Sends HTML mail over one SMTP session, one recipient at a time."""

    def __init__(self, config: MailConfig, *, delay_seconds: float = 0.5, sleep: Callable[[float], None] = time.sleep):
        self._config = config
        self._delay = delay_seconds
        self._sleep = sleep

    def _open(self) -> smtplib.SMTP:
        cfg = self._config
        if not cfg.is_configured:
            raise ServiceUnavailableError("Email service is not configured")
        try:
            if cfg.port == 465:
                server = smtplib.SMTP_SSL(cfg.host, cfg.port, context=ssl.create_default_context(), timeout=cfg.timeout_seconds)
            else:
                server = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout_seconds)
                if cfg.use_tls:
                    server.starttls(context=ssl.create_default_context())
            if cfg.username and cfg.password:
                server.login(cfg.username, cfg.password)
            return server
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP connection to %s:%s failed: %s", cfg.host, cfg.port, e)
            raise ServiceUnavailableError(f"Email service unavailable: {e}") from e

    def _build(self, recipient: Recipient, subject: str, html: str) -> tuple[MIMEMultipart, str]:
        msg = MIMEMultipart("alternative")
        message_id = make_msgid(domain=self._config.sender.rsplit("@", 1)[-1].rstrip(">"))
        msg["Subject"] = subject
        msg["From"] = self._config.sender
        msg["To"] = recipient.email
        msg["Message-ID"] = message_id
        msg.attach(MIMEText(html, "html"))
        return msg, message_id

    def verify(self) -> None:
        with self._open():
            pass

    def send_bulk(
        self,
        recipients: Sequence[Recipient],
        subject: str,
        template_fn: Callable[[Recipient], str],
    ) -> BulkSendResult:
        if not recipients:
            return BulkSendResult()

        results: list[SendResult] = []
        envelope_from = self._config.sender.split("<")[-1].rstrip(">")
        with self._open() as server:
            for i, recipient in enumerate(recipients):
                if i:
                    self._sleep(self._delay)
                try:
                    msg, message_id = self._build(recipient, subject, template_fn(recipient))
                    server.sendmail(envelope_from, [recipient.email], msg.as_string())
                except Exception as e:
                    logger.warning("Email to %s failed: %s", recipient.email, e)
                    results.append(SendResult(key=recipient.key, email=recipient.email, success=False, error=str(e)))
                    continue
                logger.info("Email sent to %s (%s)", recipient.email, message_id)
                results.append(SendResult(key=recipient.key, email=recipient.email, success=True, message_id=message_id))

        return BulkSendResult(results=tuple(results))
