from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence


@dataclass(frozen=True)
class MailConfig:
    host: str
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    sender: str = "no-reply@localhost"
    use_tls: bool = True
    timeout_seconds: float = 30.0
    enabled: bool = True

    @classmethod
    def from_dict(cls, mail_config: dict) -> "MailConfig":
        return cls(
            host=str(mail_config.get("host") or ""),
            port=int(mail_config.get("port", 587)),
            username=mail_config.get("username") or None,
            password=mail_config.get("password") or None,
            sender=str(mail_config.get("sender") or mail_config.get("username") or "no-reply@localhost"),
            use_tls=bool(mail_config.get("use_tls", True)),
            timeout_seconds=float(mail_config.get("timeout_seconds", 30)),
            enabled=bool(mail_config.get("enabled", True)),
        )

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.host)


@dataclass(frozen=True)
class Recipient:
    key: int
    email: str
    name: str
    context: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SendResult:
    key: int
    email: str
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BulkSendResult:
    results: tuple[SendResult, ...] = ()

    @property
    def sent_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def for_key(self, key: int) -> Optional[SendResult]:
        for r in self.results:
            if r.key == key:
                return r
        return None


class EmailSender(Protocol):
    def send_bulk(
        self,
        recipients: Sequence[Recipient],
        subject: str,
        template_fn: Callable[[Recipient], str],
    ) -> BulkSendResult:
        """Send one message per recipient.

        A failure for one recipient is reported in its SendResult. Raises
        ServiceUnavailableError when the transport itself cannot be reached.
        """

        raise NotImplementedError

    def verify(self) -> None:
        """Raise ServiceUnavailableError unless the transport accepts a login."""

        raise NotImplementedError
