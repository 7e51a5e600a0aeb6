"""Email and SMS delivery of pay package summaries.

Senders are opaque sinks: they take a recipient and a rendered body and
either return a message id or raise. Every attempt, successful or not, is
recorded as a CommunicationLog on the package, and a successful send sets the
package's email_sent/sms_sent flag.

Backends (profile.yaml ``notifications``):
- email: "smtp" (smtplib) or "outbox" (JSON files in <data_dir>/outbox/)
- sms:   "outbox", or "none" when no SMS provider is configured
"""

import json
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from pathlib import Path
from typing import Callable, Optional, Protocol

from .config import get_agency_profile, get_notification_settings, get_outbox_path
from .formatting import email_subject, format_for_email, format_for_sms
from .schemas import AgencyProfile, CommunicationLog, EmailSettings, SmsSettings
from .store import PackageNotFoundError, RecordStore

logger = logging.getLogger(__name__)


class NotificationNotConfiguredError(Exception):
    """Raised when a delivery channel has no usable backend."""
    pass


class EmailSender(Protocol):
    def send_email(self, recipient: str, subject: str, html: str) -> str:
        ...


class SmsSender(Protocol):
    def send_sms(self, recipient: str, body: str) -> str:
        ...


class SmtpEmailSender:
    """Send HTML email through an SMTP relay."""

    def __init__(self, settings: EmailSettings, timeout: float = 30):
        self.settings = settings
        self.timeout = timeout

    def send_email(self, recipient: str, subject: str, html: str) -> str:
        message = EmailMessage()
        message["From"] = self.settings.sender
        message["To"] = recipient
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content("This message contains an HTML pay package summary.")
        message.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.timeout) as smtp:
            if self.settings.use_tls:
                smtp.starttls()
            if self.settings.username:
                smtp.login(self.settings.username, self.settings.password or "")
            smtp.send_message(message)

        return message["Message-ID"]


class OutboxSender:
    """Write messages to an outbox directory instead of delivering them.

    Used for development and for agencies that hand messages to another
    system. Each message is one JSON file named after its message id.
    """

    def __init__(self, outbox: Optional[Path] = None, sender: Optional[str] = None):
        self.outbox = Path(outbox) if outbox is not None else get_outbox_path()
        self.sender = sender

    def _write(self, channel: str, payload: dict) -> str:
        self.outbox.mkdir(parents=True, exist_ok=True)
        message_id = make_msgid(domain="outbox.staff-calc").strip("<>")
        path = self.outbox / f"{channel}-{message_id.split('@')[0]}.json"
        with open(path, "w") as f:
            json.dump({"id": message_id, "channel": channel, "from": self.sender, **payload}, f, indent=2)
        return message_id

    def send_email(self, recipient: str, subject: str, html: str) -> str:
        return self._write("email", {"to": recipient, "subject": subject, "html": html})

    def send_sms(self, recipient: str, body: str) -> str:
        return self._write("sms", {"to": recipient, "body": body})


class DisabledSmsSender:
    """Placeholder used when no SMS backend is configured."""

    def send_sms(self, recipient: str, body: str) -> str:
        raise NotificationNotConfiguredError("SMS service not configured properly")


def get_email_sender(settings: Optional[EmailSettings] = None) -> EmailSender:
    """Build the email sender configured in the profile."""
    settings = settings or get_notification_settings().email
    if settings.backend == "smtp":
        return SmtpEmailSender(settings)
    return OutboxSender(sender=settings.sender)


def get_sms_sender(settings: Optional[SmsSettings] = None) -> SmsSender:
    """Build the SMS sender configured in the profile."""
    settings = settings or get_notification_settings().sms
    if settings.backend == "outbox":
        return OutboxSender(sender=settings.sender)
    return DisabledSmsSender()


@dataclass
class DeliveryResult:
    """Outcome of one delivery attempt."""

    status: str  # "success" or "failed"
    log: CommunicationLog
    message_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


def _deliver(
    store: RecordStore,
    package_id: int,
    channel: str,
    recipient: str,
    send: Callable[[], str],
) -> DeliveryResult:
    try:
        message_id = send()
    except Exception as e:
        logger.error(f"Failed to send {channel} for pay package {package_id} to {recipient}: {e}")
        log = store.create_communication_log({
            "pay_package_id": package_id,
            "type": channel,
            "recipient": recipient,
            "status": "failed",
            "error_message": str(e),
        })
        return DeliveryResult(status="failed", log=log, error=str(e))

    log = store.create_communication_log({
        "pay_package_id": package_id,
        "type": channel,
        "recipient": recipient,
        "status": "success",
    })
    store.update_package(package_id, {f"{channel}_sent": True})
    logger.info(f"Sent {channel} for pay package {package_id} to {recipient} ({message_id})")
    return DeliveryResult(status="success", log=log, message_id=message_id)


def send_package_email(
    store: RecordStore,
    package_id: int,
    recipient: str,
    sender: Optional[EmailSender] = None,
    agency: Optional[AgencyProfile] = None,
    include_agency: bool = False,
) -> DeliveryResult:
    """Email a stored pay package summary.

    Delivery failures do not raise; they come back as status "failed" with
    the error captured in the communication log.

    Raises:
        ValueError: If recipient is empty
        PackageNotFoundError: If package_id is unknown
    """
    if not recipient or not recipient.strip():
        raise ValueError("Recipient email address is required")
    package = store.get_package(package_id)
    if package is None:
        raise PackageNotFoundError(package_id)

    agency = agency or get_agency_profile()
    html = format_for_email(package, agency=agency, include_agency=include_agency)

    def send() -> str:
        return (sender or get_email_sender()).send_email(recipient, email_subject(package), html)

    return _deliver(store, package_id, "email", recipient, send)


def send_package_sms(
    store: RecordStore,
    package_id: int,
    phone_number: str,
    sender: Optional[SmsSender] = None,
    agency: Optional[AgencyProfile] = None,
    include_agency: bool = False,
) -> DeliveryResult:
    """Text a stored pay package summary. Same contract as send_package_email."""
    if not phone_number or not phone_number.strip():
        raise ValueError("Recipient phone number is required")
    package = store.get_package(package_id)
    if package is None:
        raise PackageNotFoundError(package_id)

    agency = agency or get_agency_profile()
    body = format_for_sms(package, agency=agency, include_agency=include_agency)

    def send() -> str:
        return (sender or get_sms_sender()).send_sms(phone_number, body)

    return _deliver(store, package_id, "sms", phone_number, send)
