"""
Detection Notifier

Composes the detection email and hands it to Gmail.
"""

import structlog

from textalert.config import Settings
from textalert.models.detection import NotificationMessage, ObjectReference
from textalert.tools.gmail import send_message

log = structlog.get_logger()

SUBJECT_TEMPLATE = "Text detected in s3://{bucket}/{key} (version: {version})"


def _header_safe(value: str) -> str:
    """Escape control characters (S3 keys may contain CR/LF) for a header value."""
    return "".join(
        char if char.isprintable() else char.encode("unicode_escape").decode("ascii")
        for char in value
    )


def build_subject(ref: ObjectReference) -> str:
    """Subject line identifying the object; contains no timestamps or counters."""
    return SUBJECT_TEMPLATE.format(
        bucket=_header_safe(ref.bucket),
        key=_header_safe(ref.key),
        version=_header_safe(ref.version) or "none",
    )


def compose_message(
    ref: ObjectReference,
    text: str,
    *,
    recipient: str,
    sender: str,
) -> NotificationMessage:
    """Build the email for a detection. The body is the extracted text verbatim."""
    return NotificationMessage(
        recipient=recipient,
        sender=sender,
        subject=build_subject(ref),
        body=text,
        content_type="text/plain",
    )


class Notifier:
    """Sends one email per positive detection."""

    def __init__(
        self,
        service,
        *,
        sender_identity: str,
        recipient: str,
        sender: str,
    ) -> None:
        self._service = service
        self._sender_identity = sender_identity
        self._recipient = recipient
        self._sender = sender

    @classmethod
    def from_settings(cls, service, settings: Settings) -> "Notifier":
        return cls(
            service,
            sender_identity=settings.gmail_user_id,
            recipient=settings.notification_recipient,
            sender=settings.notification_sender,
        )

    def notify(self, ref: ObjectReference, text: str) -> str:
        """
        Compose and send the detection email.

        Returns:
            Gmail message ID

        Raises:
            ValueError: If text is blank
            NotificationError: If the send call fails
        """
        if not text or not text.strip():
            raise ValueError("Extracted text must not be empty")

        message = compose_message(
            ref,
            text,
            recipient=self._recipient,
            sender=self._sender,
        )
        message_id = send_message(self._service, self._sender_identity, message)

        log.info(
            "detection_notified",
            message_id=message_id,
            **ref.log_context(),
        )
        return message_id
