"""
Gmail Tools

Builds the Gmail API service from OAuth credentials held in settings and
sends single plain-text messages through users.messages.send.
"""

import base64
from email.message import EmailMessage

import httplib2
import structlog
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from textalert.config import GMAIL_SEND_SCOPE, Settings, get_settings
from textalert.exceptions import ConfigurationError, NotificationError
from textalert.models.detection import NotificationMessage

log = structlog.get_logger()


def build_credentials(settings: Settings | None = None) -> Credentials:
    """
    Build OAuth user credentials for the Gmail send scope.

    The access token may be absent or stale; google-auth refreshes it
    from the refresh token on the first request.

    Raises:
        ConfigurationError: If client ID, client secret or refresh token is missing
    """
    settings = settings or get_settings()

    for name in ("gmail_client_id", "gmail_client_secret", "gmail_refresh_token"):
        if not getattr(settings, name):
            raise ConfigurationError(setting=name)

    return Credentials(
        token=settings.gmail_access_token,
        refresh_token=settings.gmail_refresh_token,
        token_uri=settings.gmail_token_uri,
        client_id=settings.gmail_client_id,
        client_secret=settings.gmail_client_secret,
        scopes=[GMAIL_SEND_SCOPE],
    )


def build_gmail_service(settings: Settings | None = None):
    """Build an authenticated Gmail API service with a bounded HTTP timeout."""
    settings = settings or get_settings()
    credentials = build_credentials(settings)

    http = AuthorizedHttp(
        credentials,
        http=httplib2.Http(timeout=settings.read_timeout_seconds),
    )
    service = build("gmail", "v1", http=http, cache_discovery=False)

    log.info("gmail_service_initialized", user_id=settings.gmail_user_id)
    return service


def encode_message(message: NotificationMessage) -> dict[str, str]:
    """
    Encode a notification as a Gmail API message body.

    Returns:
        {"raw": <base64url RFC 5322 message>}
    """
    mime = EmailMessage()
    mime["To"] = message.recipient
    mime["From"] = message.sender
    mime["Subject"] = message.subject
    maintype, _, subtype = message.content_type.partition("/")
    if maintype != "text":
        raise ValueError(f"Unsupported content type: {message.content_type}")
    mime.set_content(message.body, subtype=subtype or "plain", charset="utf-8")

    raw = base64.urlsafe_b64encode(mime.as_bytes()).decode("ascii")
    return {"raw": raw}


def send_message(service, sender_identity: str, message: NotificationMessage) -> str:
    """
    Send one message via the Gmail API.

    Args:
        service: Gmail API service
        sender_identity: userId for the send call ("me" for the token owner)
        message: Message to send

    Returns:
        Gmail message ID

    Raises:
        NotificationError: If the send call fails
    """
    body = encode_message(message)

    log.info(
        "sending_gmail_message",
        to=message.recipient,
        subject=message.subject[:120],
    )

    try:
        response = (
            service.users()
            .messages()
            .send(userId=sender_identity, body=body)
            .execute()
        )
    except HttpError as e:
        log.error(
            "gmail_send_failed",
            to=message.recipient,
            status=e.resp.status,
            error_message=e.reason,
        )
        raise NotificationError(
            recipient=message.recipient,
            error_code=str(e.resp.status),
            error_message=e.reason,
        ) from e
    except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
        log.error(
            "gmail_send_failed",
            to=message.recipient,
            error_code=type(e).__name__,
            error_message=str(e),
        )
        raise NotificationError(
            recipient=message.recipient,
            error_code=type(e).__name__,
            error_message=str(e),
        ) from e

    message_id = response.get("id", "unknown")
    log.info("gmail_message_sent", message_id=message_id, to=message.recipient)

    return message_id
