"""
Pytest Configuration and Shared Fixtures

Provides mocked Rekognition and Gmail collaborators, sample S3 events,
and test utilities.
"""

import os
from unittest.mock import MagicMock

import pytest

# Set test environment before importing application modules
os.environ["TEXTALERT_AWS_REGION"] = "us-east-1"
os.environ["TEXTALERT_NOTIFICATION_RECIPIENT"] = "ops@example.com"
os.environ["TEXTALERT_NOTIFICATION_SENDER"] = "alerts@example.com"
os.environ["TEXTALERT_GMAIL_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["TEXTALERT_GMAIL_CLIENT_SECRET"] = "test-client-secret"
os.environ["TEXTALERT_GMAIL_REFRESH_TOKEN"] = "test-refresh-token"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from lambdas.image_text_notifier.handler import get_pipeline  # noqa: E402
from lambdas.image_text_notifier.notifier import Notifier  # noqa: E402
from lambdas.image_text_notifier.text_detector import TextDetector  # noqa: E402
from textalert.config import Settings, get_settings  # noqa: E402
from textalert.models.detection import ObjectReference  # noqa: E402


@pytest.fixture(autouse=True)
def clear_cached_clients():
    """Reset the per-execution-context caches between tests."""
    get_settings.cache_clear()
    get_pipeline.cache_clear()
    yield
    get_settings.cache_clear()
    get_pipeline.cache_clear()


# --- Settings Fixtures ---


@pytest.fixture
def settings() -> Settings:
    """Settings with every OAuth field populated."""
    return Settings(
        aws_region="us-east-1",
        gmail_client_id="test-client-id.apps.googleusercontent.com",
        gmail_client_secret="test-client-secret",
        gmail_refresh_token="test-refresh-token",
        gmail_access_token="test-access-token",
        notification_recipient="ops@example.com",
        notification_sender="alerts@example.com",
    )


# --- Object Fixtures ---


@pytest.fixture
def object_ref() -> ObjectReference:
    """Reference matching the sample upload."""
    return ObjectReference(
        bucket="mybucket",
        key="input.jpeg",
        version="F6AB7EUdI1gxuCOxWrPWuNZp7nRMmJQX",
    )


@pytest.fixture
def sample_text() -> str:
    """Text returned by DetectText for the sample upload."""
    return "NOTHING\nEXISTS\nEXCEPT ATOMS"


# --- Collaborator Fixtures ---


@pytest.fixture
def rekognition_client() -> MagicMock:
    """Rekognition client returning no labels unless configured."""
    client = MagicMock()
    client.detect_labels.return_value = {"Labels": []}
    client.detect_text.return_value = {"TextDetections": []}
    return client


@pytest.fixture
def gmail_service() -> MagicMock:
    """Gmail API service whose send call succeeds."""
    service = MagicMock()
    send = service.users.return_value.messages.return_value.send
    send.return_value.execute.return_value = {"id": "gmail-msg-001"}
    return service


@pytest.fixture
def gmail_send(gmail_service: MagicMock) -> MagicMock:
    """The users().messages().send method of the mocked service."""
    return gmail_service.users.return_value.messages.return_value.send


@pytest.fixture
def detector(rekognition_client: MagicMock) -> TextDetector:
    return TextDetector(rekognition_client, max_labels=10)


@pytest.fixture
def notifier(gmail_service: MagicMock) -> Notifier:
    return Notifier(
        gmail_service,
        sender_identity="me",
        recipient="ops@example.com",
        sender="alerts@example.com",
    )
