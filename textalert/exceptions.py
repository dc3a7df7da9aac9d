"""
Custom Exceptions for the Image Text Notifier

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class TextAlertError(Exception):
    """Base exception for the image text notification pipeline."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    @property
    def kind(self) -> str:
        """Error kind used in structured log entries."""
        return type(self).__name__


@dataclass
class ConfigurationError(TextAlertError):
    """Required configuration is missing or invalid."""

    setting: str

    def __init__(self, setting: str, error_message: str | None = None) -> None:
        self.setting = setting
        super().__init__(
            f"Invalid configuration for '{setting}': {error_message or 'value is required'}",
            setting=setting,
        )


@dataclass
class DecodeError(TextAlertError):
    """A notification record (or the whole batch envelope) could not be decoded."""

    reason: str
    record_index: int | None = None
    field: str | None = None

    def __init__(
        self,
        reason: str,
        record_index: int | None = None,
        field: str | None = None,
    ) -> None:
        self.reason = reason
        self.record_index = record_index
        self.field = field
        where = "batch" if record_index is None else f"record {record_index}"
        super().__init__(
            f"Failed to decode {where}: {reason}",
            record_index=record_index,
            field=field,
        )

    @property
    def systemic(self) -> bool:
        """Whether the error concerns the batch envelope rather than one record."""
        return self.record_index is None


@dataclass
class DetectionError(TextAlertError):
    """Vision analysis call failed (network, auth, throttling, bad object)."""

    operation: str  # "detect_labels", "detect_text"
    bucket: str
    key: str
    error_code: str | None = None

    def __init__(
        self,
        operation: str,
        bucket: str,
        key: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.error_code = error_code
        super().__init__(
            f"Rekognition {operation} failed for s3://{bucket}/{key}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            error_code=error_code,
        )


@dataclass
class NotificationError(TextAlertError):
    """Mail dispatch call failed."""

    recipient: str
    error_code: str | None = None

    def __init__(
        self,
        recipient: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.recipient = recipient
        self.error_code = error_code
        super().__init__(
            f"Gmail send failed for {recipient}: {error_message or 'Unknown error'}",
            recipient=recipient,
            error_code=error_code,
        )
