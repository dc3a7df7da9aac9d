# Shared Infrastructure for the Image Text Notifier
"""
Shared infrastructure components for the image text notifier.

This package provides:
- Pydantic models for S3 events and detection values
- Tool implementations for Rekognition and Gmail
- Configuration management
- Custom exceptions
"""

from textalert.config import Settings, get_settings
from textalert.exceptions import (
    ConfigurationError,
    DecodeError,
    DetectionError,
    NotificationError,
    TextAlertError,
)

__all__ = [
    # Exceptions
    "TextAlertError",
    "ConfigurationError",
    "DecodeError",
    "DetectionError",
    "NotificationError",
    # Config
    "Settings",
    "get_settings",
]
