# Shared Models
"""
Pydantic models for S3 events and per-record detection values.
"""

from textalert.models.detection import (
    TEXT_LABEL_NAME,
    DetectionResult,
    Label,
    NotificationMessage,
    ObjectReference,
)
from textalert.models.events import (
    S3Bucket,
    S3Entity,
    S3EventRecord,
    S3Object,
)

__all__ = [
    # Detection values
    "TEXT_LABEL_NAME",
    "DetectionResult",
    "Label",
    "NotificationMessage",
    "ObjectReference",
    # S3 events
    "S3Bucket",
    "S3Entity",
    "S3EventRecord",
    "S3Object",
]
