"""
S3 Event Decoder

Turns an S3 event notification batch into ObjectReference values.
Decoding is pure: no client calls, no side effects besides logging.
"""

from typing import Any
from urllib.parse import unquote_plus

import structlog
from pydantic import ValidationError

from textalert.exceptions import DecodeError
from textalert.models.detection import ObjectReference
from textalert.models.events import S3EventRecord

log = structlog.get_logger()

S3_TEST_EVENT = "s3:TestEvent"
OBJECT_CREATED_PREFIX = "ObjectCreated:"


def extract_records(event: Any) -> list[Any]:
    """
    Return the raw records of a notification batch.

    Handles both:
    - S3 event notifications ({"Records": [...]})
    - The s3:TestEvent S3 sends when a notification is configured

    Raises:
        DecodeError: If the batch envelope is malformed
    """
    if not isinstance(event, dict):
        raise DecodeError(f"Expected a JSON object, got {type(event).__name__}")

    if event.get("Event") == S3_TEST_EVENT:
        log.info("s3_test_event_received", bucket=event.get("Bucket"))
        return []

    if "Records" not in event:
        raise DecodeError("No Records in event", field="Records")

    records = event["Records"]
    if not isinstance(records, list):
        raise DecodeError(
            f"Records must be a list, got {type(records).__name__}",
            field="Records",
        )

    return records


def _error_field(error: ValidationError) -> str | None:
    errors = error.errors()
    if not errors:
        return None
    return ".".join(str(part) for part in errors[0]["loc"])


def decode_record(raw: Any, index: int) -> ObjectReference:
    """
    Decode one S3 event record.

    The object key arrives form-encoded (spaces as '+') and is unquoted.
    A missing versionId maps to an empty version.

    Args:
        raw: One element of the Records list
        index: Position of the record in the batch

    Returns:
        ObjectReference for the record

    Raises:
        DecodeError: If bucket name or object key is missing or empty
    """
    if not isinstance(raw, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(raw).__name__}",
            record_index=index,
        )

    try:
        record = S3EventRecord.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(
            f"Invalid S3 event record: {e.error_count()} validation error(s)",
            record_index=index,
            field=_error_field(e),
        ) from e

    key = unquote_plus(record.s3.s3_object.key)
    if not key:
        raise DecodeError("Object key is empty", record_index=index, field="s3.object.key")

    return ObjectReference(
        bucket=record.s3.bucket.name,
        key=key,
        version=record.s3.s3_object.version_id or "",
    )


def is_object_created(raw: dict[str, Any]) -> bool:
    """Whether a record reports an object creation. Records without eventName count."""
    event_name = raw.get("eventName")
    if event_name is None:
        return True
    return str(event_name).startswith(OBJECT_CREATED_PREFIX)
