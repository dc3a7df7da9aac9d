"""
ImageTextNotifier Lambda Handler

Main entry point for S3 object-created notifications.
Checks each new image for text and emails the extracted text.

Trigger: S3 event notification (s3:ObjectCreated:*)
Output: One Gmail message per image containing text

Flow:
1. Extract the Records list from the S3 event
2. Decode each record into an ObjectReference
3. Detect labels with Rekognition; stop unless a "Text" label is present
4. Extract the text with Rekognition
5. Send the text by email through the Gmail API
6. Return a summary of per-record outcomes

Each record is isolated: a failing record is logged and counted,
and processing continues with the next one.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any

import structlog

from lambdas.image_text_notifier.event_decoder import (
    decode_record,
    extract_records,
    is_object_created,
)
from lambdas.image_text_notifier.notifier import Notifier
from lambdas.image_text_notifier.text_detector import TextDetector
from textalert.config import get_settings
from textalert.exceptions import (
    DecodeError,
    DetectionError,
    NotificationError,
)
from textalert.models.detection import ObjectReference
from textalert.tools.gmail import build_gmail_service
from textalert.tools.rekognition import build_rekognition_client

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


class RecordOutcome(str, Enum):
    """Outcome of processing one notification record."""

    NO_DETECTION = "no_detection"
    NOTIFIED = "notified"
    IGNORED = "ignored"
    DECODE_ERROR = "decode_error"
    DETECTION_ERROR = "detection_error"
    NOTIFICATION_ERROR = "notification_error"
    UNEXPECTED_ERROR = "unexpected_error"


FAILED_OUTCOMES = frozenset({
    RecordOutcome.DECODE_ERROR,
    RecordOutcome.DETECTION_ERROR,
    RecordOutcome.NOTIFICATION_ERROR,
    RecordOutcome.UNEXPECTED_ERROR,
})


@dataclass
class RecordResult:
    """Outcome of one record."""

    index: int
    outcome: RecordOutcome
    reference: ObjectReference | None = None
    error: str | None = None
    error_kind: str | None = None
    message_id: str | None = None

    @property
    def failed(self) -> bool:
        return self.outcome in FAILED_OUTCOMES

    def to_summary(self) -> dict[str, Any]:
        """Convert to the per-record entry of the invocation result."""
        summary: dict[str, Any] = {"index": self.index, "outcome": self.outcome.value}
        if self.reference:
            summary.update(self.reference.log_context())
        if self.error:
            summary["error_kind"] = self.error_kind
            summary["error"] = self.error
        if self.message_id:
            summary["message_id"] = self.message_id
        return summary


@dataclass
class BatchResult:
    """Summary of one invocation."""

    records: list[RecordResult] = field(default_factory=list)
    systemic_error: str | None = None
    duration_ms: float = 0.0

    def count(self, outcome: RecordOutcome) -> int:
        return sum(1 for record in self.records if record.outcome == outcome)

    @property
    def ok(self) -> bool:
        """
        Whether the invocation succeeded as a whole.

        Per-record failures do not fail the invocation; a malformed envelope
        or a batch in which every record failed to decode does.
        """
        if self.systemic_error:
            return False
        if self.records and self.count(RecordOutcome.DECODE_ERROR) == len(self.records):
            return False
        return True


@dataclass(frozen=True)
class Pipeline:
    """Collaborators injected into batch processing."""

    detector: TextDetector
    notifier: Notifier


@lru_cache(maxsize=1)
def get_pipeline() -> Pipeline:
    """
    Build the Rekognition and Gmail clients once per execution context.

    Reused across warm invocations.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    detector = TextDetector.from_settings(build_rekognition_client(settings), settings)
    notifier = Notifier.from_settings(build_gmail_service(settings), settings)

    log.info(
        "pipeline_initialized",
        region=settings.aws_region,
        recipient=settings.notification_recipient,
    )
    return Pipeline(detector=detector, notifier=notifier)


def _log_record_result(result: RecordResult) -> None:
    context = result.reference.log_context() if result.reference else {}
    if result.failed:
        log.error(
            "record_processed",
            index=result.index,
            outcome=result.outcome.value,
            error_kind=result.error_kind,
            error=result.error,
            **context,
        )
    else:
        log.info(
            "record_processed",
            index=result.index,
            outcome=result.outcome.value,
            message_id=result.message_id,
            **context,
        )


def process_record(
    raw: Any,
    index: int,
    *,
    detector: TextDetector,
    notifier: Notifier,
) -> RecordResult:
    """
    Process one notification record.

    Never raises for record-level failures; the failure is returned
    as the record's outcome.
    """
    try:
        ref = decode_record(raw, index)
    except DecodeError as e:
        return RecordResult(
            index=index,
            outcome=RecordOutcome.DECODE_ERROR,
            error=str(e),
            error_kind=e.kind,
        )

    if not is_object_created(raw):
        log.info("record_not_object_created", index=index, event_name=raw.get("eventName"))
        return RecordResult(index=index, outcome=RecordOutcome.IGNORED, reference=ref)

    try:
        detection = detector.detect(ref)
        if not detection.detected:
            return RecordResult(index=index, outcome=RecordOutcome.NO_DETECTION, reference=ref)

        message_id = notifier.notify(ref, detection.text)
        return RecordResult(
            index=index,
            outcome=RecordOutcome.NOTIFIED,
            reference=ref,
            message_id=message_id,
        )

    except DetectionError as e:
        outcome = RecordOutcome.DETECTION_ERROR
        error: Exception = e
    except NotificationError as e:
        outcome = RecordOutcome.NOTIFICATION_ERROR
        error = e
    except Exception as e:
        log.exception("record_processing_failed", index=index, **ref.log_context())
        outcome = RecordOutcome.UNEXPECTED_ERROR
        error = e

    return RecordResult(
        index=index,
        outcome=outcome,
        reference=ref,
        error=str(error),
        error_kind=type(error).__name__,
    )


def process_batch(
    event: Any,
    *,
    detector: TextDetector,
    notifier: Notifier,
) -> BatchResult:
    """
    Process a notification batch record by record, in order.

    Args:
        event: S3 event notification payload
        detector: Text detector
        notifier: Detection notifier

    Returns:
        BatchResult with one RecordResult per input record
    """
    start_time = time.time()
    result = BatchResult()

    try:
        records = extract_records(event)
    except DecodeError as e:
        log.error("batch_decode_failed", error=str(e), field=e.field)
        result.systemic_error = str(e)
        result.duration_ms = (time.time() - start_time) * 1000
        return result

    log.info("batch_decoded", record_count=len(records))

    for index, raw in enumerate(records):
        record_result = process_record(raw, index, detector=detector, notifier=notifier)
        _log_record_result(record_result)
        result.records.append(record_result)

    result.duration_ms = (time.time() - start_time) * 1000
    return result


def _record_count(event: Any) -> int | None:
    records = event.get("Records") if isinstance(event, dict) else None
    return len(records) if isinstance(records, list) else None


def _build_response(result: BatchResult) -> dict[str, Any]:
    return {
        "statusCode": 200 if result.ok else 500,
        "body": {
            "ok": result.ok,
            "records": len(result.records),
            "notified": result.count(RecordOutcome.NOTIFIED),
            "no_detection": result.count(RecordOutcome.NO_DETECTION),
            "ignored": result.count(RecordOutcome.IGNORED),
            "failed": sum(1 for record in result.records if record.failed),
            "outcomes": [record.to_summary() for record in result.records],
            "error": result.systemic_error,
            "duration_ms": round(result.duration_ms, 2),
        },
    }


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda entry point for S3 image text notifications.

    Args:
        event: S3 event notification
        context: Lambda execution context

    Returns:
        Processing result with status and per-record outcomes
    """
    remaining_ms = None
    if context is not None and hasattr(context, "get_remaining_time_in_millis"):
        remaining_ms = context.get_remaining_time_in_millis()

    log.info(
        "lambda_invoked",
        record_count=_record_count(event),
        remaining_time_ms=remaining_ms,
    )

    try:
        pipeline = get_pipeline()
    except Exception as e:
        log.exception("pipeline_initialization_failed", error=str(e))
        return {
            "statusCode": 500,
            "body": {"ok": False, "error": str(e)},
        }

    result = process_batch(event, detector=pipeline.detector, notifier=pipeline.notifier)

    log.info(
        "batch_processed",
        ok=result.ok,
        records=len(result.records),
        notified=result.count(RecordOutcome.NOTIFIED),
        no_detection=result.count(RecordOutcome.NO_DETECTION),
        failed=sum(1 for record in result.records if record.failed),
        duration_ms=result.duration_ms,
    )

    return _build_response(result)
