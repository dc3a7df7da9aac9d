"""
ImageTextNotifier Lambda

Triggered by S3 object-created notifications.
Emails the text found in newly uploaded images.

Trigger: S3 event notification (s3:ObjectCreated:*)
Output: Gmail message per image containing text

Flow:
1. Decode S3 records into object references
2. Detect labels; continue only on a "Text" label
3. Extract text
4. Send the text by email
"""

from lambdas.image_text_notifier.event_decoder import decode_record, extract_records
from lambdas.image_text_notifier.handler import (
    BatchResult,
    RecordOutcome,
    RecordResult,
    lambda_handler,
    process_batch,
)
from lambdas.image_text_notifier.notifier import Notifier, build_subject, compose_message
from lambdas.image_text_notifier.text_detector import TextDetector, find_text_label

__all__ = [
    "lambda_handler",
    "process_batch",
    "BatchResult",
    "RecordOutcome",
    "RecordResult",
    "decode_record",
    "extract_records",
    "Notifier",
    "build_subject",
    "compose_message",
    "TextDetector",
    "find_text_label",
]
