"""
Rekognition Tools

Label detection and text extraction for images stored in S3.
Both calls read the image directly from S3; no object content passes
through the function.
"""

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from textalert.config import Settings, get_settings
from textalert.exceptions import DetectionError
from textalert.models.detection import Label, ObjectReference

log = structlog.get_logger()


def build_rekognition_client(settings: Settings | None = None):
    """
    Build a Rekognition client bounded by the configured timeouts.

    Retries are disabled: a failed call fails the record outright.
    """
    settings = settings or get_settings()
    client_config = Config(
        connect_timeout=settings.connect_timeout_seconds,
        read_timeout=settings.read_timeout_seconds,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    return boto3.client("rekognition", config=client_config, **settings.rekognition_config)


def _raise_detection_error(
    operation: str,
    ref: ObjectReference,
    error: ClientError | BotoCoreError,
) -> None:
    if isinstance(error, ClientError):
        error_code = error.response.get("Error", {}).get("Code")
        error_message = error.response.get("Error", {}).get("Message")
    else:
        error_code = type(error).__name__
        error_message = str(error)

    log.error(
        "rekognition_call_failed",
        operation=operation,
        error_code=error_code,
        error_message=error_message,
        **ref.log_context(),
    )

    raise DetectionError(
        operation=operation,
        bucket=ref.bucket,
        key=ref.key,
        error_code=error_code,
        error_message=error_message,
    ) from error


def detect_labels(
    client,
    ref: ObjectReference,
    *,
    max_labels: int | None = None,
    min_confidence: float | None = None,
) -> list[Label]:
    """
    Detect labels on an S3 image.

    Args:
        client: Rekognition client
        ref: Object to analyse
        max_labels: MaxLabels request parameter
        min_confidence: MinConfidence request parameter

    Returns:
        Labels in the order Rekognition returned them

    Raises:
        DetectionError: If the Rekognition call fails
    """
    params = {"Image": ref.to_rekognition_image()}
    if max_labels is not None:
        params["MaxLabels"] = max_labels
    if min_confidence is not None:
        params["MinConfidence"] = min_confidence

    try:
        response = client.detect_labels(**params)
    except (ClientError, BotoCoreError) as e:
        _raise_detection_error("detect_labels", ref, e)

    labels = [
        Label(name=item["Name"], confidence=item.get("Confidence", 0.0))
        for item in response.get("Labels", [])
    ]

    log.info(
        "labels_detected",
        label_count=len(labels),
        labels=[label.name for label in labels],
        **ref.log_context(),
    )

    return labels


def detect_text(client, ref: ObjectReference) -> str:
    """
    Extract text from an S3 image.

    Only LINE detections are kept; WORD detections repeat the same text.

    Returns:
        Detected lines joined with newlines, in returned order

    Raises:
        DetectionError: If the Rekognition call fails
    """
    try:
        response = client.detect_text(Image=ref.to_rekognition_image())
    except (ClientError, BotoCoreError) as e:
        _raise_detection_error("detect_text", ref, e)

    lines = [
        detection["DetectedText"]
        for detection in response.get("TextDetections", [])
        if detection.get("Type") == "LINE"
    ]
    text = "\n".join(lines)

    log.info(
        "text_extracted",
        line_count=len(lines),
        text_length=len(text),
        **ref.log_context(),
    )

    return text
