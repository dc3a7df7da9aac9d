"""
Text Detector

Label detection acts as a cheap filter: full text extraction is only
requested for images carrying a "Text" label.
"""

from collections.abc import Iterable

import structlog

from textalert.config import Settings
from textalert.models.detection import (
    TEXT_LABEL_NAME,
    DetectionResult,
    Label,
    ObjectReference,
)
from textalert.tools.rekognition import detect_labels, detect_text

log = structlog.get_logger()


def find_text_label(labels: Iterable[Label]) -> Label | None:
    """
    Return the first label named exactly "Text".

    Evaluation follows the given order and stops at the first match.
    The name comparison is case-sensitive.
    """
    return next((label for label in labels if label.name == TEXT_LABEL_NAME), None)


class TextDetector:
    """Runs label detection, then text extraction on a positive label."""

    def __init__(
        self,
        client,
        *,
        max_labels: int | None = None,
        min_confidence: float | None = None,
    ) -> None:
        self._client = client
        self._max_labels = max_labels
        self._min_confidence = min_confidence

    @classmethod
    def from_settings(cls, client, settings: Settings) -> "TextDetector":
        return cls(
            client,
            max_labels=settings.rekognition_max_labels,
            min_confidence=settings.rekognition_min_confidence,
        )

    def detect(self, ref: ObjectReference) -> DetectionResult:
        """
        Detect and extract text for one object.

        Returns:
            DetectionResult; `text` is None when no "Text" label was found

        Raises:
            DetectionError: If either Rekognition call fails
        """
        labels = detect_labels(
            self._client,
            ref,
            max_labels=self._max_labels,
            min_confidence=self._min_confidence,
        )

        text_label = find_text_label(labels)
        if text_label is None:
            log.info("no_text_label", **ref.log_context())
            return DetectionResult(labels=tuple(labels))

        log.info(
            "text_label_found",
            confidence=text_label.confidence,
            **ref.log_context(),
        )

        text = detect_text(self._client, ref)
        if not text.strip():
            log.warning("text_label_without_text", **ref.log_context())

        return DetectionResult(labels=tuple(labels), text_label=text_label, text=text)
