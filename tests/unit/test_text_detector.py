"""
Unit tests for text detection.

Tests cover:
- Rekognition tools: detect_labels, detect_text (request shapes via Stubber)
- Label policy: find_text_label
- Orchestration: TextDetector.detect
"""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from botocore.stub import Stubber

from tests.utils.event_generator import rekognition_labels, rekognition_text
from textalert.exceptions import DetectionError
from textalert.models.detection import Label, ObjectReference


@pytest.fixture
def stubbed_rekognition():
    """Real Rekognition client with a botocore Stubber attached."""
    client = boto3.client("rekognition", region_name="us-east-1")
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


# ============================================================================
# Rekognition Tool Tests
# ============================================================================

class TestDetectLabels:
    """Tests for the detect_labels tool."""

    def test_request_includes_version(self, stubbed_rekognition, object_ref):
        """Test that the S3 object version is sent when present."""
        from textalert.tools.rekognition import detect_labels

        client, stubber = stubbed_rekognition
        stubber.add_response(
            "detect_labels",
            rekognition_labels(("Text", 98.0), ("Document", 91.5)),
            expected_params={
                "Image": {
                    "S3Object": {
                        "Bucket": "mybucket",
                        "Name": "input.jpeg",
                        "Version": object_ref.version,
                    }
                },
                "MaxLabels": 10,
            },
        )

        labels = detect_labels(client, object_ref, max_labels=10)

        assert labels == [
            Label(name="Text", confidence=98.0),
            Label(name="Document", confidence=91.5),
        ]

    def test_request_without_version(self, stubbed_rekognition):
        """Test that non-versioned objects omit Version and optional params."""
        from textalert.tools.rekognition import detect_labels

        client, stubber = stubbed_rekognition
        ref = ObjectReference(bucket="mybucket", key="photos/cat.png")
        stubber.add_response(
            "detect_labels",
            rekognition_labels(("Cat", 97.2)),
            expected_params={
                "Image": {"S3Object": {"Bucket": "mybucket", "Name": "photos/cat.png"}},
            },
        )

        labels = detect_labels(client, ref)

        assert [label.name for label in labels] == ["Cat"]

    def test_min_confidence_is_sent(self, stubbed_rekognition, object_ref):
        """Test that MinConfidence is passed through."""
        from textalert.tools.rekognition import detect_labels

        client, stubber = stubbed_rekognition
        stubber.add_response(
            "detect_labels",
            rekognition_labels(),
            expected_params={
                "Image": object_ref.to_rekognition_image(),
                "MaxLabels": 5,
                "MinConfidence": 80.0,
            },
        )

        assert detect_labels(client, object_ref, max_labels=5, min_confidence=80.0) == []

    def test_client_error_raises_detection_error(self, stubbed_rekognition, object_ref):
        """Test that a remote error becomes DetectionError."""
        from textalert.tools.rekognition import detect_labels

        client, stubber = stubbed_rekognition
        stubber.add_client_error(
            "detect_labels",
            service_error_code="ThrottlingException",
            service_message="Rate exceeded",
        )

        with pytest.raises(DetectionError) as exc_info:
            detect_labels(client, object_ref)

        assert exc_info.value.operation == "detect_labels"
        assert exc_info.value.error_code == "ThrottlingException"
        assert exc_info.value.bucket == "mybucket"
        assert "Rate exceeded" in str(exc_info.value)

    def test_connection_error_raises_detection_error(self, object_ref):
        """Test that transport failures become DetectionError."""
        from textalert.tools.rekognition import detect_labels

        client = MagicMock()
        client.detect_labels.side_effect = EndpointConnectionError(
            endpoint_url="https://rekognition.us-east-1.amazonaws.com"
        )

        with pytest.raises(DetectionError) as exc_info:
            detect_labels(client, object_ref)

        assert exc_info.value.error_code == "EndpointConnectionError"


class TestDetectText:
    """Tests for the detect_text tool."""

    def test_joins_lines_and_skips_words(self, stubbed_rekognition, object_ref, sample_text):
        """Test that LINE detections are joined with newlines."""
        from textalert.tools.rekognition import detect_text

        client, stubber = stubbed_rekognition
        stubber.add_response(
            "detect_text",
            rekognition_text(sample_text),
            expected_params={"Image": object_ref.to_rekognition_image()},
        )

        assert detect_text(client, object_ref) == sample_text

    def test_no_detections_returns_empty(self, stubbed_rekognition, object_ref):
        """Test an image with no text detections."""
        from textalert.tools.rekognition import detect_text

        client, stubber = stubbed_rekognition
        stubber.add_response("detect_text", {"TextDetections": []})

        assert detect_text(client, object_ref) == ""

    def test_invalid_image_raises_detection_error(self, stubbed_rekognition, object_ref):
        """Test that a malformed object becomes DetectionError."""
        from textalert.tools.rekognition import detect_text

        client, stubber = stubbed_rekognition
        stubber.add_client_error(
            "detect_text",
            service_error_code="InvalidImageFormatException",
            service_message="Request has unsupported image format",
        )

        with pytest.raises(DetectionError) as exc_info:
            detect_text(client, object_ref)

        assert exc_info.value.operation == "detect_text"
        assert exc_info.value.error_code == "InvalidImageFormatException"


class TestBuildRekognitionClient:
    """Tests for build_rekognition_client function."""

    def test_client_uses_settings(self, settings):
        """Test region and bounded timeouts without retries."""
        from textalert.tools.rekognition import build_rekognition_client

        client = build_rekognition_client(settings)

        assert client.meta.region_name == "us-east-1"
        assert client.meta.config.connect_timeout == settings.connect_timeout_seconds
        assert client.meta.config.read_timeout == settings.read_timeout_seconds
        assert client.meta.config.retries["total_max_attempts"] == 1


# ============================================================================
# Label Policy Tests
# ============================================================================

class TestFindTextLabel:
    """Tests for find_text_label function."""

    def test_finds_text_label_at_any_position(self):
        """Test a Text label after other labels."""
        from lambdas.image_text_notifier.text_detector import find_text_label

        labels = [Label(name="Person", confidence=99.0), Label(name="Text", confidence=87.0)]

        assert find_text_label(labels) == Label(name="Text", confidence=87.0)

    def test_first_match_wins(self):
        """Test that the first Text label in returned order is chosen."""
        from lambdas.image_text_notifier.text_detector import find_text_label

        labels = [
            Label(name="Text", confidence=60.0),
            Label(name="Text", confidence=99.0),
        ]

        assert find_text_label(labels).confidence == 60.0

    def test_match_is_case_sensitive(self):
        """Test that 'text' and 'TEXT' do not match."""
        from lambdas.image_text_notifier.text_detector import find_text_label

        labels = [Label(name="text", confidence=99.0), Label(name="TEXT", confidence=99.0)]

        assert find_text_label(labels) is None

    def test_no_labels(self):
        """Test an empty label sequence."""
        from lambdas.image_text_notifier.text_detector import find_text_label

        assert find_text_label([]) is None

    def test_stops_at_first_match(self):
        """Test that evaluation stops once a match is found."""
        from lambdas.image_text_notifier.text_detector import find_text_label

        consumed = []

        def labels():
            for name in ("Text", "Paper", "Page"):
                consumed.append(name)
                yield Label(name=name, confidence=90.0)

        find_text_label(labels())

        assert consumed == ["Text"]


# ============================================================================
# TextDetector Tests
# ============================================================================

class TestTextDetector:
    """Tests for TextDetector.detect."""

    def test_text_label_triggers_extraction(
        self, detector, rekognition_client, object_ref, sample_text
    ):
        """Test the positive path: two calls with the same reference."""
        rekognition_client.detect_labels.return_value = rekognition_labels(("Text", 98.0))
        rekognition_client.detect_text.return_value = rekognition_text(sample_text)

        result = detector.detect(object_ref)

        assert result.detected is True
        assert result.text == sample_text
        assert result.text_label.name == "Text"
        rekognition_client.detect_text.assert_called_once_with(
            Image=object_ref.to_rekognition_image()
        )
        labels_image = rekognition_client.detect_labels.call_args.kwargs["Image"]
        assert labels_image == object_ref.to_rekognition_image()

    def test_no_text_label_skips_extraction(self, detector, rekognition_client, object_ref):
        """Test the negative path: one call, no extraction."""
        rekognition_client.detect_labels.return_value = rekognition_labels(("Person", 90.0))

        result = detector.detect(object_ref)

        assert result.detected is False
        assert result.text is None
        assert [label.name for label in result.labels] == ["Person"]
        rekognition_client.detect_labels.assert_called_once()
        rekognition_client.detect_text.assert_not_called()

    def test_text_label_with_blank_text_is_not_detected(
        self, detector, rekognition_client, object_ref
    ):
        """Test that a Text label without extractable lines is no detection."""
        rekognition_client.detect_labels.return_value = rekognition_labels(("Text", 55.0))
        rekognition_client.detect_text.return_value = {"TextDetections": []}

        result = detector.detect(object_ref)

        assert result.detected is False
        assert result.text == ""

    def test_label_failure_propagates(self, detector, rekognition_client, object_ref):
        """Test that label detection errors surface as DetectionError."""
        rekognition_client.detect_labels.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "Access denied"}},
            "DetectLabels",
        )

        with pytest.raises(DetectionError):
            detector.detect(object_ref)

        rekognition_client.detect_text.assert_not_called()

    def test_from_settings(self, rekognition_client, settings, object_ref):
        """Test that label parameters come from settings."""
        from lambdas.image_text_notifier.text_detector import TextDetector

        settings = settings.model_copy(
            update={"rekognition_max_labels": 25, "rekognition_min_confidence": 70.0}
        )
        detector = TextDetector.from_settings(rekognition_client, settings)

        detector.detect(object_ref)

        call_kwargs = rekognition_client.detect_labels.call_args.kwargs
        assert call_kwargs["MaxLabels"] == 25
        assert call_kwargs["MinConfidence"] == 70.0
