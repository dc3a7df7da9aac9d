"""
Detection Models

Value objects passed between the decoder, the text detector and the
notifier. All of them are immutable and live for one record only.
"""

from pydantic import BaseModel, ConfigDict, Field

TEXT_LABEL_NAME = "Text"


class ObjectReference(BaseModel):
    """Identity of one stored object."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(..., min_length=1, description="Bucket name")
    key: str = Field(..., min_length=1, description="Object key (decoded)")
    version: str = Field(
        default="",
        description="Opaque version ID, empty for non-versioned buckets",
    )

    @property
    def s3_uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def to_rekognition_image(self) -> dict:
        """Build the Image parameter for Rekognition calls."""
        s3_object = {"Bucket": self.bucket, "Name": self.key}
        if self.version:
            s3_object["Version"] = self.version
        return {"S3Object": s3_object}

    def log_context(self) -> dict[str, str]:
        return {"bucket": self.bucket, "key": self.key, "version": self.version}


class Label(BaseModel):
    """A classification label returned by label detection."""

    model_config = ConfigDict(frozen=True)

    name: str
    confidence: float = Field(default=0.0, ge=0, le=100)


class DetectionResult(BaseModel):
    """Outcome of running text detection on one object."""

    model_config = ConfigDict(frozen=True)

    labels: tuple[Label, ...] = ()
    text_label: Label | None = None
    text: str | None = None

    @property
    def detected(self) -> bool:
        """True only when extracted text is present and not blank."""
        return bool(self.text and self.text.strip())


class NotificationMessage(BaseModel):
    """Email composed for a positive detection."""

    model_config = ConfigDict(frozen=True)

    recipient: str
    sender: str
    subject: str
    body: str
    content_type: str = "text/plain"
