"""
S3 Event Models

Pydantic models for the S3 event notification records delivered to the
Lambda function. Only the fields the pipeline reads are declared; the rest
of the AWS payload is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class S3Bucket(BaseModel):
    """Bucket entity of an S3 event record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Source bucket name")
    arn: str | None = Field(default=None, description="Bucket ARN")


class S3Object(BaseModel):
    """Object entity of an S3 event record."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    key: str = Field(..., min_length=1, description="URL-encoded object key")
    version_id: str | None = Field(
        default=None,
        alias="versionId",
        description="Object version (absent for non-versioned buckets)",
    )
    size: int | None = Field(default=None, ge=0, description="Object size in bytes")
    e_tag: str | None = Field(default=None, alias="eTag")


class S3Entity(BaseModel):
    """The `s3` block of an event record."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    bucket: S3Bucket
    s3_object: S3Object = Field(..., alias="object")


class S3EventRecord(BaseModel):
    """One record of an S3 event notification batch."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    event_source: str | None = Field(default=None, alias="eventSource")
    event_name: str | None = Field(default=None, alias="eventName")
    event_time: str | None = Field(default=None, alias="eventTime")
    aws_region: str | None = Field(default=None, alias="awsRegion")
    s3: S3Entity
