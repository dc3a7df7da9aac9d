#!/usr/bin/env python3
"""
Local Invoke: ImageTextNotifier

Runs the Lambda handler against real Rekognition and Gmail using the
TEXTALERT_* settings from the environment or .env.local.

Usage:
    # Build an S3 event for one object
    python scripts/local_invoke.py --bucket mybucket --key input.jpeg

    # Versioned object
    python scripts/local_invoke.py --bucket mybucket --key input.jpeg --version-id F6AB...

    # Replay a captured S3 event
    python scripts/local_invoke.py --event-file event.json

    # Show the event without invoking
    python scripts/local_invoke.py --bucket mybucket --key input.jpeg --dry-run
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def build_event(bucket: str, key: str, version_id: str | None = None) -> dict[str, Any]:
    """Build a single-record s3:ObjectCreated:Put event."""
    s3_object: dict[str, Any] = {"key": quote_plus(key), "size": 0}
    if version_id:
        s3_object["versionId"] = version_id

    return {
        "Records": [
            {
                "eventVersion": "2.1",
                "eventSource": "aws:s3",
                "eventName": "ObjectCreated:Put",
                "s3": {
                    "s3SchemaVersion": "1.0",
                    "bucket": {"name": bucket, "arn": f"arn:aws:s3:::{bucket}"},
                    "object": s3_object,
                },
            }
        ]
    }


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Invoke the ImageTextNotifier handler locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--event-file",
        type=Path,
        help="Path to an S3 event JSON file",
    )
    source_group.add_argument(
        "--bucket",
        help="Bucket of the object to process (requires --key)",
    )
    parser.add_argument("--key", help="Object key")
    parser.add_argument("--version-id", help="Object version ID")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the event and exit",
    )
    args = parser.parse_args()

    if args.event_file:
        event = json.loads(args.event_file.read_text(encoding="utf-8"))
    else:
        if not args.key:
            parser.error("--key is required with --bucket")
        event = build_event(args.bucket, args.key, args.version_id)

    if args.dry_run:
        print(json.dumps(event, indent=2))
        return 0

    from lambdas.image_text_notifier.handler import lambda_handler

    result = lambda_handler(event, None)
    print(json.dumps(result, indent=2, default=str))
    return 0 if result["body"].get("ok") else 1


if __name__ == "__main__":
    sys.exit(main())
