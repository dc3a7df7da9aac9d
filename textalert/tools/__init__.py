# Shared Tools
"""
Clients for the external collaborators: Rekognition (vision) and Gmail (mail).
"""

from textalert.tools.gmail import (
    build_credentials,
    build_gmail_service,
    encode_message,
    send_message,
)
from textalert.tools.rekognition import (
    build_rekognition_client,
    detect_labels,
    detect_text,
)

__all__ = [
    # Rekognition tools
    "build_rekognition_client",
    "detect_labels",
    "detect_text",
    # Gmail tools
    "build_credentials",
    "build_gmail_service",
    "encode_message",
    "send_message",
]
