"""Data models for image-check."""

from imagecheck.models.common import ErrorReport
from imagecheck.models.source import (
    DEFAULT_TAG,
    CheckRequest,
    CheckResponse,
    RegistryMirror,
    Source,
    Version,
)

__all__ = [
    "ErrorReport",
    "DEFAULT_TAG",
    "CheckRequest",
    "CheckResponse",
    "RegistryMirror",
    "Source",
    "Version",
]
