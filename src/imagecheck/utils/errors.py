"""Error types for image-check."""

from __future__ import annotations

from typing import Any

from imagecheck.models.common import ErrorReport


class ImageCheckError(Exception):
    """Base exception for image-check."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_error_report(self) -> ErrorReport:
        """Convert to ErrorReport model."""
        return ErrorReport(code=self.code, message=self.message, details=self.details)


class InvalidPayloadError(ImageCheckError):
    """The check request could not be decoded."""

    def __init__(self, message: str):
        super().__init__(f"invalid payload: {message}", code="INVALID_PAYLOAD")


class InvalidSourceError(ImageCheckError):
    """The source repository or mirror host failed validation."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="INVALID_SOURCE", details=details)


class AuthenticationFailedError(ImageCheckError):
    """A configured credential exchange did not produce credentials."""

    def __init__(self, message: str = "cannot authenticate with ECR"):
        super().__init__(message, code="AUTH_FAILED")


class MirrorUnavailableError(ImageCheckError):
    """Resolving the tag on the registry mirror failed or found nothing.

    Never aborts a check; the checker logs it and falls back to the origin.
    """

    def __init__(self, host: str, reason: str):
        super().__init__(
            f"checking mirror {host} failed: {reason}",
            code="MIRROR_UNAVAILABLE",
            details={"registry": host},
        )


class OriginResolutionError(ImageCheckError):
    """Resolving the tag on the origin registry failed."""

    def __init__(self, host: str, reason: str):
        super().__init__(
            f"checking origin {host} failed: {reason}",
            code="ORIGIN_RESOLUTION_FAILED",
            details={"registry": host},
        )


class EncodingError(ImageCheckError):
    """The check response could not be serialized."""

    def __init__(self, message: str):
        super().__init__(f"could not marshal JSON: {message}", code="ENCODING_FAILED")
