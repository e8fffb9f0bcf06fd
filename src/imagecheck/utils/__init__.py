"""Utility functions for image-check."""

from imagecheck.utils.logging import configure_logging, get_logger, get_logger_with_context
from imagecheck.utils.errors import (
    ImageCheckError,
    InvalidPayloadError,
    InvalidSourceError,
    AuthenticationFailedError,
    MirrorUnavailableError,
    OriginResolutionError,
    EncodingError,
)
from imagecheck.utils.config import (
    ImageCheckConfig,
    RegistryConfig,
    LoggingConfig,
    PlatformConfig,
    load_config,
    save_config,
    get_config,
    set_config,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    # Errors
    "ImageCheckError",
    "InvalidPayloadError",
    "InvalidSourceError",
    "AuthenticationFailedError",
    "MirrorUnavailableError",
    "OriginResolutionError",
    "EncodingError",
    # Config
    "ImageCheckConfig",
    "RegistryConfig",
    "LoggingConfig",
    "PlatformConfig",
    "load_config",
    "save_config",
    "get_config",
    "set_config",
]
