"""Core version discovery."""

from imagecheck.core.check import VersionChecker
from imagecheck.core.payload import decode_request, encode_response
from imagecheck.core.resolver import NOT_FOUND, Resolution, resolve

__all__ = [
    "VersionChecker",
    "decode_request",
    "encode_response",
    "NOT_FOUND",
    "Resolution",
    "resolve",
]
