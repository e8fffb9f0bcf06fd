"""Decoding check requests and encoding check responses."""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from imagecheck.models.source import CheckRequest, CheckResponse, Version
from imagecheck.utils.errors import EncodingError, InvalidPayloadError

_RESPONSE_ADAPTER = TypeAdapter(list[Version])


def decode_request(payload: str | bytes) -> CheckRequest:
    """Decode a JSON check request.

    Unknown fields are rejected.

    Raises:
        InvalidPayloadError: If the payload is not a valid request
    """
    if not payload or not payload.strip():
        raise InvalidPayloadError("empty request")

    try:
        return CheckRequest.model_validate_json(payload)
    except ValidationError as e:
        raise InvalidPayloadError(str(e)) from e


def encode_response(response: CheckResponse) -> str:
    """Encode a check response as a JSON array.

    Raises:
        EncodingError: If the response cannot be serialized
    """
    try:
        return _RESPONSE_ADAPTER.dump_json(response).decode()
    except (ValidationError, ValueError, TypeError) as e:
        raise EncodingError(str(e)) from e
