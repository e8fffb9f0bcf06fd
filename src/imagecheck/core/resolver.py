"""Manifest digest resolution with HEAD-then-GET fallback."""

from __future__ import annotations

import logging
from typing import NamedTuple

from imagecheck.registry.base import ManifestClient, RegistryError, RequestOptions, is_not_found
from imagecheck.registry.reference import Reference
from imagecheck.utils.logging import get_logger


class Resolution(NamedTuple):
    """Outcome of resolving a reference."""

    digest: str | None
    found: bool


NOT_FOUND = Resolution(digest=None, found=False)


def resolve(
    client: ManifestClient,
    reference: Reference,
    options: RequestOptions,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> Resolution:
    """Resolve a reference to its manifest digest.

    A HEAD request is tried first. If the registry answers it with "not
    found", that is authoritative. Any other HEAD failure (including
    registries that do not implement HEAD) falls back to a full GET.

    Args:
        client: Registry manifest client
        reference: Tag or digest reference
        options: Credentials and platform selector
        logger: Logger for fallback diagnostics

    Returns:
        The digest and found=True, or NOT_FOUND

    Raises:
        RegistryError: If the GET fallback fails for any reason other
            than the manifest not existing
    """
    log = logger or get_logger("core.resolver")

    try:
        descriptor = client.head(reference, options)
    except RegistryError as head_error:
        if is_not_found(head_error):
            return NOT_FOUND

        log.debug("HEAD %s failed, falling back to GET: %s", reference, head_error)
        try:
            descriptor = client.get(reference, options)
        except RegistryError as get_error:
            if is_not_found(get_error):
                return NOT_FOUND
            raise

    return Resolution(digest=descriptor.digest, found=True)
