"""Container registry clients and references."""

from imagecheck.registry.base import (
    Descriptor,
    ManifestClient,
    Platform,
    RegistryAuth,
    RegistryAuthError,
    RegistryError,
    RegistryNotFoundError,
    RequestOptions,
    is_not_found,
)
from imagecheck.registry.reference import (
    DEFAULT_REGISTRY,
    DigestReference,
    Reference,
    ReferencePair,
    Repository,
    TagReference,
    build_references,
    parse_registry,
    parse_repository,
)
from imagecheck.registry.oci import OCIRegistry

__all__ = [
    "Descriptor",
    "ManifestClient",
    "Platform",
    "RegistryAuth",
    "RegistryAuthError",
    "RegistryError",
    "RegistryNotFoundError",
    "RequestOptions",
    "is_not_found",
    "DEFAULT_REGISTRY",
    "DigestReference",
    "Reference",
    "ReferencePair",
    "Repository",
    "TagReference",
    "build_references",
    "parse_registry",
    "parse_repository",
    "OCIRegistry",
]
