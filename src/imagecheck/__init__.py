"""image-check: discover new versions of a container image tag.

Resolves the manifest digest a tag currently points at, on the origin
registry or on a pull-through mirror of the default public registry, and
reports it together with the previously known digest while that is still
retrievable.

- **Reference Builder**: parse repositories and decide mirror eligibility
- **Credential Resolver**: static credentials or AWS ECR token exchange
- **Manifest Resolver**: manifest HEAD with GET fallback
- **Version Checker**: mirror-then-origin check with ordered, deduplicated output

Usage:
    # Library API
    from imagecheck import VersionChecker, decode_request

    request = decode_request('{"source": {"repository": "nginx", "tag": "1.27"}}')
    versions = VersionChecker().check(request)
    print([v.digest for v in versions])

CLI:
    image-check check < request.json
    image-check check --request request.json
"""

__version__ = "0.1.0"

# Core classes
from imagecheck.core.check import VersionChecker
from imagecheck.core.payload import decode_request, encode_response
from imagecheck.core.resolver import Resolution, resolve

# Models
from imagecheck.models.source import CheckRequest, CheckResponse, RegistryMirror, Source, Version

# Registry
from imagecheck.registry.base import ManifestClient, Platform, RegistryAuth, RequestOptions
from imagecheck.registry.oci import OCIRegistry
from imagecheck.registry.reference import build_references, parse_repository

# Auth
from imagecheck.auth.credentials import CredentialExchange, resolve_credentials

__all__ = [
    # Version
    "__version__",
    # Core
    "VersionChecker",
    "decode_request",
    "encode_response",
    "Resolution",
    "resolve",
    # Models
    "CheckRequest",
    "CheckResponse",
    "RegistryMirror",
    "Source",
    "Version",
    # Registry
    "ManifestClient",
    "Platform",
    "RegistryAuth",
    "RequestOptions",
    "OCIRegistry",
    "build_references",
    "parse_repository",
    # Auth
    "CredentialExchange",
    "resolve_credentials",
]
