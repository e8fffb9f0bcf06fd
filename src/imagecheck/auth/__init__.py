"""Registry credential resolution."""

from imagecheck.auth.credentials import (
    CredentialExchange,
    resolve_credentials,
    resolve_mirror_credentials,
)
from imagecheck.auth.ecr import ECRCredentialExchange

__all__ = [
    "CredentialExchange",
    "ECRCredentialExchange",
    "resolve_credentials",
    "resolve_mirror_credentials",
]
