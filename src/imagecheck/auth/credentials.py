"""Credential resolution for origin and mirror registries."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from imagecheck.auth.ecr import ECRCredentialExchange
from imagecheck.models.source import RegistryMirror, Source
from imagecheck.registry.base import RegistryAuth
from imagecheck.utils.errors import AuthenticationFailedError, ImageCheckError


@runtime_checkable
class CredentialExchange(Protocol):
    """Protocol for cloud providers that trade long-lived keys for registry credentials."""

    def authenticate(self, access_key_id: str, secret_key: str, region: str) -> tuple[str, str]:
        """Exchange cloud credentials for a registry username and password.

        Raises:
            AuthenticationFailedError: If the exchange fails
        """
        ...


def resolve_credentials(source: Source, exchange: CredentialExchange | None = None) -> RegistryAuth:
    """Resolve the credentials used against the origin registry.

    When the full AWS credential triple is configured, the ECR token
    exchange is mandatory: a failure aborts the check rather than falling
    back to anonymous access. Otherwise the static credentials are used
    as-is, and empty credentials mean anonymous.

    Args:
        source: Check source
        exchange: Credential exchange override (defaults to ECR)

    Returns:
        Origin registry credentials

    Raises:
        AuthenticationFailedError: If the exchange fails or returns nothing
    """
    if not source.uses_ecr:
        return RegistryAuth(username=source.username, password=source.password)

    if exchange is None:
        exchange = ECRCredentialExchange.from_source(source)

    try:
        username, password = exchange.authenticate(
            source.aws_access_key_id,
            source.aws_secret_access_key,
            source.aws_region,
        )
    except ImageCheckError:
        raise
    except Exception as e:
        raise AuthenticationFailedError(f"cannot authenticate with ECR: {e}") from e

    if not username or not password:
        raise AuthenticationFailedError("cannot authenticate with ECR: empty credentials returned")

    return RegistryAuth(username=username, password=password)


def resolve_mirror_credentials(mirror: RegistryMirror) -> RegistryAuth:
    """Resolve mirror credentials, which never come from the ECR exchange."""
    return RegistryAuth(username=mirror.username, password=mirror.password)
