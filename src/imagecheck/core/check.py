"""Version discovery for a tag on a registry and its optional mirror."""

from __future__ import annotations

import logging

from imagecheck.auth.credentials import (
    CredentialExchange,
    resolve_credentials,
    resolve_mirror_credentials,
)
from imagecheck.core.resolver import resolve
from imagecheck.models.source import CheckRequest, CheckResponse, Source, Version
from imagecheck.registry.base import ManifestClient, Platform, RegistryAuth, RegistryError, RequestOptions
from imagecheck.registry.oci import OCIRegistry
from imagecheck.registry.reference import TagReference, build_references
from imagecheck.utils.config import ImageCheckConfig, get_config
from imagecheck.utils.errors import MirrorUnavailableError, OriginResolutionError
from imagecheck.utils.logging import get_logger


class VersionChecker:
    """Decides which versions of a tag to report.

    The mirror, when eligible, is asked first. The origin is only asked
    when the mirror produced nothing, whether because it failed or because
    it does not have the tag. The response lists the previously known
    version first when it differs from the current digest and is still
    retrievable, then the current digest.

    Example:
        checker = VersionChecker()
        request = decode_request('{"source": {"repository": "nginx"}}')
        versions = checker.check(request)
    """

    def __init__(
        self,
        client: ManifestClient | None = None,
        exchange: CredentialExchange | None = None,
        config: ImageCheckConfig | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            client: Manifest client (defaults to an OCIRegistry per check)
            exchange: Cloud credential exchange (defaults to ECR)
            config: Configuration (defaults to the global configuration)
            logger: Logger for mirror warnings and diagnostics
        """
        self._client = client
        self._exchange = exchange
        self._config = config
        self._logger = logger or get_logger("core.check")

    @property
    def config(self) -> ImageCheckConfig:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def platform(self) -> Platform:
        """Get the platform selector sent with every request."""
        host = Platform.host()
        overrides = self.config.platform
        return Platform(
            architecture=overrides.architecture or host.architecture,
            os=overrides.os or host.os,
        )

    def _client_for(self, source: Source) -> ManifestClient:
        if self._client is not None:
            return self._client
        return OCIRegistry.from_config(self.config.registry, insecure=source.insecure)

    def check(self, request: CheckRequest) -> CheckResponse:
        """Run a check.

        Args:
            request: Source and optional previously known version

        Returns:
            Zero, one or two versions, oldest first

        Raises:
            AuthenticationFailedError: If configured ECR authentication fails
            InvalidSourceError: If the repository, tag or mirror host is invalid
            OriginResolutionError: If the origin registry cannot be queried
        """
        source = request.source
        origin_auth = resolve_credentials(source, self._exchange)
        references = build_references(source)
        client = self._client_for(source)
        platform = self.platform

        response: CheckResponse = []

        if references.mirror is not None and source.registry_mirror is not None:
            mirror = references.mirror
            mirror_auth = resolve_mirror_credentials(source.registry_mirror)
            try:
                response = self._check_reference(client, mirror, mirror_auth, platform, request.version)
            except RegistryError as e:
                self._logger.warning("%s", MirrorUnavailableError(mirror.registry, str(e)))
            else:
                if not response:
                    self._logger.warning("%s", MirrorUnavailableError(mirror.registry, "tag not found"))

        if not response:
            origin = references.origin
            try:
                response = self._check_reference(client, origin, origin_auth, platform, request.version)
            except RegistryError as e:
                raise OriginResolutionError(origin.registry, str(e)) from e

        return response

    def _check_reference(
        self,
        client: ManifestClient,
        reference: TagReference,
        auth: RegistryAuth,
        platform: Platform,
        previous: Version | None,
    ) -> CheckResponse:
        """Resolve a tag and build the response for one endpoint."""
        options = RequestOptions(auth=auth, platform=platform)

        current = resolve(client, reference, options, self._logger)
        if not current.found or current.digest is None:
            self._logger.debug("%s not found", reference)
            return []

        response: CheckResponse = []
        if previous is not None and previous.digest != current.digest:
            previous_reference = reference.repository.digest(previous.digest)
            if resolve(client, previous_reference, options, self._logger).found:
                response.append(previous)
            else:
                self._logger.debug("%s is no longer retrievable", previous_reference)

        response.append(Version(digest=current.digest))
        return response
