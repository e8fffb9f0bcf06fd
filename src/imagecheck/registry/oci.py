"""OCI registry client implementation."""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any

import httpx

from imagecheck.registry.base import (
    Descriptor,
    Platform,
    RegistryAuth,
    RegistryAuthError,
    RegistryError,
    RegistryNotFoundError,
    RequestOptions,
)
from imagecheck.registry.reference import DEFAULT_REGISTRY, Reference
from imagecheck.utils.config import RegistryConfig
from imagecheck.utils.logging import get_logger_with_context

_CHALLENGE_PARAM = re.compile(r'(\w+)="([^"]*)"')


class OCIRegistry:
    """Manifest client for OCI-compliant container registries.

    Implements the manifest endpoints of the OCI Distribution
    Specification for registries like Docker Hub, GHCR, ECR, etc.
    Bearer tokens are cached for the lifetime of the client only.

    Example:
        registry = OCIRegistry()
        ref = parse_repository("nginx").tag("latest")
        descriptor = registry.head(ref, RequestOptions())
        print(descriptor.digest)
    """

    # Docker Hub serves the registry API from a different host
    REGISTRY_HOSTS = {
        DEFAULT_REGISTRY: "registry-1.docker.io",
    }

    # Media types
    MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
    MANIFEST_LIST = "application/vnd.docker.distribution.manifest.list.v2+json"
    OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
    OCI_INDEX = "application/vnd.oci.image.index.v1+json"

    ACCEPT = ", ".join([MANIFEST_V2, OCI_MANIFEST, MANIFEST_LIST, OCI_INDEX])

    def __init__(
        self,
        timeout: float = 30.0,
        max_retries: int = 3,
        insecure: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the OCI registry client.

        Args:
            timeout: Request timeout in seconds
            max_retries: Connection retry attempts made by the transport
            insecure: Use plain HTTP for every registry
            transport: Transport override (tests use httpx.MockTransport)
        """
        self._timeout = timeout
        self._max_retries = max_retries
        self._insecure = insecure
        self._transport = transport
        self._token_cache: dict[tuple[str, str, str], str] = {}

    @classmethod
    def from_config(cls, config: RegistryConfig, insecure: bool = False) -> "OCIRegistry":
        """Create a client from registry configuration."""
        return cls(timeout=config.timeout, max_retries=config.max_retries, insecure=insecure)

    def _get_registry_url(self, registry: str) -> str:
        """Get the base URL for a registry host."""
        host = self.REGISTRY_HOSTS.get(registry, registry)
        return f"{self._scheme(registry)}://{host}"

    def _scheme(self, registry: str) -> str:
        if self._insecure:
            return "http"
        hostname = registry.rsplit(":", 1)[0] if not registry.startswith("[") else registry
        if hostname == "localhost" or hostname.startswith("127.") or hostname.endswith(".local"):
            return "http"
        return "https"

    def _get_client(self) -> httpx.Client:
        """Create an HTTP client with retry support."""
        transport = self._transport or httpx.HTTPTransport(retries=self._max_retries)
        return httpx.Client(
            timeout=self._timeout,
            transport=transport,
            follow_redirects=True,
        )

    def _manifest_url(self, reference: Reference) -> str:
        registry_url = self._get_registry_url(reference.registry)
        return f"{registry_url}/v2/{reference.repository.path}/manifests/{reference.identifier}"

    def _get_token(
        self,
        client: httpx.Client,
        www_authenticate: str,
        repository: str,
        auth: RegistryAuth,
    ) -> str:
        """Get a bearer token for pulling from a repository.

        Args:
            client: HTTP client
            www_authenticate: WWW-Authenticate header value
            repository: Repository path for the token scope
            auth: Credentials to present to the token service

        Returns:
            Bearer token
        """
        # Format: Bearer realm="...",service="...",scope="..."
        params = dict(_CHALLENGE_PARAM.findall(www_authenticate))

        realm = params.get("realm")
        if not realm:
            raise RegistryAuthError("No realm in WWW-Authenticate header")

        token_params = {"scope": f"repository:{repository}:pull"}
        if params.get("service"):
            token_params["service"] = params["service"]

        basic = None if auth.is_anonymous else (auth.username, auth.password)

        try:
            response = client.get(realm, params=token_params, auth=basic)
        except httpx.HTTPError as e:
            raise RegistryError(f"Token request failed: {e}", code="CONNECTION_ERROR")

        if response.status_code in (401, 403):
            raise RegistryAuthError("Token authentication failed", status_code=response.status_code)
        elif response.status_code != 200:
            raise RegistryError(
                f"Token request failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RegistryError(f"Invalid token response: {e}", code="INVALID_TOKEN_RESPONSE")
        if not isinstance(data, dict):
            raise RegistryError("Invalid token response: expected an object", code="INVALID_TOKEN_RESPONSE")

        return data.get("token") or data.get("access_token", "")

    def _request(
        self,
        client: httpx.Client,
        method: str,
        reference: Reference,
        auth: RegistryAuth,
    ) -> httpx.Response:
        """Make an authenticated manifest request.

        Args:
            client: HTTP client
            method: HTTP method
            reference: Manifest reference
            auth: Registry credentials

        Returns:
            HTTP response
        """
        url = self._manifest_url(reference)
        repository = reference.repository.path
        headers = {"Accept": self.ACCEPT}

        cache_key = (reference.registry, repository, auth.username)
        if cache_key in self._token_cache:
            headers["Authorization"] = f"Bearer {self._token_cache[cache_key]}"

        try:
            response = client.request(method, url, headers=headers)

            if response.status_code == 401:
                www_auth = response.headers.get("www-authenticate", "")
                scheme = www_auth.split(" ", 1)[0].lower()
                if scheme == "bearer":
                    token = self._get_token(client, www_auth, repository, auth)
                    self._token_cache[cache_key] = token
                    headers["Authorization"] = f"Bearer {token}"
                    response = client.request(method, url, headers=headers)
                elif scheme == "basic" and not auth.is_anonymous:
                    headers.pop("Authorization", None)
                    response = client.request(
                        method, url, headers=headers, auth=(auth.username, auth.password)
                    )
        except httpx.HTTPError as e:
            raise RegistryError(f"{method} {url}: {e}", code="CONNECTION_ERROR")

        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, reference: Reference) -> None:
        if response.status_code == 404:
            raise RegistryNotFoundError(str(reference))
        elif response.status_code in (401, 403):
            raise RegistryAuthError(
                f"Authentication failed for {reference}", status_code=response.status_code
            )
        elif response.status_code != 200:
            raise RegistryError(
                f"Unexpected status {response.status_code} for {reference}",
                code="UNEXPECTED_STATUS",
                status_code=response.status_code,
            )

    def head(self, reference: Reference, options: RequestOptions) -> Descriptor:
        """Resolve a reference with a manifest HEAD request.

        Args:
            reference: Tag or digest reference
            options: Credentials and platform selector

        Returns:
            Descriptor of the manifest the reference points at
        """
        log = get_logger_with_context("registry.oci", registry=reference.registry)

        with self._get_client() as client:
            response = self._request(client, "HEAD", reference, options.auth)

        self._raise_for_status(response, reference)

        digest = response.headers.get("docker-content-digest")
        if not digest:
            raise RegistryError(
                f"HEAD {reference}: response has no Docker-Content-Digest header",
                code="MISSING_DIGEST",
            )

        log.debug("HEAD %s resolved to %s", reference, digest)
        return Descriptor(
            digest=digest,
            media_type=response.headers.get("content-type", ""),
            size=int(response.headers.get("content-length") or 0),
        )

    def get(self, reference: Reference, options: RequestOptions) -> Descriptor:
        """Resolve a reference by fetching the full manifest.

        For manifest lists and indexes, the child manifest matching the
        requested platform is recorded as ``platform_digest``.

        Args:
            reference: Tag or digest reference
            options: Credentials and platform selector

        Returns:
            Descriptor of the manifest the reference points at
        """
        log = get_logger_with_context("registry.oci", registry=reference.registry)

        with self._get_client() as client:
            response = self._request(client, "GET", reference, options.auth)

        self._raise_for_status(response, reference)

        body = response.content
        digest = response.headers.get("docker-content-digest")
        if not digest:
            digest = f"sha256:{hashlib.sha256(body).hexdigest()}"

        content_type = response.headers.get("content-type", "").split(";", 1)[0].strip()

        platform_digest = None
        if content_type in (self.MANIFEST_LIST, self.OCI_INDEX):
            platform_digest = self._select_platform(body, options.platform, reference)
            log.debug("%s resolved to %s for %s", reference, platform_digest, options.platform)

        log.debug("GET %s resolved to %s", reference, digest)
        return Descriptor(
            digest=digest,
            media_type=content_type,
            size=len(body),
            platform_digest=platform_digest,
        )

    @staticmethod
    def _select_platform(body: bytes, platform: Platform, reference: Reference) -> str | None:
        """Find the child manifest of an index matching a platform."""
        try:
            data: Any = json.loads(body)
        except ValueError as e:
            raise RegistryError(f"Invalid manifest index for {reference}: {e}", code="INVALID_MANIFEST")

        # Odd index shapes yield no platform digest
        manifests = data.get("manifests") if isinstance(data, dict) else None
        if not isinstance(manifests, list):
            return None

        for manifest in manifests:
            if not isinstance(manifest, dict):
                continue
            entry = manifest.get("platform")
            if not isinstance(entry, dict):
                continue
            if entry.get("architecture") == platform.architecture and entry.get("os") == platform.os:
                return manifest.get("digest")
        return None
