"""Shared test fixtures for image-check tests."""

import logging
from typing import Any

import pytest

from imagecheck.registry.base import (
    Descriptor,
    Platform,
    RegistryError,
    RegistryNotFoundError,
    RequestOptions,
)
from imagecheck.utils.config import ImageCheckConfig, PlatformConfig, set_config

DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64
DIGEST_C = "sha256:" + "c" * 64


class FakeManifestClient:
    """In-memory manifest client recording every request.

    ``manifests`` maps a reference string to the digest it resolves to;
    anything else is reported as not found. ``head_errors`` and
    ``get_errors`` map reference strings to errors raised by that verb.
    """

    def __init__(
        self,
        manifests: dict[str, str] | None = None,
        head_errors: dict[str, RegistryError] | None = None,
        get_errors: dict[str, RegistryError] | None = None,
    ) -> None:
        self.manifests = dict(manifests or {})
        self.head_errors = dict(head_errors or {})
        self.get_errors = dict(get_errors or {})
        self.calls: list[tuple[str, str, RequestOptions]] = []

    def _lookup(self, verb: str, reference: Any, options: RequestOptions, errors: dict) -> Descriptor:
        key = str(reference)
        self.calls.append((verb, key, options))
        if key in errors:
            raise errors[key]
        if key not in self.manifests:
            raise RegistryNotFoundError(key)
        return Descriptor(digest=self.manifests[key])

    def head(self, reference: Any, options: RequestOptions) -> Descriptor:
        return self._lookup("HEAD", reference, options, self.head_errors)

    def get(self, reference: Any, options: RequestOptions) -> Descriptor:
        return self._lookup("GET", reference, options, self.get_errors)

    def queried(self, registry: str) -> bool:
        """Whether any request went to the given registry host."""
        return any(key.startswith(f"{registry}/") for _, key, _ in self.calls)

    def verbs_for(self, reference: str) -> list[str]:
        return [verb for verb, key, _ in self.calls if key == reference]


class FakeExchange:
    """Credential exchange returning fixed credentials or raising."""

    def __init__(self, username: str = "AWS", password: str = "ecr-token", error: Exception | None = None):
        self.username = username
        self.password = password
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def authenticate(self, access_key_id: str, secret_key: str, region: str) -> tuple[str, str]:
        self.calls.append((access_key_id, secret_key, region))
        if self.error is not None:
            raise self.error
        return self.username, self.password


@pytest.fixture
def fake_registry() -> FakeManifestClient:
    """Create an empty fake registry."""
    return FakeManifestClient()


@pytest.fixture
def fake_exchange() -> FakeExchange:
    """Create a credential exchange that always succeeds."""
    return FakeExchange()


@pytest.fixture
def test_config() -> ImageCheckConfig:
    """Create a configuration with a pinned platform."""
    return ImageCheckConfig(platform=PlatformConfig(architecture="amd64", os="linux"))


@pytest.fixture
def linux_amd64() -> Platform:
    return Platform(architecture="amd64", os="linux")


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the global configuration from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging setup so caplog sees image-check records."""
    yield
    logger = logging.getLogger("imagecheck")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
