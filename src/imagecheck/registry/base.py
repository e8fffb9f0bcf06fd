"""Base registry protocol and types."""

from __future__ import annotations

import platform as _platform
import sys
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from imagecheck.registry.reference import Reference


# Python reports machine names the way the kernel does; registries use Go's.
_ARCHITECTURES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


class RegistryAuth(BaseModel):
    """Basic authentication credentials for a container registry."""

    model_config = {"frozen": True}

    username: str = Field(default="", description="Registry username")
    password: str = Field(default="", repr=False, description="Registry password or token")

    @property
    def is_anonymous(self) -> bool:
        """Credentials are only sent when both parts are present."""
        return not (self.username and self.password)


class Platform(BaseModel):
    """Platform selector for multi-platform manifest lists."""

    model_config = {"frozen": True}

    architecture: str = Field(description="CPU architecture, e.g. amd64")
    os: str = Field(description="Operating system, e.g. linux")

    def __str__(self) -> str:
        return f"{self.os}/{self.architecture}"

    @classmethod
    def host(cls) -> "Platform":
        """Get the platform of the invoking host."""
        machine = _platform.machine().lower()
        architecture = _ARCHITECTURES.get(machine, machine)

        if sys.platform.startswith("win"):
            os_name = "windows"
        elif sys.platform == "darwin":
            os_name = "darwin"
        elif sys.platform.startswith("linux"):
            os_name = "linux"
        else:
            os_name = sys.platform

        return cls(architecture=architecture, os=os_name)


class RequestOptions(BaseModel):
    """Per-request options passed to a manifest client."""

    model_config = {"frozen": True}

    auth: RegistryAuth = Field(default_factory=RegistryAuth)
    platform: Platform = Field(default_factory=Platform.host)


class Descriptor(BaseModel):
    """What a registry reports about a manifest."""

    model_config = {"frozen": True}

    digest: str = Field(description="Manifest digest")
    media_type: str = Field(default="", description="Manifest media type")
    size: int = Field(default=0, description="Manifest size in bytes")
    platform_digest: str | None = Field(
        default=None,
        description="Digest of the child manifest matching the requested platform",
    )


class RegistryError(Exception):
    """Base exception for registry operations.

    ``status_code`` carries the HTTP status reported by the registry, or
    None when the request never got a response.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class RegistryAuthError(RegistryError):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication failed", status_code: int | None = 401) -> None:
        super().__init__(message, code="AUTH_ERROR", status_code=status_code)


class RegistryNotFoundError(RegistryError):
    """Manifest or tag not found."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Manifest not found: {reference}", code="NOT_FOUND", status_code=404)
        self.reference = reference


def is_not_found(error: BaseException) -> bool:
    """Whether an error is the registry reporting a missing manifest."""
    return getattr(error, "status_code", None) == 404


@runtime_checkable
class ManifestClient(Protocol):
    """Protocol for registry clients able to resolve manifest digests.

    To implement a custom client, raise a RegistryError whose
    ``status_code`` is 404 when the manifest does not exist, and any other
    RegistryError for everything else.
    """

    def head(self, reference: "Reference", options: RequestOptions) -> Descriptor:
        """Resolve a reference with a manifest HEAD request.

        Raises:
            RegistryNotFoundError: If the manifest does not exist
            RegistryError: For other errors, including registries that do
                not answer HEAD requests
        """
        ...

    def get(self, reference: "Reference", options: RequestOptions) -> Descriptor:
        """Resolve a reference by fetching the full manifest.

        Raises:
            RegistryNotFoundError: If the manifest does not exist
            RegistryError: For other errors
        """
        ...
