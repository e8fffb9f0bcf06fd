"""Image reference parsing and mirror substitution."""

from __future__ import annotations

import re
from typing import Union

from pydantic import BaseModel, Field

from imagecheck.models.source import Source
from imagecheck.utils.errors import InvalidSourceError

DEFAULT_REGISTRY = "index.docker.io"
DEFAULT_REGISTRY_ALIAS = "docker.io"

_REPOSITORY_CHARS = set("abcdefghijklmnopqrstuvwxyz0123456789_-./")
_MAX_REPOSITORY_LENGTH = 255
_REGISTRY_PATTERN = re.compile(
    r"^(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?)*"
    r"|\[[0-9a-fA-F:]+\])"
    r"(?::[0-9]+)?$"
)
_TAG_PATTERN = re.compile(r"^[\w][\w.-]{0,127}$")


class Repository(BaseModel):
    """A repository within a registry."""

    model_config = {"frozen": True}

    registry: str = Field(description="Registry host, e.g. index.docker.io")
    path: str = Field(description="Repository path, e.g. library/nginx")

    @property
    def name(self) -> str:
        """Get the fully-qualified repository name."""
        return f"{self.registry}/{self.path}"

    @property
    def is_default_registry(self) -> bool:
        """Whether the repository lives on the default public registry."""
        return self.registry == DEFAULT_REGISTRY

    def tag(self, tag: str) -> "TagReference":
        """Get a mutable tag reference within this repository."""
        return TagReference(repository=self, tag=tag)

    def digest(self, digest: str) -> "DigestReference":
        """Get an immutable digest reference within this repository."""
        return DigestReference(repository=self, digest=digest)

    def with_registry(self, registry: str) -> "Repository":
        """Get the same repository path hosted on another registry."""
        return Repository(registry=registry, path=self.path)

    def __str__(self) -> str:
        return self.name


class TagReference(BaseModel):
    """A reference to a tag, whose digest may change over time."""

    model_config = {"frozen": True}

    repository: Repository
    tag: str

    @property
    def registry(self) -> str:
        return self.repository.registry

    @property
    def identifier(self) -> str:
        """The part of the reference addressed in manifest URLs."""
        return self.tag

    def __str__(self) -> str:
        return f"{self.repository.name}:{self.tag}"


class DigestReference(BaseModel):
    """A content-addressed reference to a manifest."""

    model_config = {"frozen": True}

    repository: Repository
    digest: str

    @property
    def registry(self) -> str:
        return self.repository.registry

    @property
    def identifier(self) -> str:
        """The part of the reference addressed in manifest URLs."""
        return self.digest

    def __str__(self) -> str:
        return f"{self.repository.name}@{self.digest}"


Reference = Union[TagReference, DigestReference]


class ReferencePair(BaseModel):
    """The tag references a check may query, in query order."""

    model_config = {"frozen": True}

    origin: TagReference
    mirror: TagReference | None = None


def parse_registry(host: str) -> str:
    """Validate a registry host, normalizing the Docker Hub alias.

    Raises:
        InvalidSourceError: If the host is not a plausible registry name
    """
    if not host or not _REGISTRY_PATTERN.match(host):
        raise InvalidSourceError(f"could not resolve registry: invalid registry {host!r}", field="registry")
    if host == DEFAULT_REGISTRY_ALIAS:
        return DEFAULT_REGISTRY
    return host


def parse_repository(name: str) -> Repository:
    """Parse a repository string with weak validation.

    A first path component that looks like a host (contains a dot or a
    port, or is localhost) names the registry; anything else lives on the
    default registry. Single-component names on the default registry get
    the implicit ``library/`` namespace.

    Args:
        name: Repository string, e.g. "nginx" or "ghcr.io/org/app"

    Returns:
        Parsed repository

    Raises:
        InvalidSourceError: If the string is not a plausible repository
    """
    if not name:
        raise InvalidSourceError("failed to resolve repository: repository must not be empty", field="repository")

    registry = DEFAULT_REGISTRY
    path = name
    first, sep, rest = name.partition("/")
    if sep and ("." in first or ":" in first or first == "localhost"):
        registry = parse_registry(first)
        path = rest

    if not path or len(path) > _MAX_REPOSITORY_LENGTH:
        raise InvalidSourceError(
            f"failed to resolve repository: invalid repository length in {name!r}",
            field="repository",
        )

    invalid = sorted(set(path) - _REPOSITORY_CHARS)
    if invalid:
        raise InvalidSourceError(
            f"failed to resolve repository: {name!r} contains invalid characters {''.join(invalid)!r}",
            field="repository",
        )

    if any(not component for component in path.split("/")):
        raise InvalidSourceError(
            f"failed to resolve repository: {name!r} has an empty path component",
            field="repository",
        )

    if registry == DEFAULT_REGISTRY and "/" not in path:
        path = f"library/{path}"

    return Repository(registry=registry, path=path)


def build_references(source: Source) -> ReferencePair:
    """Build the origin tag reference and, when eligible, the mirror one.

    The mirror only stands in for the default public registry; a
    repository on an explicitly named registry is never redirected.

    Raises:
        InvalidSourceError: If the repository, tag or mirror host is invalid
    """
    repository = parse_repository(source.repository)

    tag = source.tag_or_default()
    if not _TAG_PATTERN.match(tag):
        raise InvalidSourceError(f"invalid tag {tag!r}", field="tag")

    origin = repository.tag(tag)

    mirror = None
    if source.registry_mirror is not None and repository.is_default_registry:
        mirror_registry = parse_registry(source.registry_mirror.host)
        mirror = repository.with_registry(mirror_registry).tag(tag)

    return ReferencePair(origin=origin, mirror=mirror)
