"""Check request and response models."""

from pydantic import BaseModel, Field

DEFAULT_TAG = "latest"


class RegistryMirror(BaseModel):
    """A pull-through mirror of the default public registry."""

    model_config = {"extra": "forbid", "frozen": True}

    host: str = Field(description="Mirror registry host, e.g. mirror.example.com:5000")
    username: str = Field(default="", description="Mirror username")
    password: str = Field(default="", description="Mirror password")


class Source(BaseModel):
    """Configuration identifying the repository and tag to check."""

    model_config = {"extra": "forbid", "frozen": True}

    repository: str = Field(description="Repository, e.g. registry.example.com/team/app")
    tag: str | None = Field(default=None, description="Tag to watch (defaults to latest)")

    username: str = Field(default="", description="Registry username")
    password: str = Field(default="", description="Registry password or token")

    registry_mirror: RegistryMirror | None = Field(
        default=None,
        description="Mirror consulted before the default public registry",
    )

    # AWS ECR
    aws_access_key_id: str = Field(default="", description="AWS access key id")
    aws_secret_access_key: str = Field(default="", description="AWS secret access key")
    aws_session_token: str = Field(default="", description="AWS session token")
    aws_region: str = Field(default="", description="AWS region of the registry")
    aws_role_arn: str = Field(default="", description="Role to assume before requesting a token")
    aws_account_id: str = Field(default="", description="Registry id to request a token for")

    debug: bool = Field(default=False, description="Enable debug logging")
    insecure: bool = Field(default=False, description="Use plain HTTP for registry requests")

    def tag_or_default(self) -> str:
        """Get the tag to check, falling back to latest."""
        return self.tag or DEFAULT_TAG

    @property
    def uses_ecr(self) -> bool:
        """Whether the full AWS credential triple is configured."""
        return bool(self.aws_access_key_id and self.aws_secret_access_key and self.aws_region)


class Version(BaseModel):
    """A manifest digest identifying one version of an image."""

    model_config = {"extra": "forbid", "frozen": True}

    digest: str = Field(description="Manifest digest (algorithm:hex)")

    def __str__(self) -> str:
        return self.digest


class CheckRequest(BaseModel):
    """Input to a single check invocation."""

    model_config = {"extra": "forbid", "frozen": True}

    source: Source
    version: Version | None = Field(default=None, description="Previously known version")


CheckResponse = list[Version]
