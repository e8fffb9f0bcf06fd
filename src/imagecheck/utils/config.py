"""Configuration file support for image-check."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class RegistryConfig(BaseModel):
    """Registry transport configuration."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, description="Connection retry attempts")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    structured: bool = Field(default=False, description="Use structured log format")


class PlatformConfig(BaseModel):
    """Platform selector overrides.

    Unset fields fall back to the architecture and OS of the host.
    """

    architecture: str | None = Field(default=None, description="Target architecture")
    os: str | None = Field(default=None, description="Target operating system")


class ImageCheckConfig(BaseModel):
    """Main configuration for image-check."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    platform: PlatformConfig = Field(default_factory=PlatformConfig)


def get_config_paths() -> list[Path]:
    """Get possible configuration file paths.

    Returns:
        List of paths to check for configuration files
    """
    paths = []

    paths.append(Path.cwd() / ".image-check.yaml")
    paths.append(Path.cwd() / "image-check.yaml")

    home = Path.home()
    paths.append(home / ".image-check.yaml")
    paths.append(home / ".config" / "image-check" / "config.yaml")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "image-check" / "config.yaml")

    return paths


def load_config(config_path: Path | str | None = None) -> ImageCheckConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration
    """
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            return _load_config_file(path)
        raise FileNotFoundError(f"Config file not found: {config_path}")

    for path in get_config_paths():
        if path.exists():
            return _load_config_file(path)

    return ImageCheckConfig()


def _load_config_file(path: Path) -> ImageCheckConfig:
    """Load configuration from a specific file."""
    try:
        data = yaml.safe_load(path.read_text())
        if data is None:
            return ImageCheckConfig()
        return ImageCheckConfig.model_validate(data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except Exception as e:
        raise ValueError(f"Failed to load config file: {e}")


def save_config(config: ImageCheckConfig, config_path: Path | str | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save to. Defaults to ~/.config/image-check/config.yaml

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "image-check" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    return config_path


def get_default_config() -> ImageCheckConfig:
    """Get the default configuration."""
    return ImageCheckConfig()


_config: ImageCheckConfig | None = None


def get_config() -> ImageCheckConfig:
    """Get the global configuration instance.

    Loads from file on first call.

    Returns:
        Global configuration
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ImageCheckConfig | None) -> None:
    """Set the global configuration instance.

    Args:
        config: Configuration to set, or None to reload from file on next access
    """
    global _config
    _config = config
