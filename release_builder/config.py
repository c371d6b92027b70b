"""Configuration management for the release builder."""

import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Release settings loaded from RELEASE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RELEASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Repository layout
    project_root: Path = Field(default_factory=Path.cwd)
    dist_dir: Path = Path("dist")

    # Client build
    public_url: str = "/"
    client_dir: Path = Path("client")
    client_tool: str = "trunk"
    client_output_dir: Path = Path("dist")

    # Server build
    server_dir: Path = Path("server")
    server_tool: str = "cargo"
    server_target_dir: Path = Path("target/release")
    server_binary: str = "server"

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: Path = Path("logs")

    @field_validator("public_url")
    @classmethod
    def normalize_public_url(cls, value: str) -> str:
        """Make sure the base path starts and ends with a slash."""
        value = value.strip()
        if not value:
            raise ValueError("public_url must not be empty")
        if "://" not in value and not value.startswith("/"):
            value = "/" + value
        if not value.endswith("/"):
            value += "/"
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"unknown log level: {value}")
        return value

    @property
    def root_path(self) -> Path:
        """Absolute repository root."""
        return self.project_root.resolve()

    @property
    def client_path(self) -> Path:
        """Client project directory."""
        return self.root_path / self.client_dir

    @property
    def client_output_path(self) -> Path:
        """Directory the client build tool writes the bundle to."""
        return self.client_path / self.client_output_dir

    @property
    def server_path(self) -> Path:
        """Server project directory."""
        return self.root_path / self.server_dir

    @property
    def server_artifact_path(self) -> Path:
        """Compiled server executable."""
        name = self.server_binary
        if sys.platform == "win32" and not name.endswith(".exe"):
            name += ".exe"
        return self.server_path / self.server_target_dir / name

    @property
    def dist_path(self) -> Path:
        """Distribution directory at the repository root."""
        return self.root_path / self.dist_dir

    @property
    def log_path(self) -> Path:
        """Directory for log files."""
        return self.root_path / self.log_dir


def load_settings(**overrides) -> Settings:
    """
    Load settings from the environment with explicit overrides on top.

    Args:
        **overrides: Field values that win over environment variables

    Raises:
        ConfigurationError: If any value fails validation
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
