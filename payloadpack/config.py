"""Configuration management with Pydantic settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

FailurePolicy = Literal["lenient", "strict"]
CompressionName = Literal["deflated", "stored"]


class Settings(BaseSettings):
    """payloadpack configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYLOADPACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Payload layout
    prefix: str = Field(
        default="",
        description="Contents prefix prepended to every stored file name",
    )

    manifest_version: str | None = Field(
        default=None,
        description="Version string recorded in manifest/manifest.json (defaults to package version)",
    )

    # Archive settings
    compression: CompressionName = Field(
        default="deflated",
        description="Zip compression method: deflated or stored",
    )

    compresslevel: int | None = Field(
        default=None,
        ge=0,
        le=9,
        description="Deflate level (0-9); None uses the zlib default",
    )

    unix_attributes: bool = Field(
        default=True,
        description="Tag archive entries as UNIX so permission bits are normalized",
    )

    failure_policy: FailurePolicy = Field(
        default="lenient",
        description="lenient: skip entries that cannot be archived; strict: fail the whole archive",
    )

    # Collection settings
    collect_workers: int = Field(
        default=4,
        ge=1,
        description="Number of producer threads used when collecting a source directory",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root logging level configured by the CLI",
    )

    def get_manifest_version(self) -> str:
        """Return the version string injected into the manifest."""
        if self.manifest_version:
            return self.manifest_version

        from payloadpack import __version__

        return __version__


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
