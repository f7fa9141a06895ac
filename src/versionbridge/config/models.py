"""Configuration models for versionbridge.

This module contains the Pydantic models for the settings file read by
``SettingsManager`` and consumed by ``ConversionEngine.from_settings``.
"""

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "versionbridge"})

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level '{v}'")
        return level


class BridgeSettings(BaseModel):
    """Settings for building a conversion engine."""

    # Version tracking
    config_version: int = 2  # Settings schema version

    # Version detection
    version_field: str = "version"  # Record field holding its version
    default_version: int | float | str = 1  # Assumed when the field is missing

    # Fixed latest version; None = infer numeric maximum
    latest: int | float | str | None = None

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("version_field")
    @classmethod
    def validate_version_field(cls, v: str) -> str:
        """Reject an empty field name."""
        if not v.strip():
            raise ValueError("version_field must not be empty")
        return v
