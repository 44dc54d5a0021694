"""Logging configuration schema."""

from pydantic import BaseModel, Field, field_validator


class LogFileConfig(BaseModel):
    """Rotating log file settings."""

    path: str = Field("logs/azure-resource-toolkit.log", description="Log file path")
    max_size_mb: int = Field(10, description="Maximum size of one log file in MB")
    backup_count: int = Field(5, description="Number of rotated files to keep")

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate size and count."""
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    destination: str = Field("stdout", description="Log destination: stdout, file or both")
    file: LogFileConfig = Field(default_factory=LogFileConfig)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """
        Validate log level.

        Args:
            v: Value to validate

        Returns:
            Upper-cased log level

        Raises:
            ValueError: If log level is invalid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        """Validate log destination."""
        valid_destinations = ["stdout", "file", "both"]
        if v not in valid_destinations:
            raise ValueError(f"Log destination must be one of {valid_destinations}")
        return v
