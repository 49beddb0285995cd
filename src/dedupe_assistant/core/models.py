"""Pydantic models for scanned file entries and application settings."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SUPPORTED_HASH_SIZES = (8, 16, 32, 64)


class RawMetadata(BaseModel):
    """Numeric facts reported by the scanner for one file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    size: int | None = Field(None, ge=0, description="File size in bytes")
    modified_date: int | None = Field(None, description="Modification time as epoch millis")
    created_date: int | None = Field(None, description="Creation time as epoch millis")
    width: int | None = Field(None, ge=0, description="Image or video width in pixels")
    height: int | None = Field(None, ge=0, description="Image or video height in pixels")
    hash: str | None = Field(None, description="Content hash reported by the scanner")
    hardlinks: int | None = Field(None, ge=0, description="Number of hard links")


class Entry(BaseModel):
    """One scanned file inside a duplicate or similar-file result."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    path: str = Field(..., min_length=1, description="Full path, used as the selection key")
    group_id: int | None = Field(None, description="Cluster the entry belongs to, if any")
    is_ref: bool = Field(False, description="Reference entries are protected from removal")
    raw: RawMetadata | None = Field(None, description="Raw numeric metadata")
    size: str | None = Field(None, description="Pre-formatted size, e.g. '1.5 MB'")
    modified_date: str | None = Field(None, description="Pre-formatted modification date")
    similarity: str | None = Field(None, description="Pre-formatted similarity value")
    dimensions: str | None = Field(None, description="Pre-formatted dimensions, e.g. '1920x1080'")

    @property
    def is_grouped(self) -> bool:
        """Whether the entry belongs to a group."""
        return self.group_id is not None

    def __str__(self) -> str:
        group = f"group {self.group_id}" if self.is_grouped else "ungrouped"
        return f"{self.path} ({group})"


class ApplicationConfig(BaseModel):
    """Configuration settings for the application."""

    enable_logging: bool = Field(default=True, description="Enable application logging")
    log_level: str = Field(default="INFO", description="Logging level")
    default_action: str = Field(default="mark", description="Action applied by rules (mark, unmark)")
    keep_existing_selection: bool = Field(
        default=False, description="Keep the current selection when rules mark new paths"
    )
    pipeline_name: str = Field(default="Default pipeline", description="Name for CLI-built pipelines")
    default_hash_size: int = Field(
        default=16, description="Hash size used to classify similarity values"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown levels."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("default_action")
    @classmethod
    def validate_default_action(cls, v: str) -> str:
        """Only mark and unmark are supported."""
        if v not in {"mark", "unmark"}:
            raise ValueError(f"Unknown action: {v}")
        return v

    @field_validator("default_hash_size")
    @classmethod
    def validate_hash_size(cls, v: int) -> int:
        """Hash sizes must be one the scanner can produce."""
        if v not in SUPPORTED_HASH_SIZES:
            raise ValueError(f"Hash size must be one of {SUPPORTED_HASH_SIZES}")
        return v
