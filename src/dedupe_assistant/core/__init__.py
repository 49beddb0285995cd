"""Core data model for dedupe assistant."""

from .models import SUPPORTED_HASH_SIZES, ApplicationConfig, Entry, RawMetadata

__all__ = [
    "ApplicationConfig",
    "Entry",
    "RawMetadata",
    "SUPPORTED_HASH_SIZES",
]
