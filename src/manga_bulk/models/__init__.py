"""Data models."""

from manga_bulk.models.group import GroupMatch, GroupRecord
from manga_bulk.models.manifest import (
    NO_CHAPTER,
    UNSET,
    ChapterIdentifier,
    ExtractedMetadata,
    GroupDefaults,
    Manifest,
    ManifestEntry,
)
from manga_bulk.models.upload import FailureKind, PipelineResult, UploadOutcome

__all__ = [
    # Manifest models
    "UNSET",
    "NO_CHAPTER",
    "ChapterIdentifier",
    "ExtractedMetadata",
    "GroupDefaults",
    "Manifest",
    "ManifestEntry",
    # Group models
    "GroupRecord",
    "GroupMatch",
    # Upload models
    "FailureKind",
    "UploadOutcome",
    "PipelineResult",
]
