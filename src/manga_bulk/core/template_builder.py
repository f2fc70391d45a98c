"""Build, write and read upload templates."""

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from manga_bulk.core.extractor import ExtractionPatterns, extract
from manga_bulk.core.normalizer import normalize_chapters
from manga_bulk.core.storage import write_text_atomic
from manga_bulk.errors import TemplateAccessError, TemplateBrokenError
from manga_bulk.models.manifest import GroupDefaults, ManifestEntry, manifest_adapter

log = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Generated template entries plus any soft warnings."""

    entries: list[ManifestEntry]
    warnings: list[str] = field(default_factory=list)


def match_target(file: str, root: Path | None) -> str:
    """The part of a path the patterns are applied to.

    Relative to the scanned directory when known, so volume folders count but
    the directory's own location does not. Otherwise just the file name.
    """
    if root is not None:
        try:
            return os.path.relpath(file, root)
        except ValueError:
            pass
    return os.path.basename(file)


def build_manifest(
    files: Sequence[str],
    patterns: ExtractionPatterns,
    defaults: GroupDefaults,
    root: Path | None = None,
) -> BuildResult:
    """Turn a sorted file list into template entries.

    The files must already be in locale-aware order; they are not re-sorted,
    and the output index of each file is its upload position.
    """
    targets = [match_target(f, root) for f in files]
    extracted = [extract(t, patterns) for t in targets]

    # Padding depends on every chapter sharing a primary, so it runs batch-wide
    normalized = normalize_chapters([m.chapter_raw for m in extracted], sources=files)

    primary, secondary, tertiary = defaults.groups
    entries = [
        ManifestEntry(
            file=file,
            title=meta.title,
            volume=meta.volume,
            chapter=chapter,
            group_primary=primary,
            group_secondary=secondary,
            group_tertiary=tertiary,
            language=defaults.language,
        )
        for file, meta, chapter in zip(files, extracted, normalized.chapters)
    ]
    log.debug("Built %d template entries", len(entries))
    return BuildResult(entries=entries, warnings=normalized.warnings)


def dump_manifest(entries: Sequence[ManifestEntry]) -> str:
    data = [entry.model_dump(by_alias=True) for entry in entries]
    return json.dumps(data, indent=4, ensure_ascii=False)


def write_manifest(path: Path, entries: Sequence[ManifestEntry]) -> None:
    """Write the whole template at once.

    Raises:
        TemplateAccessError: If the file cannot be written
    """
    try:
        write_text_atomic(path, dump_manifest(entries))
    except OSError as e:
        raise TemplateAccessError(f"Could not write the template file {path}: {e}") from e


def read_manifest(path: Path) -> list[ManifestEntry]:
    """Load a template written by write_manifest (possibly hand edited).

    Raises:
        TemplateAccessError: If the file is missing or unreadable
        TemplateBrokenError: If it is not a valid template
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateAccessError(f"Template file {path} is inaccessible: {e}") from e

    try:
        return manifest_adapter.validate_json(content)
    except ValidationError as e:
        raise TemplateBrokenError(f"Template file {path} is broken: {e}") from e
