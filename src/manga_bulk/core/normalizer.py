"""Pad secondary chapter numbers consistently within each primary chapter."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from manga_bulk.models.manifest import ChapterIdentifier

log = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Normalized chapter strings plus warnings for anomalous inputs."""

    chapters: list[str]
    widths: dict[str, int]
    warnings: list[str] = field(default_factory=list)


def secondary_widths(identifiers: Sequence[ChapterIdentifier]) -> dict[str, int]:
    """Longest secondary part seen for each primary chapter.

    Primaries are compared as written, so "01.1" and "1.1" are tracked
    separately.
    """
    widths: dict[str, int] = {}
    for ident in identifiers:
        length = len(ident.secondary) if ident.secondary else 0
        widths[ident.primary] = max(widths.get(ident.primary, 0), length)
    return widths


def normalize_chapters(
    raw_chapters: Sequence[str],
    sources: Sequence[str] | None = None,
) -> NormalizationResult:
    """Left-pad secondary parts so every sub-chapter of a primary is equally wide.

    "7.1" and "7.10" in the same batch become "7.01" and "7.10". Chapters
    without a secondary part are left alone. A trailing separator ("7.") is
    reduced to its primary and reported as a warning.

    Args:
        raw_chapters: Chapter strings using "." as the separator
        sources: Optional file names parallel to raw_chapters, for warnings
    """
    identifiers = [ChapterIdentifier.parse(raw) for raw in raw_chapters]
    widths = secondary_widths(identifiers)

    result = NormalizationResult(chapters=[], widths=widths)
    for i, ident in enumerate(identifiers):
        if ident.has_trailing_separator:
            source = sources[i] if sources is not None else raw_chapters[i]
            message = f'Trailing "." for chapter {raw_chapters[i]}, file: {source}'
            log.warning(message)
            result.warnings.append(message)
        result.chapters.append(str(ident.padded(widths[ident.primary])))

    return result
