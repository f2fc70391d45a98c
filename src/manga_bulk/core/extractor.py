"""Extract volume, chapter and title from archive filenames."""

import logging
import re
from dataclasses import dataclass

from manga_bulk.errors import PatternError
from manga_bulk.models.manifest import NO_CHAPTER, UNSET, ExtractedMetadata

log = logging.getLogger(__name__)

# Filenames disagree on the sub-chapter glyph: "12x3", "12p3", "12.3"
_SUBCHAPTER_SEPARATOR = re.compile(r"[xp]", re.IGNORECASE)


def compile_pattern(field: str, pattern: str) -> re.Pattern[str]:
    """Compile a user supplied pattern case-insensitively.

    Raises:
        PatternError: If the pattern does not compile
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise PatternError(field, pattern, str(e)) from e


@dataclass(frozen=True)
class ExtractionPatterns:
    """Compiled volume, chapter and title patterns. Each is optional."""

    volume: re.Pattern[str] | None = None
    chapter: re.Pattern[str] | None = None
    title: re.Pattern[str] | None = None

    @classmethod
    def compile(
        cls,
        volume: str | None = None,
        chapter: str | None = None,
        title: str | None = None,
    ) -> "ExtractionPatterns":
        """Compile raw pattern strings.

        Raises:
            PatternError: If a pattern is invalid, or the title pattern has
                no capturing group
        """
        title_re = compile_pattern("title", title) if title else None
        if title_re is not None and title_re.groups < 1:
            raise PatternError("title", title, "needs at least one capturing group")
        return cls(
            volume=compile_pattern("volume", volume) if volume else None,
            chapter=compile_pattern("chapter", chapter) if chapter else None,
            title=title_re,
        )


def extract_volume(name: str, pattern: re.Pattern[str] | None) -> int:
    if pattern is None:
        return UNSET
    match = pattern.search(name)
    if match is None or pattern.groups < 1 or match.group(1) is None:
        return UNSET
    try:
        return int(match.group(1), 10)
    except ValueError:
        log.warning("Volume capture %r in %s is not a number", match.group(1), name)
        return UNSET


def extract_chapter(name: str, pattern: re.Pattern[str] | None) -> str:
    if pattern is None:
        return NO_CHAPTER
    match = pattern.search(name)
    if match is None or pattern.groups < 1 or not match.group(1):
        return NO_CHAPTER
    return _SUBCHAPTER_SEPARATOR.sub(".", match.group(1))


def extract_title(name: str, pattern: re.Pattern[str] | None) -> str:
    if pattern is None:
        return ""
    match = pattern.search(name)
    if match is None:
        return ""
    # The last group holds the title; earlier groups may be optional prefixes
    return match.group(pattern.groups) or ""


def extract(name: str, patterns: ExtractionPatterns) -> ExtractedMetadata:
    """Extract metadata from a filename. Pure; safe to call concurrently."""
    return ExtractedMetadata(
        volume=extract_volume(name, patterns.volume),
        chapter_raw=extract_chapter(name, patterns.chapter),
        title=extract_title(name, patterns.title),
    )
