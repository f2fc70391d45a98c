"""Find archive files below a directory."""

import locale
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from manga_bulk.errors import DirectoryScanError

log = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".zip",)


def use_system_collation() -> None:
    """Collate with the user's locale instead of the "C" default."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        log.warning("Falling back to the C collation: %s", e)


def collation_key(path: str) -> tuple[str, str]:
    """Case-insensitive collation key; lowercase wins ties.

    The collation in effect only decides the order of the folded text, so
    "Chapter 2" lands between "chapter 1" and "chapter 3" even under "C".
    """
    return locale.strxfrm(path.casefold()), locale.strxfrm(path.swapcase())


def locale_sorted(paths: Iterable[str]) -> list[str]:
    """Sort path strings in locale-aware lexical order."""
    return sorted(paths, key=collation_key)


def scan_directory(
    directory: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[str]:
    """Recursively collect archives, sorted by full path.

    Returns:
        Path strings in locale-aware order; this order becomes the
        template's position index

    Raises:
        DirectoryScanError: If the directory or one of its subdirectories
            cannot be read
    """
    if not directory.is_dir():
        raise DirectoryScanError(f"Not a readable directory: {directory}")

    suffixes = tuple(ext.lower() for ext in extensions)

    def on_error(err: OSError) -> None:
        raise DirectoryScanError(
            f"Scanning the directory failed at {err.filename}: {err.strerror}"
        ) from err

    found = []
    for dirpath, _dirnames, filenames in os.walk(directory, onerror=on_error):
        for filename in filenames:
            if filename.lower().endswith(suffixes):
                found.append(os.path.join(dirpath, filename))

    return locale_sorted(found)
