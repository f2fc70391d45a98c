"""Shared fixtures."""

import locale
from pathlib import Path

import pytest

from manga_bulk.config import DEFAULT_CHAPTER_PATTERN, DEFAULT_VOLUME_PATTERN
from manga_bulk.core.extractor import ExtractionPatterns
from manga_bulk.models.manifest import ManifestEntry


@pytest.fixture(autouse=True)
def c_collation(monkeypatch):
    """Pin collation to "C" so ordering does not depend on the host locale."""
    previous = locale.setlocale(locale.LC_COLLATE)
    monkeypatch.setenv("LC_ALL", "C")
    locale.setlocale(locale.LC_COLLATE, "C")
    yield
    locale.setlocale(locale.LC_COLLATE, previous)


class FakeTransport:
    """Records submissions; raises a prepared error for chosen archives."""

    def __init__(self, failures: dict[str, Exception] | None = None):
        self.failures = failures or {}
        self.calls: list[tuple[int, dict[str, str], Path]] = []

    def submit_chapter(self, work_id, fields, archive, progress=None):
        self.calls.append((work_id, dict(fields), archive))
        error = self.failures.get(archive.name)
        if error is not None:
            raise error

    @property
    def submitted(self) -> list[str]:
        return [archive.name for _, _, archive in self.calls]


@pytest.fixture
def default_patterns() -> ExtractionPatterns:
    return ExtractionPatterns.compile(
        volume=DEFAULT_VOLUME_PATTERN, chapter=DEFAULT_CHAPTER_PATTERN
    )


@pytest.fixture
def archive_dir(tmp_path: Path) -> Path:
    """A small library of chapter archives plus some noise."""
    root = tmp_path / "library"
    (root / "Vol 1").mkdir(parents=True)
    (root / "Vol 2").mkdir()
    for name in ("Ch 1.zip", "Ch 2.1.zip", "Ch 2.10.zip"):
        (root / "Vol 1" / name).write_bytes(b"PK")
    (root / "Vol 2" / "Ch 3.ZIP").write_bytes(b"PK")
    (root / "Vol 2" / "notes.txt").write_text("not an archive")
    return root


@pytest.fixture
def make_entries():
    def _make(count: int, directory: Path | None = None) -> list[ManifestEntry]:
        base = directory or Path("/archives")
        return [
            ManifestEntry(file=str(base / f"ch{i + 1}.zip"), chapter=str(i + 1))
            for i in range(count)
        ]

    return _make


@pytest.fixture
def fake_transport_cls():
    return FakeTransport
