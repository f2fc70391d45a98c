"""Tests for filename metadata extraction."""

import pytest

from manga_bulk.core.extractor import ExtractionPatterns, compile_pattern, extract
from manga_bulk.errors import ExitCode, PatternError
from manga_bulk.models.manifest import UNSET


class TestCompile:
    def test_patterns_are_case_insensitive(self):
        pattern = compile_pattern("chapter", r"ch(\d+)")
        assert pattern.search("CH12").group(1) == "12"

    @pytest.mark.parametrize(
        "field, code",
        [
            ("volume", ExitCode.INVALID_VOLUME_PATTERN),
            ("chapter", ExitCode.INVALID_CHAPTER_PATTERN),
            ("title", ExitCode.INVALID_TITLE_PATTERN),
        ],
    )
    def test_invalid_pattern_has_field_exit_code(self, field, code):
        with pytest.raises(PatternError) as exc_info:
            ExtractionPatterns.compile(**{field: "(unclosed"})
        assert exc_info.value.exit_code == code
        assert exc_info.value.field == field

    def test_title_pattern_needs_a_group(self):
        with pytest.raises(PatternError, match="capturing group"):
            ExtractionPatterns.compile(title=r"title \w+")

    def test_missing_patterns_stay_none(self):
        patterns = ExtractionPatterns.compile()
        assert patterns.volume is None
        assert patterns.chapter is None
        assert patterns.title is None


class TestExtract:
    def test_volume_and_chapter(self, default_patterns):
        meta = extract("Series v02 c012.5.zip", default_patterns)
        assert meta.volume == 2
        assert meta.chapter_raw == "012.5"
        assert meta.title == ""

    def test_no_volume_match_is_unset(self, default_patterns):
        meta = extract("Series c5.zip", default_patterns)
        assert meta.volume == UNSET

    def test_no_chapter_match_is_zero(self, default_patterns):
        meta = extract("Oneshot.zip", default_patterns)
        assert meta.chapter_raw == "0"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Foo c12x3.zip", "12.3"),
            ("Foo c5p2.zip", "5.2"),
            ("Foo C7X1.zip", "7.1"),
            ("Foo c9.4.zip", "9.4"),
        ],
    )
    def test_subchapter_separators_become_dots(self, default_patterns, name, expected):
        assert extract(name, default_patterns).chapter_raw == expected

    def test_uppercase_filename(self, default_patterns):
        meta = extract("SERIES VOL.3 CHAPTER 12.ZIP", default_patterns)
        assert meta.volume == 3
        assert meta.chapter_raw == "12"

    def test_title_uses_last_group(self):
        patterns = ExtractionPatterns.compile(title=r"(special )?title (\w+)")
        meta = extract("c1 title Foo.zip", patterns)
        assert meta.title == "Foo"

    def test_title_without_match_is_empty(self):
        patterns = ExtractionPatterns.compile(title=r"title (\w+)")
        assert extract("c1.zip", patterns).title == ""

    def test_unmatched_last_group_is_empty(self):
        patterns = ExtractionPatterns.compile(title=r"c\d+( - .+)?")
        assert extract("c1.zip", patterns).title == ""

    def test_non_numeric_volume_capture_is_unset(self):
        patterns = ExtractionPatterns.compile(volume=r"vol (\w+)")
        assert extract("vol ten c1.zip", patterns).volume == UNSET

    def test_no_patterns(self):
        meta = extract("anything.zip", ExtractionPatterns())
        assert (meta.volume, meta.chapter_raw, meta.title) == (UNSET, "0", "")
