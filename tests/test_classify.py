"""
Tests for the content-category classifier.
"""

import pytest

from docmirror import Category, classify, matches
from docmirror.classify import categories_for_extension, extension_of


class TestMimeTypeDecides:

    def test_any_accepts_everything(self):
        assert matches(Category.ANY, None, "")
        assert matches("any", "application/x-whatever", "weird.name")
        assert matches(Category.ANY, None, "no_extension")

    def test_mime_prefix(self):
        assert matches("audio", "audio/mpeg", "x.bin")
        assert matches(Category.IMAGE, "image/jpeg", "photo")
        assert not matches(Category.VIDEO, "audio/mp4", "clip.mp4")

    def test_mime_beats_extension(self):
        assert not matches(Category.AUDIO, "text/plain", "song.mp3")

    def test_prefix_needs_slash(self):
        assert not matches(Category.TEXT, "textual/plain", "a.txt")


class TestExtensionFallback:

    @pytest.mark.parametrize("filename, category, expected", [
        ("song.mp3", Category.AUDIO, True),
        ("SONG.MP3", Category.AUDIO, True),
        ("song.mp4", Category.AUDIO, False),
        ("song.mp4", Category.VIDEO, True),
        ("book.m4b", Category.AUDIO, True),
        ("scan.webp", Category.IMAGE, True),
        ("notes.txt", Category.TEXT, True),
        ("notes.txt", Category.APPLICATION, True),
        ("report.pdf", Category.APPLICATION, True),
        ("archive.zip", Category.APPLICATION, False),
        ("README", Category.TEXT, False),
    ])
    def test_table(self, filename, category, expected):
        assert matches(category, None, filename) is expected

    def test_extension_of(self):
        assert extension_of("a/b/c.Tar.GZ") == "gz"
        assert extension_of("dir.d/file") == ""
        assert extension_of("") == ""

    def test_unknown_extension_has_no_categories(self):
        assert categories_for_extension("x.bin") == frozenset()


def test_unknown_category_name():
    with pytest.raises(ValueError):
        matches("spreadsheet", None, "a.xls")


def test_category_parse_is_case_insensitive():
    assert Category.parse("Audio") is Category.AUDIO


def test_classify_follows_matches():
    assert classify("audio", None, "song.mp3")
    assert not classify("audio", "text/plain", "song.mp3")
    assert classify(Category.ANY, None, "")
