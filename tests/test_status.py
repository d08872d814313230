"""Tests for svn_diff_commit.core.status: missing-entry parsing."""

import pytest

from svn_diff_commit.core.status import parse_missing
from svn_diff_commit.errors import UnrecognizedStatusLineError


class TestParseMissing:
    def test_only_missing_entries(self):
        out = (
            "!       wc/1.txt\n"
            "?       wc/new.txt\n"
            "M       wc/2.txt\n"
            "!       wc/subdir_b\n"
        )
        assert list(parse_missing(out)) == ["wc/1.txt", "wc/subdir_b"]

    def test_tab_separator(self):
        assert list(parse_missing("!\twc/a.txt")) == ["wc/a.txt"]

    def test_crlf_line_endings(self):
        out = "!       wc/a.txt\r\n!       wc/b.txt\r\n"
        assert list(parse_missing(out)) == ["wc/a.txt", "wc/b.txt"]

    def test_short_lines_skipped(self):
        assert list(parse_missing("!\n! \n\n")) == []

    def test_empty_output(self):
        assert list(parse_missing("")) == []

    def test_path_with_inner_spaces(self):
        assert list(parse_missing("!       wc/new folder/x y.txt")) == [
            "wc/new folder/x y.txt"
        ]

    def test_path_with_at_sign_is_returned_raw(self):
        assert list(parse_missing("!       wc/3@1080.txt")) == [
            "wc/3@1080.txt"
        ]

    def test_unrecognized_line(self):
        with pytest.raises(UnrecognizedStatusLineError, match="!C"):
            list(parse_missing("!C      wc/a.txt"))

    def test_error_raised_lazily(self):
        gen = parse_missing("!       wc/a.txt\n!x      wc/b.txt\n")
        assert next(gen) == "wc/a.txt"
        with pytest.raises(UnrecognizedStatusLineError):
            next(gen)

    def test_indented_line_is_a_missing_entry(self):
        assert list(parse_missing("  !     wc/a.txt")) == ["wc/a.txt"]

    def test_indented_unrecognized_line(self):
        with pytest.raises(UnrecognizedStatusLineError):
            list(parse_missing("  !x     wc/a.txt"))
