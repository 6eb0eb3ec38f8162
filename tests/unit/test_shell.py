"""Unit tests for shell argument splitting."""

import pytest

from mozcpp.shell import ShellParseError, split_arguments


class TestSplitArguments:
    """Test suite for split_arguments()."""

    def test_simple_split(self):
        assert split_arguments("-DFOO -Iinc -O2") == ["-DFOO", "-Iinc", "-O2"]

    def test_double_quotes_removed(self):
        assert split_arguments('-DFOO="bar baz" -DTEST') == ["-DFOO=bar baz", "-DTEST"]

    def test_single_quotes_removed(self):
        assert split_arguments("-DNAME='\"quoted\"'") == ['-DNAME="quoted"']

    def test_backslash_escape(self):
        assert split_arguments(r"-Ipath\ with\ spaces") == ["-Ipath with spaces"]

    def test_empty_string(self):
        assert split_arguments("") == []

    def test_unterminated_quote_raises(self):
        with pytest.raises(ShellParseError, match="Unable to split"):
            split_arguments('-DFOO="bar')
