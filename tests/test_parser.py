"""Tests for the delimited-text parser."""

import pytest

from flatbridge.errors import EmptyInputError, MalformedInputError, NoColumnsError
from flatbridge.parser import parse_delimited


class TestParseHeader:
    """Test suite for header handling."""

    def test_simple_header_and_rows(self) -> None:
        """Test parsing a header and two rows."""
        parsed = parse_delimited("id,name\n1,Alice\n2,Bob\n", ",")

        assert parsed.header == ["id", "name"]
        assert parsed.rows == [{"id": "1", "name": "Alice"}, {"id": "2", "name": "Bob"}]

    def test_header_fields_are_trimmed(self) -> None:
        """Test that whitespace around header names is removed."""
        parsed = parse_delimited("  id ,\tname  \n1,Alice\n", ",")
        assert parsed.header == ["id", "name"]

    def test_strips_byte_order_mark(self) -> None:
        """Test that a leading BOM is not part of the first column name."""
        parsed = parse_delimited("\ufeffid,name\n1,Alice\n", ",")

        assert parsed.header == ["id", "name"]
        assert parsed.rows[0]["id"] == "1"

    def test_only_one_bom_is_stripped(self) -> None:
        """Test that only a single leading BOM character is removed."""
        parsed = parse_delimited("\ufeff\ufeffid\n1\n", ",")
        assert parsed.header == ["\ufeffid"]

    def test_leading_blank_lines_skipped(self) -> None:
        """Test that the first non-blank line becomes the header."""
        parsed = parse_delimited("\n   \n\nid,name\n1,Alice\n", ",")

        assert parsed.header == ["id", "name"]
        assert len(parsed.rows) == 1

    def test_header_only_file(self) -> None:
        """Test a file with a header and no data rows."""
        parsed = parse_delimited("id,name\n", ",")

        assert parsed.header == ["id", "name"]
        assert parsed.rows == []


class TestParseErrors:
    """Test suite for parser failures."""

    def test_empty_content(self) -> None:
        """Test that empty content raises EmptyInputError."""
        with pytest.raises(EmptyInputError):
            parse_delimited("", ",")

    def test_whitespace_only_content(self) -> None:
        """Test that content with only blank lines raises EmptyInputError."""
        with pytest.raises(EmptyInputError):
            parse_delimited("\n  \n\t\n", ",")

    def test_bom_only_content(self) -> None:
        """Test that a lone BOM counts as empty."""
        with pytest.raises(EmptyInputError):
            parse_delimited("\ufeff", ",")

    def test_header_without_names(self) -> None:
        """Test that a header of empty fields raises NoColumnsError."""
        with pytest.raises(NoColumnsError):
            parse_delimited(" , , \n1,2,3\n", ",")

    def test_oversized_field_is_malformed(self) -> None:
        """Test that csv reader errors surface as MalformedInputError."""
        import csv

        limit = csv.field_size_limit()
        huge = "x" * (limit + 1)

        with pytest.raises(MalformedInputError):
            parse_delimited(f"a\n{huge}\n", ",")


class TestParseRows:
    """Test suite for data row handling."""

    def test_blank_lines_between_rows_skipped(self) -> None:
        """Test that blank lines inside the data are ignored."""
        parsed = parse_delimited("a,b\n1,2\n\n   \n3,4\n", ",")
        assert parsed.rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_missing_trailing_newline(self) -> None:
        """Test that the last row is kept without a final newline."""
        parsed = parse_delimited("a,b\n1,2\n3,4", ",")
        assert parsed.rows[-1] == {"a": "3", "b": "4"}

    def test_crlf_line_endings(self) -> None:
        """Test Windows line endings."""
        parsed = parse_delimited("a,b\r\n1,2\r\n3,4\r\n", ",")

        assert parsed.header == ["a", "b"]
        assert parsed.rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_values_are_trimmed(self) -> None:
        """Test that whitespace around values is removed."""
        parsed = parse_delimited("a,b\n  1 ,  two  \n", ",")
        assert parsed.rows == [{"a": "1", "b": "two"}]

    def test_short_row_padded(self) -> None:
        """Test that missing trailing values become empty strings."""
        parsed = parse_delimited("a,b,c\n1\n", ",")
        assert parsed.rows == [{"a": "1", "b": "", "c": ""}]

    def test_long_row_truncated(self) -> None:
        """Test that extra values beyond the header are dropped."""
        parsed = parse_delimited("a,b\n1,2,3\n", ",")
        assert parsed.rows == [{"a": "1", "b": "2"}]

    def test_row_of_empty_fields_is_kept(self) -> None:
        """Test that a line of delimiters is a row, not a blank line."""
        parsed = parse_delimited("a,b\n,\n", ",")
        assert parsed.rows == [{"a": "", "b": ""}]

    def test_row_keys_follow_header_order(self) -> None:
        """Test that row keys are in header order."""
        parsed = parse_delimited("z,a,m\n1,2,3\n", ",")
        assert list(parsed.rows[0]) == ["z", "a", "m"]

    def test_values_stay_strings(self) -> None:
        """Test that no type coercion happens while parsing."""
        parsed = parse_delimited("n,d\n42,2024-01-01\n", ",")

        assert parsed.rows[0]["n"] == "42"
        assert parsed.rows[0]["d"] == "2024-01-01"


class TestQuoting:
    """Test suite for quoted field handling."""

    def test_quoted_field_with_delimiter(self) -> None:
        """Test that a quoted delimiter stays inside one field."""
        parsed = parse_delimited('name,city\n"Smith, John",Leeds\n', ",")
        assert parsed.rows == [{"name": "Smith, John", "city": "Leeds"}]

    def test_doubled_quote_is_literal_quote(self) -> None:
        """Test that a doubled quote inside a quoted field becomes one quote."""
        parsed = parse_delimited('a,b\n"say ""hi""",2\n', ",")
        assert parsed.rows[0]["a"] == 'say "hi"'

    def test_quoted_field_with_newline(self) -> None:
        """Test that a quoted field can span lines."""
        parsed = parse_delimited('a,b\n"line one\nline two",2\n3,4\n', ",")

        assert parsed.rows[0]["a"] == "line one\nline two"
        assert parsed.rows[1] == {"a": "3", "b": "4"}
        assert len(parsed.rows) == 2

    def test_quoted_field_after_space(self) -> None:
        """Test that a space before an opening quote does not break quoting."""
        parsed = parse_delimited('a,b\n1, "x,y"\n', ",")
        assert parsed.rows == [{"a": "1", "b": "x,y"}]

    def test_quoted_header(self) -> None:
        """Test quoted header names."""
        parsed = parse_delimited('"first name","last, name"\nA,B\n', ",")
        assert parsed.header == ["first name", "last, name"]


class TestDelimiters:
    """Test suite for non-comma delimiters."""

    @pytest.mark.parametrize("delimiter", ["\t", ";", "|"])
    def test_common_delimiters(self, delimiter: str) -> None:
        """Test tab, semicolon and pipe delimited content."""
        content = f"a{delimiter}b\n1{delimiter}2\n"
        parsed = parse_delimited(content, delimiter)

        assert parsed.header == ["a", "b"]
        assert parsed.rows == [{"a": "1", "b": "2"}]

    def test_commas_are_data_with_other_delimiter(self) -> None:
        """Test that commas are plain characters in a semicolon file."""
        parsed = parse_delimited("a;b\n1,5;2,5\n", ";")
        assert parsed.rows == [{"a": "1,5", "b": "2,5"}]

    def test_quoted_tab_in_tsv(self) -> None:
        """Test that quoting also works with a tab delimiter."""
        parsed = parse_delimited('a\tb\n"x\ty"\t2\n', "\t")
        assert parsed.rows == [{"a": "x\ty", "b": "2"}]

    def test_whitespace_only_tsv_lines_skipped(self) -> None:
        """Test that lines of only tabs and spaces are blank in a TSV file."""
        parsed = parse_delimited("a\tb\n1\t2\n\t\n  \t  \n3\t4\n\t\t\n", "\t")
        assert parsed.rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_leading_tab_only_line_before_header(self) -> None:
        """Test that a tab-only line is not taken as the header."""
        parsed = parse_delimited("\t\na\tb\n1\t2\n", "\t")
        assert parsed.header == ["a", "b"]


class TestFirstValues:
    """Test suite for the first data row values."""

    def test_first_values_by_position(self) -> None:
        """Test that repeated header names keep each position's value."""
        parsed = parse_delimited("x,x\nhello,5\n", ",")
        assert parsed.first_values == ["hello", "5"]

    def test_first_values_fitted_to_header(self) -> None:
        """Test that the first row values are padded like the row."""
        parsed = parse_delimited("a,b,c\n1\n2,3,4\n", ",")
        assert parsed.first_values == ["1", "", ""]

    def test_header_only_has_no_first_values(self) -> None:
        """Test that a file without data rows has no first values."""
        assert parse_delimited("a,b\n", ",").first_values is None
