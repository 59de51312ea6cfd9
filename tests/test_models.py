"""Tests for shared value types."""

import pytest

from flatbridge.models import (
    ABSENT,
    AbsentContent,
    BytesContent,
    ColumnDescriptor,
    IngestionResult,
    ScalarType,
    TextContent,
    TransferConfig,
    file_content_from,
)


class TestFileContent:
    """Test suite for file content variants."""

    def test_none_is_absent(self) -> None:
        """Test that None resolves to the ABSENT marker."""
        assert file_content_from(None) is ABSENT

    def test_absent_is_singleton(self) -> None:
        """Test that AbsentContent always returns the same instance."""
        assert AbsentContent() is ABSENT
        assert ABSENT.as_text() is None

    def test_bytes_are_decoded_as_utf8(self) -> None:
        """Test that byte content decodes as UTF-8."""
        content = file_content_from("café".encode())
        assert isinstance(content, BytesContent)
        assert content.as_text() == "café"

    def test_bytearray_accepted(self) -> None:
        """Test that a bytearray is stored as bytes."""
        content = file_content_from(bytearray(b"a,b"))
        assert content == BytesContent(b"a,b")

    def test_invalid_utf8_replaced(self) -> None:
        """Test that undecodable bytes do not raise."""
        assert "\ufffd" in BytesContent(b"\xff\xfe").as_text()

    def test_text_passes_through(self) -> None:
        """Test that string content is kept as text."""
        content = file_content_from("a,b")
        assert content == TextContent("a,b")
        assert content.as_text() == "a,b"

    def test_empty_string_is_not_absent(self) -> None:
        """Test that blank content is present, just empty."""
        assert file_content_from("") == TextContent("")

    def test_existing_variant_returned(self) -> None:
        """Test that an existing variant is not wrapped again."""
        content = TextContent("x")
        assert file_content_from(content) is content

    def test_unsupported_type(self) -> None:
        """Test that other types are rejected."""
        with pytest.raises(TypeError, match="Unsupported file content type"):
            file_content_from(42)


class TestTransferConfig:
    """Test suite for TransferConfig."""

    def test_defaults(self) -> None:
        """Test comma delimiter and absent content by default."""
        config = TransferConfig(filename="data.csv")

        assert config.delimiter == ","
        assert config.file_content is ABSENT
        assert not config.has_content

    def test_raw_content_resolved(self) -> None:
        """Test that raw bytes passed at construction are wrapped."""
        config = TransferConfig(filename="data.csv", file_content=b"a\n1\n")

        assert config.file_content == BytesContent(b"a\n1\n")
        assert config.has_content

    def test_empty_delimiter_rejected(self) -> None:
        """Test that an empty delimiter is invalid."""
        with pytest.raises(ValueError, match="Delimiter is required"):
            TransferConfig(filename="data.csv", delimiter="")

    def test_multi_character_delimiter_rejected(self) -> None:
        """Test that a delimiter must be one character."""
        with pytest.raises(ValueError, match="single character"):
            TransferConfig(filename="data.csv", delimiter="::")


class TestIngestionResult:
    """Test suite for IngestionResult."""

    def test_ok_to_dict(self) -> None:
        """Test the success wire shape omits the error."""
        result = IngestionResult.ok(records_processed=3, message="done")
        assert result.to_dict() == {"success": True, "recordsProcessed": 3, "message": "done"}

    def test_failure_to_dict(self) -> None:
        """Test the failure wire shape carries only the error."""
        result = IngestionResult.failure("boom")
        assert result.to_dict() == {"success": False, "error": "boom"}

    def test_success_with_error_rejected(self) -> None:
        """Test that a success cannot carry an error."""
        with pytest.raises(ValueError):
            IngestionResult(success=True, records_processed=1, message="ok", error="bad")

    def test_failure_with_count_rejected(self) -> None:
        """Test that a failure cannot carry a record count."""
        with pytest.raises(ValueError):
            IngestionResult(success=False, records_processed=1, error="bad")


class TestColumnDescriptor:
    """Test suite for ColumnDescriptor."""

    def test_to_dict(self) -> None:
        """Test the ``{name, type}`` shape uses the type's display name."""
        column = ColumnDescriptor(name="price", type=ScalarType.FLOAT)
        assert column.to_dict() == {"name": "price", "type": "Float"}

    def test_scalar_type_is_string_enum(self) -> None:
        """Test that ScalarType compares equal to its display name."""
        assert ScalarType.DATE == "Date"
