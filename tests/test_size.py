"""Tests for capacity string parsing."""

import pytest

from cephprov.core.exceptions import ValidationError
from cephprov.utils.size import MAX_SIZE_BYTES, format_bytes, parse_size


class TestParseSize:
    """Tests for parse_size."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            ("100GB", 100 * 1024 ** 3),
            ("100gb", 100 * 1024 ** 3),
            ("100G", 100 * 1024 ** 3),
            ("1TiB", 1024 ** 4),
            ("1.5 TB", 1649267441664),
            ("512MB", 512 * 1024 ** 2),
            ("4K", 4096),
            ("1024", 1024),
            ("10B", 10),
            (" 2 PB ", 2 * 1024 ** 5),
            ("8191PiB", 8191 * 1024 ** 5),
        ],
    )
    def test_valid_sizes(self, size: str, expected: int) -> None:
        """Test supported spellings are converted to bytes."""
        assert parse_size(size) == expected

    @pytest.mark.parametrize("size", ["", "GB", "lots", "-5GB", "10XB", "10iB", "1,5GB"])
    def test_invalid_sizes(self, size: str) -> None:
        """Test malformed sizes raise a validation error on the size field."""
        with pytest.raises(ValidationError) as exc_info:
            parse_size(size)
        assert exc_info.value.details["field"] == "size"

    @pytest.mark.parametrize("size", ["9" * 400 + "GB", "9000000PB", "8192PiB", "9223372036854775808"])
    def test_too_large(self, size: str) -> None:
        """Test sizes beyond a signed 64-bit byte count are rejected as invalid input."""
        with pytest.raises(ValidationError) as exc_info:
            parse_size(size)
        assert exc_info.value.details["field"] == "size"
        assert exc_info.value.details["max_bytes"] == MAX_SIZE_BYTES

    def test_largest_byte_count(self) -> None:
        """Test the largest signed 64-bit byte count is accepted."""
        assert parse_size(str(MAX_SIZE_BYTES)) == MAX_SIZE_BYTES


class TestFormatBytes:
    """Tests for format_bytes."""

    def test_format(self) -> None:
        """Test human readable rendering."""
        assert format_bytes(512) == "512.00 B"
        assert format_bytes(1024 ** 3) == "1.00 GB"
        assert format_bytes(60 * 1024 ** 4) == "60.00 TB"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
