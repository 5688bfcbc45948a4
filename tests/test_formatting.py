"""
Test suite for block specifier normalization and response formatting.
"""

import pytest

from provider_adapter.core.formatters import (
    BLOCK_QUANTITY_FIELDS,
    format_block,
    format_block_specifier,
    parse_int,
    parse_int_to_str,
    to_quantity,
)
from provider_adapter.core.types import BlockTag
from provider_adapter.providers.interface import InvalidBlockSpecifier, InvalidQuantity


# ============================================================================
# Test Block Specifier Normalization
# ============================================================================

class TestBlockSpecifierFormatting:
    """Tests for converting block references to their wire form."""

    @pytest.mark.parametrize("tag", ["latest", "pending", "earliest"])
    def test_tags_unchanged(self, tag):
        """Test that whitelisted tags pass through."""
        assert format_block_specifier(tag) == tag

    def test_genesis_becomes_earliest(self):
        """Test that the legacy genesis tag is translated."""
        assert format_block_specifier("genesis") == "earliest"

    def test_enum_tags(self):
        """Test that BlockTag members are accepted."""
        assert format_block_specifier(BlockTag.LATEST) == "latest"
        assert format_block_specifier(BlockTag.GENESIS) == "earliest"

    def test_decimal_string_to_hex(self):
        """Test that decimal strings are re-encoded as hex."""
        assert format_block_specifier("255") == "0xff"
        assert format_block_specifier("0") == "0x0"

    def test_decimal_strings_match_hex_encoding(self):
        """Test decimal strings across a range of values."""
        for n in list(range(0, 300)) + [10**6, 2**53, 2**64 + 1]:
            assert format_block_specifier(str(n)) == "0x" + format(n, "x")

    def test_int_to_hex(self):
        """Test that ints are encoded as lowercase hex."""
        assert format_block_specifier(0) == "0x0"
        assert format_block_specifier(16) == "0x10"
        assert format_block_specifier(48879) == "0xbeef"

    def test_ints_match_hex_encoding(self):
        """Test ints across a range of values."""
        for n in range(0, 1000, 7):
            assert format_block_specifier(n) == "0x" + format(n, "x")

    @pytest.mark.parametrize("value", ["0x0", "0x10", "0xABCdef", "0x" + "f" * 40])
    def test_hex_string_unchanged(self, value):
        """Test that hex strings are returned as-is."""
        assert format_block_specifier(value) == value

    def test_idempotent(self):
        """Test that normalizing twice gives the same result."""
        for value in ["255", 255, "0xff", "genesis", "latest"]:
            once = format_block_specifier(value)
            assert format_block_specifier(once) == once

    @pytest.mark.parametrize("value, expected", [("0X1A", "0x1a"), ("0XFF", "0xff"), ("0X0", "0x0")])
    def test_uppercase_prefix_normalized(self, value, expected):
        """Test that a 0X prefix is rewritten to the 0x form nodes accept."""
        assert format_block_specifier(value) == expected
        assert format_block_specifier(expected) == expected

    @pytest.mark.parametrize("value", [
        "not-a-block",
        None,
        "",
        "0x",
        "0xzz",
        "12abc",
        "-1",
        -1,
        1.5,
        True,
        "LATEST",
        "finalized",
        ["latest"],
    ])
    def test_invalid_values_rejected(self, value):
        """Test that unsupported values raise InvalidBlockSpecifier."""
        with pytest.raises(InvalidBlockSpecifier) as exc_info:
            format_block_specifier(value)

        assert exc_info.value.block == value
        message = str(exc_info.value)
        assert "'latest'" in message
        assert "'pending'" in message
        assert "'earliest'" in message

    def test_invalid_block_is_value_error(self):
        """Test that callers catching ValueError also catch bad blocks."""
        with pytest.raises(ValueError):
            format_block_specifier("nope")


# ============================================================================
# Test Response Formatting
# ============================================================================

class TestBlockFormatting:
    """Tests for parsing hex quantities in block records."""

    def test_quantity_fields_parsed(self, raw_block):
        """Test that the numeric fields become ints."""
        formatted = format_block(raw_block)

        assert formatted["number"] == 16
        assert formatted["gasLimit"] == 21000
        assert formatted["gasUsed"] == 0
        assert formatted["size"] == 0x220
        assert formatted["timestamp"] == 0x55ba467c

    def test_other_fields_untouched(self, raw_block):
        """Test that hashes, addresses and lists pass through."""
        formatted = format_block(raw_block)

        for key, value in raw_block.items():
            if key not in BLOCK_QUANTITY_FIELDS:
                assert formatted[key] == value
        assert formatted["difficulty"] == "0x4ea3f27bc"
        assert formatted["transactions"] is raw_block["transactions"]

    def test_input_not_mutated(self, raw_block):
        """Test that formatting returns a copy."""
        formatted = format_block(raw_block)

        assert formatted is not raw_block
        assert raw_block["number"] == "0x10"

    def test_missing_block(self):
        """Test that an unknown block stays None."""
        assert format_block(None) is None

    def test_pending_block_null_fields(self, raw_block):
        """Test that null quantities on pending blocks stay null."""
        raw_block["number"] = None
        formatted = format_block(raw_block)

        assert formatted["number"] is None
        assert formatted["gasLimit"] == 21000


class TestScalarParsing:
    """Tests for the single-value parsers."""

    def test_parse_hex(self):
        assert parse_int("0x2a") == 42
        assert parse_int("0X2A") == 42

    def test_parse_decimal(self):
        """Test decimal strings such as net_version results."""
        assert parse_int("1") == 1
        assert parse_int("11155111") == 11155111

    def test_parse_int_passthrough(self):
        assert parse_int(7) == 7

    def test_parse_large_balance_exact(self):
        """Test that large quantities keep full precision."""
        wei = 123456789012345678901234567890
        assert parse_int(hex(wei)) == wei
        assert parse_int_to_str(hex(wei)) == str(wei)

    def test_parse_int_to_str(self):
        assert parse_int_to_str("0x64") == "100"
        assert parse_int_to_str("0x0") == "0"

    def test_to_quantity(self):
        """Test storage slot encoding."""
        assert to_quantity(0) == "0x0"
        assert to_quantity(2**255) == hex(2**255)
        assert to_quantity("0x05") == "0x05"

    def test_to_quantity_rejects_negative(self):
        with pytest.raises(ValueError):
            to_quantity(-1)

    @pytest.mark.parametrize("value", [-1, 1.5, None, True])
    def test_to_quantity_invalid_values(self, value):
        """Test that bad slots raise the adapter's own error type."""
        with pytest.raises(InvalidQuantity) as exc_info:
            to_quantity(value)

        assert exc_info.value.value is value

    def test_null_results_stay_none(self):
        """Test that a JSON-RPC null result is not parsed."""
        assert parse_int(None) is None
        assert parse_int_to_str(None) is None
