"""
Input and output formatting for node RPC calls.

Block references are normalized to the tag or hex form a node expects, and
hex-encoded quantities in responses are parsed back into integers.
"""

import re
from typing import Any, Dict, Optional, Union

from provider_adapter.core.types import BlockSpecifier, BlockTag
from provider_adapter.providers.interface import InvalidBlockSpecifier, InvalidQuantity


BLOCK_TAG_WHITELIST = frozenset(tag.value for tag in BlockTag)

# Block fields that arrive hex-encoded and are returned as integers
BLOCK_QUANTITY_FIELDS = ("number", "size", "gasLimit", "gasUsed", "timestamp")

_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_DECIMAL_RE = re.compile(r"[0-9]+")


def format_block_specifier(block: BlockSpecifier) -> str:
    """
    Convert a block reference into its wire form.

    Args:
        block: A tag (``latest``, ``pending``, ``earliest``, ``genesis``),
            a decimal string, a 0x-prefixed hex string or an int

    Returns:
        The tag (``genesis`` becomes ``earliest``) or a 0x-prefixed
        lowercase hex string. Hex strings are returned unchanged.

    Raises:
        InvalidBlockSpecifier: If the value is none of the accepted forms
    """
    if isinstance(block, str):
        value = block.value if isinstance(block, BlockTag) else block
        if value in BLOCK_TAG_WHITELIST:
            # older clients use 'genesis' for the first block
            return BlockTag.EARLIEST.value if value == BlockTag.GENESIS.value else value
        if _HEX_RE.fullmatch(value):
            if value.startswith("0x"):
                return value
            return hex(int(value, 16))
        if _DECIMAL_RE.fullmatch(value):
            return hex(int(value))
        raise InvalidBlockSpecifier(block)

    if isinstance(block, int) and not isinstance(block, bool) and block >= 0:
        return hex(block)

    raise InvalidBlockSpecifier(block)


def parse_int(value: Optional[Union[str, int]]) -> Optional[int]:
    """
    Parse a node numeric string, hex when 0x-prefixed, decimal otherwise.

    A null result stays ``None``.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = value.strip()
    if text[:2].lower() == "0x":
        return int(text, 16)
    return int(text, 10)


def parse_int_to_str(value: Optional[Union[str, int]]) -> Optional[str]:
    """Parse a node numeric string and re-encode it as a decimal string."""
    parsed = parse_int(value)
    return None if parsed is None else str(parsed)


def to_quantity(value: Union[str, int]) -> str:
    """
    Encode a non-negative integer as a 0x-prefixed hex quantity.

    Raises:
        InvalidQuantity: If the value is negative or not an int or string
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidQuantity(value)
    return hex(value)


def format_block(block: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Parse the hex quantity fields of a raw block record.

    Returns a shallow copy with ``number``, ``size``, ``gasLimit``,
    ``gasUsed`` and ``timestamp`` as ints. Other fields are copied as-is.
    A missing block (``None``) stays ``None``.
    """
    if block is None:
        return None

    formatted = dict(block)
    for field_name in BLOCK_QUANTITY_FIELDS:
        raw = block.get(field_name)
        if raw is not None:
            formatted[field_name] = parse_int(raw)
    return formatted
