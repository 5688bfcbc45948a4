"""
Core adapter components.

Block specifier normalization, response formatting, request dispatch and the
query façade.
"""

from provider_adapter.core.adapter import ProviderAdapter
from provider_adapter.core.formatters import (
    format_block,
    format_block_specifier,
    parse_int,
    parse_int_to_str,
)
from provider_adapter.core.request_id import RequestIdGenerator
from provider_adapter.core.types import BlockTag, LogFilter, RpcRequest

__all__ = [
    "ProviderAdapter",
    "RequestIdGenerator",
    "RpcRequest",
    "LogFilter",
    "BlockTag",
    "format_block",
    "format_block_specifier",
    "parse_int",
    "parse_int_to_str",
]
