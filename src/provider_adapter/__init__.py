"""
Ethereum Provider Adapter

A single asynchronous query API over request-style and send-style Ethereum
node providers. Block references are normalized before they are sent and
hex-encoded quantities are parsed in the responses.
"""

__version__ = "0.1.0"

from provider_adapter.core.adapter import ProviderAdapter
from provider_adapter.core.types import BlockTag, LogFilter
from provider_adapter.providers.interface import (
    InvalidBlockSpecifier,
    InvalidQuantity,
    NoProviderConfigured,
    ProviderError,
    TransportFailure,
)

__all__ = [
    "ProviderAdapter",
    "BlockTag",
    "LogFilter",
    "ProviderError",
    "NoProviderConfigured",
    "InvalidBlockSpecifier",
    "InvalidQuantity",
    "TransportFailure",
]
