"""
Node Provider Layer.

Capability shapes understood by the adapter and concrete HTTP and WebSocket
providers for Ethereum JSON-RPC nodes.
"""

from typing import Optional, Union

from provider_adapter.config import AdapterConfig, TransportType, get_config
from provider_adapter.providers.interface import (
    InvalidBlockSpecifier,
    InvalidQuantity,
    NoProviderConfigured,
    ProviderError,
    RequestProvider,
    SendProvider,
    TransportFailure,
)
from provider_adapter.providers.http import HttpRequestProvider
from provider_adapter.providers.websocket import WebSocketSendProvider


def create_provider(
    config: Optional[AdapterConfig] = None,
) -> Union[HttpRequestProvider, WebSocketSendProvider]:
    """Create the concrete provider selected by ``config.transport``."""
    config = config or get_config()
    if config.transport == TransportType.WEBSOCKET:
        return WebSocketSendProvider(config)
    return HttpRequestProvider(config)


__all__ = [
    "RequestProvider",
    "SendProvider",
    "ProviderError",
    "NoProviderConfigured",
    "InvalidBlockSpecifier",
    "InvalidQuantity",
    "TransportFailure",
    "HttpRequestProvider",
    "WebSocketSendProvider",
    "create_provider",
]
