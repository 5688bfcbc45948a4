"""
Provider capability shapes for Ethereum node access.

Defines the two client interfaces the adapter understands and the errors
shared by the adapter and the concrete providers.
"""

from typing import Any, Callable, Dict, Optional, Protocol, Union, runtime_checkable


# Callback signature used by send-style providers: callback(error, response)
SendCallback = Callable[[Any, Optional[Dict[str, Any]]], None]


@runtime_checkable
class RequestProvider(Protocol):
    """
    Request-style provider.

    Exposes a single ``request`` operation taking ``{"method", "params"}``
    and producing (usually asynchronously) a response whose ``result``
    field holds the payload.
    """

    def request(self, args: Dict[str, Any]) -> Any:
        """
        Perform one JSON-RPC exchange.

        Args:
            args: Mapping with ``method`` and ``params`` keys

        Returns:
            An awaitable (or plain value) resolving to a response with a
            ``result`` field
        """
        ...


@runtime_checkable
class SendProvider(Protocol):
    """
    Send-style provider (legacy callback transport).

    Takes a full JSON-RPC envelope and reports the outcome through
    ``callback(error, response)``.
    """

    def send(self, payload: Dict[str, Any], callback: SendCallback) -> None:
        """
        Send a JSON-RPC envelope.

        Args:
            payload: ``{"jsonrpc": "2.0", "id", "method", "params"}``
            callback: Invoked once with ``(error, response)``
        """
        ...


ProviderLike = Union[RequestProvider, SendProvider]


def is_request_provider(provider: Any) -> bool:
    """Check whether the handle exposes a callable ``request``."""
    return callable(getattr(provider, "request", None))


def is_send_provider(provider: Any) -> bool:
    """Check whether the handle exposes a callable ``send``."""
    return callable(getattr(provider, "send", None))


class ProviderError(Exception):
    """Base class for provider adapter errors."""
    pass


class NoProviderConfigured(ProviderError):
    """Raised when the adapter has no usable provider handle."""

    def __init__(self, message: str = "There is not a valid provider present."):
        super().__init__(message)


class InvalidBlockSpecifier(ProviderError, ValueError):
    """Raised when a block argument is not a tag, numeric string or number."""

    def __init__(self, block: Any = None):
        super().__init__(
            "The block specified must be a number or one of the strings "
            "'latest', 'pending', or 'earliest'."
        )
        self.block = block


class InvalidQuantity(ProviderError, ValueError):
    """Raised when a numeric parameter cannot be encoded as a hex quantity."""

    def __init__(self, value: Any = None):
        super().__init__(f"Quantity must be a non-negative integer, got {value!r}")
        self.value = value


class TransportFailure(ProviderError):
    """Raised when a provider transport or the node reports an error."""

    def __init__(self, message: str, error: Optional[Any] = None):
        super().__init__(message)
        self.error = error
