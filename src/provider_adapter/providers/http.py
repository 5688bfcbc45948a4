"""
HTTP JSON-RPC provider.

Request-style provider that posts JSON-RPC envelopes to a node over HTTP.
"""

import itertools
from typing import Any, Dict, Optional

import httpx
import structlog

from provider_adapter.config import AdapterConfig, get_config
from provider_adapter.providers.interface import TransportFailure

logger = structlog.get_logger(__name__)


class HttpRequestProvider:
    """
    HTTP provider.

    Implements the request-style capability over ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP provider.

        Args:
            config: Adapter configuration. Uses global config if not provided.
            url: Endpoint override, defaults to ``config.rpc_url``
            transport: Optional httpx transport (used by tests)
        """
        self.config = config or get_config()
        self.url = url or self.config.rpc_url
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            timeout=self.config.request_timeout,
            headers={"Content-Type": "application/json"},
            transport=self._transport,
        )
        logger.info("http_provider_connected", url=self.url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("http_provider_disconnected")

    async def __aenter__(self) -> "HttpRequestProvider":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    async def request(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """
        Post one JSON-RPC request.

        Args:
            args: Mapping with ``method`` and optional ``params``

        Returns:
            The decoded JSON-RPC response envelope

        Raises:
            TransportFailure: On HTTP errors or a JSON-RPC error member
        """
        if not self._client:
            await self.connect()

        method = args["method"]
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": args.get("params", []),
        }

        try:
            response = await self._client.post(self.url, json=payload)
        except httpx.RequestError as e:
            raise TransportFailure(f"HTTP request failed for {method}: {e}") from e

        if response.status_code != 200:
            raise TransportFailure(
                f"HTTP {response.status_code} from node for {method}: {response.text}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransportFailure(f"Invalid JSON from node for {method}") from e

        if "error" in data:
            error = data["error"]
            message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            raise TransportFailure(f"RPC error for {method}: {message}", error=error)

        return data
