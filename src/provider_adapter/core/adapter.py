"""
Provider adapter.

Presents one asynchronous query API over request-style and send-style
providers, normalizing block references on the way in and numeric fields on
the way out.
"""

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

import structlog

from provider_adapter.config import AdapterConfig, IdScheme
from provider_adapter.core.formatters import (
    format_block,
    format_block_specifier,
    parse_int,
    parse_int_to_str,
    to_quantity,
)
from provider_adapter.core.request_id import RequestIdGenerator
from provider_adapter.core.types import BlockSpecifier, LogFilter, RpcRequest
from provider_adapter.providers.interface import (
    NoProviderConfigured,
    ProviderLike,
    TransportFailure,
    is_request_provider,
    is_send_provider,
)

logger = structlog.get_logger(__name__)


def _extract_result(response: Any) -> Any:
    """Pull the ``result`` payload out of a provider response."""
    if isinstance(response, Mapping):
        return response.get("result")
    return getattr(response, "result", None)


class ProviderAdapter:
    """
    Query façade over a single externally owned provider.

    The provider is referenced, never replaced or closed. Every query is a
    single JSON-RPC exchange.
    """

    def __init__(
        self,
        provider: Optional[ProviderLike],
        config: Optional[AdapterConfig] = None,
        id_generator: Optional[RequestIdGenerator] = None,
    ):
        """
        Initialize the adapter.

        Args:
            provider: Request-style or send-style provider handle
            config: Adapter configuration, used for the id scheme
            id_generator: Override for send-style correlation ids
        """
        self.provider = provider
        scheme = config.id_scheme if config else IdScheme.MONOTONIC
        self._ids = id_generator or RequestIdGenerator(scheme)

    async def send_request(self, request: RpcRequest) -> Any:
        """
        Dispatch one request to the provider and return its result.

        The request-style path is used when the provider has ``request``,
        otherwise the send-style path. Provider errors propagate unchanged.

        Raises:
            NoProviderConfigured: If no usable provider is present
        """
        if self.provider is None:
            raise NoProviderConfigured()

        params = list(request.params)

        if is_request_provider(self.provider):
            logger.debug("rpc_dispatch", method=request.method, transport="request")
            response = self.provider.request({"method": request.method, "params": params})
            if inspect.isawaitable(response):
                response = await response
            result = _extract_result(response)
        elif is_send_provider(self.provider):
            payload = {
                "jsonrpc": "2.0",
                "id": self._ids.next_id(),
                "method": request.method,
                "params": params,
            }
            logger.debug(
                "rpc_dispatch",
                method=request.method,
                transport="send",
                request_id=payload["id"],
            )
            response = await self._send(payload)
            result = _extract_result(response)
        else:
            raise NoProviderConfigured(
                f"Provider {type(self.provider).__name__} has neither request() nor send()"
            )

        if request.format_output is not None:
            return request.format_output(result)
        return result

    async def _send(self, payload: Dict[str, Any]) -> Any:
        """Bridge the callback-based ``send`` into an awaitable."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def _settle(error: Any, response: Any) -> None:
            if future.done():
                return
            if error is not None:
                if not isinstance(error, BaseException):
                    error = TransportFailure(f"Provider returned an error: {error}", error=error)
                future.set_exception(error)
            else:
                future.set_result(response)

        def callback(error: Any, response: Any = None) -> None:
            loop.call_soon_threadsafe(_settle, error, response)

        self.provider.send(payload, callback)
        return await future

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_code(self, address: str, block: BlockSpecifier = "latest") -> str:
        """Get the contract code at an address."""
        return await self.send_request(RpcRequest(
            method="eth_getCode",
            params=[address, format_block_specifier(block)],
        ))

    async def get_block_by_number(self, block: BlockSpecifier) -> Optional[Dict[str, Any]]:
        """
        Get a block without full transactions.

        Returns:
            The block record with ``number``, ``size``, ``gasLimit``,
            ``gasUsed`` and ``timestamp`` as ints, or None if the node
            does not know the block
        """
        return await self.send_request(RpcRequest(
            method="eth_getBlockByNumber",
            params=[format_block_specifier(block), False],
            format_output=format_block,
        ))

    async def get_past_logs(
        self,
        from_block: Union[BlockSpecifier, LogFilter, None] = None,
        to_block: Optional[BlockSpecifier] = None,
        address: Optional[Union[str, List[str]]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get logs matching a block range and address.

        Accepts either the filter fields directly or a LogFilter as the
        first argument.
        """
        if isinstance(from_block, LogFilter):
            log_filter = from_block
        else:
            log_filter = LogFilter(from_block=from_block, to_block=to_block, address=address)

        query: Dict[str, Any] = {}
        if log_filter.from_block is not None:
            query["fromBlock"] = format_block_specifier(log_filter.from_block)
        if log_filter.to_block is not None:
            query["toBlock"] = format_block_specifier(log_filter.to_block)
        if log_filter.address is not None:
            query["address"] = log_filter.address

        return await self.send_request(RpcRequest(
            method="eth_getLogs",
            params=[query],
        ))

    async def get_network_id(self) -> Optional[int]:
        """Get the network id reported by net_version."""
        return await self.send_request(RpcRequest(
            method="net_version",
            params=[],
            format_output=parse_int,
        ))

    async def get_block_number(self) -> Optional[int]:
        """Get the number of the most recent block."""
        return await self.send_request(RpcRequest(
            method="eth_blockNumber",
            params=[],
            format_output=parse_int,
        ))

    async def get_balance(self, address: str, block: BlockSpecifier = "latest") -> Optional[str]:
        """Get an account balance in wei, as a decimal string."""
        return await self.send_request(RpcRequest(
            method="eth_getBalance",
            params=[address, format_block_specifier(block)],
            format_output=parse_int_to_str,
        ))

    async def get_transaction_count(self, address: str, block: BlockSpecifier = "latest") -> Optional[str]:
        """Get an account nonce, as a decimal string."""
        return await self.send_request(RpcRequest(
            method="eth_getTransactionCount",
            params=[address, format_block_specifier(block)],
            format_output=parse_int_to_str,
        ))

    async def get_storage_at(
        self,
        address: str,
        position: Union[int, str],
        block: BlockSpecifier = "latest",
    ) -> str:
        """Read one storage slot of a contract."""
        return await self.send_request(RpcRequest(
            method="eth_getStorageAt",
            params=[address, to_quantity(position), format_block_specifier(block)],
        ))
