"""
Type definitions for node queries.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Union


class BlockTag(str, Enum):
    """Symbolic block tags accepted by the adapter."""
    LATEST = "latest"
    PENDING = "pending"
    EARLIEST = "earliest"
    GENESIS = "genesis"  # legacy alias of EARLIEST


BlockSpecifier = Union[str, int, BlockTag]

OutputFormatter = Callable[[Any], Any]


@dataclass(frozen=True)
class RpcRequest:
    """A single JSON-RPC call built by a query method."""
    method: str
    params: Sequence[Any] = ()
    format_output: Optional[OutputFormatter] = None


@dataclass
class LogFilter:
    """Filter for eth_getLogs. Unset fields are left out of the request."""
    from_block: Optional[BlockSpecifier] = None
    to_block: Optional[BlockSpecifier] = None
    address: Optional[Union[str, List[str]]] = None
