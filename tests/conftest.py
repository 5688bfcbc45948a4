"""
Pytest configuration and shared fixtures for the test suite.
"""

from typing import Any, Dict, List, Optional

import pytest

import provider_adapter.config as config_module
from provider_adapter.config import AdapterConfig, IdScheme, TransportType


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep set_config() calls from leaking between tests."""
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def test_config() -> AdapterConfig:
    """Create a test configuration."""
    return AdapterConfig(
        transport=TransportType.HTTP,
        rpc_url="http://node.test:8545",
        ws_url="ws://node.test:8546",
        request_timeout=5.0,
        id_scheme=IdScheme.MONOTONIC,
        log_level="DEBUG",
    )


# ============================================================================
# Test Data
# ============================================================================

TEST_ADDRESS = "0x" + "ab" * 20


@pytest.fixture
def raw_block() -> Dict[str, Any]:
    """A block as returned by eth_getBlockByNumber."""
    return {
        "number": "0x10",
        "hash": "0x" + "11" * 32,
        "parentHash": "0x" + "22" * 32,
        "mixHash": "0x" + "33" * 32,
        "nonce": "0x0000000000000042",
        "sha3Uncles": "0x" + "44" * 32,
        "logsBloom": "0x" + "00" * 256,
        "transactionsRoot": "0x" + "55" * 32,
        "stateRoot": "0x" + "66" * 32,
        "receiptsRoot": "0x" + "77" * 32,
        "miner": TEST_ADDRESS,
        "difficulty": "0x4ea3f27bc",
        "totalDifficulty": "0x78ed983323d",
        "extraData": "0x476574682f4c5649562f76312e302e302f6c696e75782f676f312e342e32",
        "size": "0x220",
        "gasLimit": "0x5208",
        "gasUsed": "0x0",
        "timestamp": "0x55ba467c",
        "transactions": ["0x" + "88" * 32],
        "uncles": [],
    }


# ============================================================================
# Fake Providers
# ============================================================================

class FakeRequestProvider:
    """Request-style provider answering from a method -> result table."""

    def __init__(
        self,
        responses: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ):
        self.responses = responses or {}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def request(self, args: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return {"jsonrpc": "2.0", "id": len(self.calls), "result": self.responses.get(args["method"])}


class FakeSendProvider:
    """Send-style provider invoking the callback synchronously."""

    def __init__(
        self,
        responses: Optional[Dict[str, Any]] = None,
        error: Any = None,
    ):
        self.responses = responses or {}
        self.error = error
        self.payloads: List[Dict[str, Any]] = []

    def send(self, payload: Dict[str, Any], callback) -> None:
        self.payloads.append(payload)
        if self.error is not None:
            callback(self.error, None)
            return
        callback(None, {
            "jsonrpc": "2.0",
            "id": payload["id"],
            "result": self.responses.get(payload["method"]),
        })


class FakeDualProvider(FakeRequestProvider):
    """Provider exposing both request() and send()."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        super().__init__(responses)
        self.sent: List[Dict[str, Any]] = []

    def send(self, payload: Dict[str, Any], callback) -> None:
        self.sent.append(payload)
        callback(None, {"result": None})


@pytest.fixture
def request_provider() -> FakeRequestProvider:
    """Create a request-style provider with canned results."""
    return FakeRequestProvider()


@pytest.fixture
def send_provider() -> FakeSendProvider:
    """Create a send-style provider with canned results."""
    return FakeSendProvider()
