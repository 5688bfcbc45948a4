"""
Configuration management for the provider adapter.

Supports configuration via environment variables and .env files.
"""

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransportType(str, Enum):
    """Concrete provider transports."""
    HTTP = "http"
    WEBSOCKET = "websocket"


class IdScheme(str, Enum):
    """Correlation id schemes for send-style requests."""
    MONOTONIC = "monotonic"
    TIMESTAMP = "timestamp"


class AdapterConfig(BaseSettings):
    """
    Configuration settings for the provider adapter.

    All settings can be configured via environment variables with the ADAPTER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADAPTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Transport settings
    transport: TransportType = Field(
        default=TransportType.HTTP,
        description="Provider transport used to reach the node"
    )
    rpc_url: str = Field(
        default="http://localhost:8545",
        description="HTTP JSON-RPC endpoint of the node"
    )
    ws_url: str = Field(
        default="ws://localhost:8546",
        description="WebSocket JSON-RPC endpoint of the node"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds for concrete providers"
    )

    # Correlation id settings
    id_scheme: IdScheme = Field(
        default=IdScheme.MONOTONIC,
        description="How send-style request ids are generated"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )


# Global config instance
_config: Optional[AdapterConfig] = None


def get_config() -> AdapterConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AdapterConfig()
    return _config


def set_config(config: AdapterConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
