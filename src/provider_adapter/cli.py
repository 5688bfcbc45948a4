"""
Command-line interface for the provider adapter.

Runs single node queries through the adapter and prints the results as JSON.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import structlog

from provider_adapter import __version__
from provider_adapter.config import AdapterConfig, IdScheme, TransportType, set_config
from provider_adapter.core.adapter import ProviderAdapter
from provider_adapter.providers import create_provider
from provider_adapter.providers.interface import ProviderError


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # logs go to stderr so stdout stays valid JSON
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
    )


def _add_block_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--block",
        default="latest",
        help="Block number, hex string or tag (default: latest)",
    )


def _block_arg(value: str) -> Any:
    """Keep tags and hex as strings, turn plain digits into ints."""
    return int(value) if value.isdigit() else value


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="provider-adapter",
        description="Query an Ethereum node through the provider adapter",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--transport",
        choices=[t.value for t in TransportType],
        default=None,
        help="Provider transport (default: from ADAPTER_TRANSPORT or http)",
    )
    parser.add_argument(
        "--rpc-url",
        help="HTTP JSON-RPC endpoint",
    )
    parser.add_argument(
        "--ws-url",
        help="WebSocket JSON-RPC endpoint",
    )
    parser.add_argument(
        "--id-scheme",
        choices=[s.value for s in IdScheme],
        default=None,
        help="Correlation id scheme for WebSocket requests",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Query to run")

    subparsers.add_parser("block-number", help="Latest block number")
    subparsers.add_parser("network-id", help="Network id (net_version)")

    block_parser = subparsers.add_parser("block", help="Block by number or tag")
    block_parser.add_argument("block", type=_block_arg, help="Block number, hex string or tag")

    code_parser = subparsers.add_parser("code", help="Contract code at an address")
    code_parser.add_argument("address")
    _add_block_argument(code_parser)

    balance_parser = subparsers.add_parser("balance", help="Account balance in wei")
    balance_parser.add_argument("address")
    _add_block_argument(balance_parser)

    count_parser = subparsers.add_parser("tx-count", help="Account transaction count")
    count_parser.add_argument("address")
    _add_block_argument(count_parser)

    storage_parser = subparsers.add_parser("storage", help="Contract storage slot")
    storage_parser.add_argument("address")
    storage_parser.add_argument(
        "position",
        type=lambda v: int(v, 0),
        help="Storage slot (decimal or 0x hex)",
    )
    _add_block_argument(storage_parser)

    logs_parser = subparsers.add_parser("logs", help="Logs in a block range")
    logs_parser.add_argument("--from-block", type=_block_arg)
    logs_parser.add_argument("--to-block", type=_block_arg)
    logs_parser.add_argument(
        "--address",
        action="append",
        help="Contract address (repeat for several)",
    )

    return parser


def build_config(args: argparse.Namespace) -> AdapterConfig:
    """Build configuration from environment defaults and CLI overrides."""
    overrides = {
        "log_level": args.log_level,
        "log_json": args.log_json,
    }
    if args.transport:
        overrides["transport"] = TransportType(args.transport)
    if args.rpc_url:
        overrides["rpc_url"] = args.rpc_url
    if args.ws_url:
        overrides["ws_url"] = args.ws_url
    if args.id_scheme:
        overrides["id_scheme"] = IdScheme(args.id_scheme)
    return AdapterConfig(**overrides)


async def run_query(adapter: ProviderAdapter, args: argparse.Namespace) -> Any:
    """Run the query selected on the command line."""
    command = args.command
    if command == "block-number":
        return await adapter.get_block_number()
    if command == "network-id":
        return await adapter.get_network_id()
    if command == "block":
        return await adapter.get_block_by_number(args.block)
    if command == "code":
        return await adapter.get_code(args.address, _block_arg(args.block))
    if command == "balance":
        return await adapter.get_balance(args.address, _block_arg(args.block))
    if command == "tx-count":
        return await adapter.get_transaction_count(args.address, _block_arg(args.block))
    if command == "storage":
        return await adapter.get_storage_at(args.address, args.position, _block_arg(args.block))
    if command == "logs":
        address = args.address
        if address and len(address) == 1:
            address = address[0]
        return await adapter.get_past_logs(
            from_block=args.from_block,
            to_block=args.to_block,
            address=address,
        )
    raise ValueError(f"Unknown command: {command}")


async def execute(args: argparse.Namespace) -> Any:
    """Open a provider, run one query and close the provider."""
    config = build_config(args)
    set_config(config)

    provider = create_provider(config)
    await provider.connect()
    try:
        adapter = ProviderAdapter(provider, config)
        return await run_query(adapter, args)
    finally:
        await provider.disconnect()


def main() -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level, args.log_json)

    try:
        result = asyncio.run(execute(args))
    except ProviderError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
